import logging
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'

# The name shared by all page configuration files
config_name = 'page'

# The directory holding the packaged configuration files
config_directory = os.path.dirname(__file__)


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory=None):
    """
    Determines the location of a config file in the given directory.
    """
    config_file = os.path.join(directory, name + config_extension)
    return config_file


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name.
    :param name:    The name of the base configuration
    :param subpart: The name of the specialization.
    :return: The ConfigObj for the configuration file.
    """
    configname = config_flavor(name, subpart)
    file = config_filename(configname, directory)
    config = load_config_file_base(file, False)
    return config


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def user_config_directory(environ=os.environ):
    """
    The directory holding the user's page configuration:
    $XDG_CONFIG_HOME/page, falling back to ~/.config/page.
    """
    config_home = environ.get('XDG_CONFIG_HOME')
    if not config_home:
        config_home = os.path.join(environ.get('HOME', os.path.expanduser('~')), '.config')
    return os.path.join(config_home, 'page')


def load_config(name, directory, user_directory=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are loaded in this order:
        - the default specialization
        - the platform specialization
        - the user override
        The configurations are flattened into a single configuration, and then validated
        against a configuration specialization "schema".
    :directory: the location of the packaged configuration files
    :user_directory: the location of the user override, if any
    :return:
    """
    default_config = config_flavor_file(name, directory, 'default')
    platform_config = config_flavor_file(name, directory, os_name())
    config = ConfigObj(configspec=config_filename(config_flavor(name, 'schema'), directory))
    config.merge(default_config)
    config.merge(platform_config)
    if user_directory:
        user_file = config_filename(name, user_directory)
        logger.debug("user configuration %s" % user_file)
        config.merge(load_config_file_base(user_file, must_exist=False))

    validator = Validator()
    result = config.validate(validator)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:   An iterable that lists the names of the config to resolve
    :return: The configuration object identified by the path
    """
    for p in path:    # lookup specific section
        conf = conf.get(p, None)
        if conf is None:
            return
    return conf


def apply_conf_path(conf: Section, name_parts, target):
    """
    Applies a configuration path to a given target object
    :param conf:        The root configuration object
    :param name_parts:  The path of the configuration to apply
    :param target:      The target object that receives the configured values
    :return:
    """
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def apply_conf(conf: Section, target):
    """
    Applies the attributes contained in a configuration object to a target object.
    It does this by iterating over the items in the configuration and setting any attributes with the same name.
    :param conf:
    :param target:
    :return:
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)


class Settings:
    """
    Tunable constants used by the connection, notification and title modules.
    The class attributes are the built-in defaults; configuration files override them.
    """
    connect_attempts = 100
    connect_interval = 0.016
    executable = 'nvim'
    queue_capacity = 16
    max_suffix = 99

    sections = ('connection', 'notifications', 'titles')

    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise TypeError("unknown setting '%s'" % k)
            setattr(self, k, v)


def load_settings(directory=config_directory, user_directory=None, environ=os.environ) -> Settings:
    """
    Loads page settings from the packaged configuration, layered with the user's page.cfg.
    """
    if user_directory is None:
        user_directory = user_config_directory(environ)
    conf = load_config(config_name, directory, user_directory)
    settings = Settings()
    for section in Settings.sections:
        apply_conf_path(conf, [section], settings)
    return settings
