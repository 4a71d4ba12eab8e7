import os
import shutil
import tempfile
import unittest

from configobj import ConfigObj, ConfigObjError
from hamcrest import assert_that, calling, equal_to, has_property, is_, is_not, raises

from nvpage.config.config import Settings, apply_conf, apply_conf_path, config_directory, config_filename, \
    config_flavor, fetch_conf_path, load_config, load_config_file_base, load_settings, map_os_name, \
    user_config_directory


class ConfigTestCase(unittest.TestCase):

    def setUp(self):
        self.user_directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.user_directory)

    def write_user_config(self, text):
        with open(os.path.join(self.user_directory, 'page.cfg'), 'w') as f:
            f.write(text)

    def test_config_file_not_found(self):
        assert_that(calling(load_config_file_base).with_args('blah'), raises(IOError))

    def test_config_file_invalid_syntax(self):
        self.write_user_config('[[nested]]\n')
        file = os.path.join(self.user_directory, 'page.cfg')
        assert_that(calling(load_config_file_base).with_args(file),
                    raises(ConfigObjError, "at .*page.cfg"))

    def test_can_retrieve_packaged_config_files(self):
        for flavor in ('default', 'schema'):
            file = config_filename(config_flavor('page', flavor), config_directory)
            assert_that(os.path.exists(file), is_(True), "expected config path %s to exist" % file)

    def test_defaults(self):
        settings = load_settings(user_directory=self.user_directory)
        assert_that(settings.connect_attempts, is_(100))
        assert_that(settings.connect_interval, is_(0.016))
        assert_that(settings.executable, is_('nvim'))
        assert_that(settings.queue_capacity, is_(16))
        assert_that(settings.max_suffix, is_(99))

    def test_user_override(self):
        self.write_user_config('[connection]\nconnect_attempts = 5\nexecutable = /opt/nvim/bin/nvim\n'
                               '[titles]\nmax_suffix = 3\n')
        settings = load_settings(user_directory=self.user_directory)
        assert_that(settings.connect_attempts, is_(5))
        assert_that(settings.executable, is_('/opt/nvim/bin/nvim'))
        assert_that(settings.max_suffix, is_(3))
        assert_that(settings.queue_capacity, is_(16))

    def test_user_override_fails_validation(self):
        self.write_user_config('[connection]\nconnect_attempts = 0\n')
        assert_that(calling(load_config).with_args('page', config_directory, self.user_directory),
                    raises(ConfigObjError, "the config file page failed validation"))

    def test_user_override_with_wrong_type(self):
        self.write_user_config('[notifications]\nqueue_capacity = many\n')
        assert_that(calling(load_settings).with_args(user_directory=self.user_directory),
                    raises(ConfigObjError))

    def test_map_os_name(self):
        assert_that(map_os_name('Windows'), is_('windows'))
        assert_that(map_os_name('Darwin'), is_('osx'))
        assert_that(map_os_name('darwin'), is_('osx'))

    def test_non_existent_config_path(self):
        sut = ConfigObj()
        assert_that(fetch_conf_path(sut, ['abcd']), is_(None))

    def test_non_existent_apply_config_path(self):
        sut = ConfigObj()
        target = Settings()
        apply_conf_path(sut, ['abcd'], target)
        assert_that(target.connect_attempts, is_(100))

    def test_apply_conf_only_sets_known_attributes(self):
        target = Settings()
        apply_conf({'max_suffix': 7, 'missing_value': 1}, target)
        assert_that(target.max_suffix, is_(equal_to(7)))
        assert_that(target, is_not(has_property('missing_value')))


class UserConfigDirectoryTest(unittest.TestCase):
    def test_xdg_config_home(self):
        assert_that(user_config_directory({'XDG_CONFIG_HOME': '/x', 'HOME': '/h'}), is_('/x/page'))

    def test_home(self):
        assert_that(user_config_directory({'HOME': '/h'}), is_('/h/.config/page'))

    def test_empty_xdg_config_home(self):
        assert_that(user_config_directory({'XDG_CONFIG_HOME': '', 'HOME': '/h'}), is_('/h/.config/page'))


class SettingsTest(unittest.TestCase):
    def test_keyword_overrides(self):
        assert_that(Settings(connect_attempts=3).connect_attempts, is_(3))
        assert_that(Settings().connect_attempts, is_(100))

    def test_unknown_setting(self):
        assert_that(calling(Settings).with_args(bogus=1), raises(TypeError))

    def test_load_settings_uses_environment(self):
        config_home = tempfile.mkdtemp()
        try:
            os.mkdir(os.path.join(config_home, 'page'))
            with open(os.path.join(config_home, 'page', 'page.cfg'), 'w') as f:
                f.write('[notifications]\nqueue_capacity = 4\n')
            settings = load_settings(environ={'XDG_CONFIG_HOME': config_home})
            assert_that(settings.queue_capacity, is_(4))
        finally:
            shutil.rmtree(config_home)


if __name__ == '__main__':  # pragma no cover
    unittest.main()
