import logging
import os
import shlex
import subprocess

from nvpage.errors import SpawnError

logger = logging.getLogger(__name__)

# relative to $XDG_CONFIG_HOME and $HOME respectively
XDG_CONFIG_SUBPATH = os.path.join('page', 'init.vim')
HOME_CONFIG_SUBPATH = os.path.join('.config', 'page', 'init.vim')

# seconds a terminated child neovim gets to exit before it is killed
TERMINATE_TIMEOUT = 1.0


class NeovimProcess:
    """ A locally spawned neovim process that page talks to over its listen socket. """

    def __init__(self, args, executable='nvim'):
        """
        args: the arguments passed to neovim.
        raises OSError and ValueError
        """
        self.executable = executable
        self.args = args
        self.process = None
        self._load()

    def _load(self):
        # stdin is /dev/null so neovim never reads the input page is paging
        self.process = subprocess.Popen([self.executable] + list(self.args), stdin=subprocess.DEVNULL)

    @property
    def pid(self):
        return self.process.pid

    @property
    def open(self):
        """
        The process is considered open if it is still alive.
        """
        return self.process is not None and \
            self.process.poll() is None

    def wait_for_exit(self):
        return self.process.wait()

    def terminate(self, timeout=TERMINATE_TIMEOUT):
        """
        Stops a process page no longer talks to. Sends SIGTERM, then SIGKILL if neovim
        hasn't exited within the timeout.
        """
        if not self.open:
            return self.process.returncode
        logger.debug("terminating neovim process %s" % self.pid)
        self.process.terminate()
        try:
            return self.process.wait(timeout)
        except subprocess.TimeoutExpired:
            logger.warning("neovim process %s did not exit, killing it" % self.pid)
            self.process.kill()
            return self.process.wait()


def default_config_path(environ=os.environ):
    """
    Returns the path to the user's page init.vim, if it's present in one of the standard locations.
    """
    xdg_config_home = environ.get('XDG_CONFIG_HOME')
    if xdg_config_home:
        p = os.path.join(xdg_config_home, XDG_CONFIG_SUBPATH)
        if os.path.exists(p):
            logger.debug("default config: use $XDG_CONFIG_HOME: %s" % p)
            return p
    home = environ.get('HOME')
    if home:
        p = os.path.join(home, HOME_CONFIG_SUBPATH)
        if os.path.exists(p):
            logger.debug("default config: use ~/.config: %s" % p)
            return p
    return None


def build_nvim_args(listen_address, config=None, arguments=None, environ=os.environ):
    """
    Builds the neovim argument list.
    :param listen_address: the socket neovim should listen on.
    :param config: explicit init file. When not given, the default page init.vim is used if present.
    :param arguments: extra arguments, split with shell quoting rules.
    raises SpawnError when the extra arguments cannot be split.
    """
    args = ['--cmd', 'set shortmess+=I', '--listen', listen_address]
    if config is None:
        config = default_config_path(environ)
    if config is not None:
        args += ['-u', config]
    if arguments:
        try:
            args += shlex.split(arguments)
        except ValueError as e:
            raise SpawnError("Cannot parse neovim arguments '%s': %s" % (arguments, e)) from e
    return args


def spawn_child_nvim_process(listen_address, config=None, arguments=None, executable='nvim',
                             environ=os.environ) -> NeovimProcess:
    """
    Spawns a child neovim process listening on the given address.

    This doesn't use neovim's --embed flag, so neovim draws its UI on the terminal page runs in,
    and the child doesn't inherit page's stdin.
    """
    args = build_nvim_args(listen_address, config, arguments, environ)
    logger.debug("new neovim process: %s %s" % (executable, args))
    try:
        return NeovimProcess(args, executable)
    except (OSError, ValueError) as e:
        raise SpawnError("Cannot spawn a child neovim process '%s': %s" % (executable, e)) from e
