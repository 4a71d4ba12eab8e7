import logging
import os
import tempfile
import uuid

from nvpage.config.config import Settings, load_settings

logger = logging.getLogger(__name__)

TMP_DIR_NAME = 'neovim-page'


def default_tmp_dir():
    return os.path.join(tempfile.gettempdir(), TMP_DIR_NAME)


class PageContext:
    """
    The state of one page invocation that the connection core needs.

    :param session_id:  identifies this invocation. Scopes notifications and the spawned socket.
    :param tmp_dir:     scratch directory holding sockets and the redirect protection directory.
    :param address:     address of an existing neovim to attach to, or None to spawn one.
    :param config:      explicit init file for a spawned neovim.
    :param arguments:   extra arguments for a spawned neovim, split with shell quoting rules.
    :param print_protection:  print the redirect protection path before spawning neovim.
    """

    def __init__(self, session_id, tmp_dir, address=None, config=None, arguments=None,
                 print_protection=False, settings: Settings=None):
        self.session_id = session_id
        self.tmp_dir = tmp_dir
        self.address = address or None
        self.config = config
        self.arguments = arguments
        self.print_protection = print_protection
        self.settings = settings if settings is not None else Settings()

    @classmethod
    def create(cls, address=None, config=None, arguments=None, print_protection=False,
               settings: Settings=None, tmp_dir=None):
        """ Creates a context with a fresh session id, loading settings and creating the scratch directory. """
        tmp_dir = tmp_dir or default_tmp_dir()
        os.makedirs(tmp_dir, exist_ok=True)
        if settings is None:
            settings = load_settings()
        session_id = uuid.uuid4().hex
        logger.debug("page session %s in %s" % (session_id, tmp_dir))
        return cls(session_id, tmp_dir, address, config, arguments, print_protection, settings)

    @property
    def socket_path(self):
        """ the listen address of a neovim spawned by this invocation """
        return os.path.join(self.tmp_dir, 'socket-%s' % self.session_id)
