"""
Establishing and tearing down page's connection to neovim.

Page either attaches to a neovim the user named, or spawns a child neovim listening on a socket
in page's scratch directory and polls until the socket accepts connections. This replaces
pynvim's `attach('child', ...)`, which uses --embed: an embedded neovim takes over page's stdin
and doesn't draw its UI on the terminal.
"""
import logging
import os
import time

from pynvim.api import NvimError

from nvpage.actions import NeovimActions
from nvpage.connector.process import NeovimProcess, spawn_child_nvim_process
from nvpage.context import PageContext
from nvpage.errors import ConnectionFailedError, FatalPageError, RedirectProtectionError
from nvpage.notifications import NotificationListener, NotificationQueue, subscribe
from nvpage.rpc.classify import is_socket_not_found
from nvpage.rpc.transport import session_at_address
from nvpage.support.mixins import CommonEqualityMixin, StringerMixin
from nvpage.support.retry_strategy import BoundedRetryStrategy, RetryStrategy

logger = logging.getLogger(__name__)

PROTECTION_DIR_NAME = 'DO-NOT-REDIRECT-OUTSIDE-OF-NVIM-TERM(--help[-W])'


class SessionTarget(CommonEqualityMixin, StringerMixin):
    """ The neovim page talks to during one invocation. """
    def __init__(self, address):
        self.address = address


class AttachTarget(SessionTarget):
    """ A neovim that is already running at the given address. """


class SpawnTarget(SessionTarget):
    """ A child neovim that page spawns, listening on the given address. """


def session_target(context: PageContext) -> SessionTarget:
    if context.address:
        return AttachTarget(context.address)
    return SpawnTarget(context.socket_path)


class NeovimConnection:
    """
    All neovim-related state page needs once the connection is established.

    :param nvim_proc: the child neovim, or None when page attached to an existing neovim.
    :param nvim_actions: actions on the main channel.
    :param initial_win_and_buf: the window and buffer that were current when page connected.
    :param initial_buf_number: the number of that buffer.
    :param listener: the background listener feeding `notifications`.
    """

    def __init__(self, nvim_proc, nvim_actions: NeovimActions, initial_win_and_buf, initial_buf_number,
                 listener: NotificationListener):
        self.nvim_proc = nvim_proc
        self.nvim_actions = nvim_actions
        self.initial_win_and_buf = initial_win_and_buf
        self.initial_buf_number = initial_buf_number
        self.listener = listener

    @property
    def notifications(self) -> NotificationQueue:
        return self.listener.queue

    def is_child_neovim_process_spawned(self):
        return self.nvim_proc is not None

    def receive_notification(self, timeout=None):
        """ Blocks until neovim sends a notification. Returns None once the listener has stopped. """
        return self.notifications.receive(timeout)


def connect_once(address, connect=session_at_address):
    """ Connects to a neovim the user named. Any failure is fatal. """
    try:
        return connect(address)
    except OSError as e:
        raise ConnectionFailedError("Cannot connect to neovim at '%s': %s" % (address, e)) from e


def connect_with_retry(address, retry_strategy: RetryStrategy, connect=session_at_address, sleep=time.sleep):
    """
    Connects to a neovim that is starting up. While its socket doesn't exist yet, waits and tries
    again for as long as the retry strategy allows. Any other connection error is fatal at once.
    """
    attempt_nr = 0
    while True:
        attempt_nr += 1
        try:
            return connect(address)
        except OSError as e:
            if not is_socket_not_found(e):
                raise ConnectionFailedError("Cannot connect to neovim at '%s': %s" % (address, e)) from e
            delay = retry_strategy()
            if delay is None:
                raise ConnectionFailedError("Cannot connect to neovim at '%s' after %d attempts: %s"
                                            % (address, attempt_nr, e)) from e
            logger.debug("cannot connect to child neovim: [attempt #%d] address '%s': %s" % (attempt_nr, address, e))
            sleep(delay)


def print_redirect_protection(tmp_dir, out=None):
    """
    Redirect protection stops commands like "ls > $(page -E q)" from writing neovim's UI into
    files when no neovim is running: "$(page -E q)" is meant to expand to page's sink, but without
    a parent neovim it expands to whatever page prints, i.e. the child neovim's UI. Printing the
    path of a directory first turns that into "ls > <dir> ...", which fails before any file is
    created or overwritten.
    """
    d = os.path.join(tmp_dir, PROTECTION_DIR_NAME)
    try:
        os.makedirs(d, exist_ok=True)
    except OSError as e:
        raise RedirectProtectionError("Cannot create protection directory '%s': %s" % (d, e)) from e
    print(d, file=out, flush=True)
    return d


def session_with_new_neovim_process(context: PageContext, spawn=spawn_child_nvim_process,
                                    connect=session_at_address, sleep=time.sleep):
    """
    Spawns a child neovim and connects to it through a socket in the scratch directory.
    :return: (session, NeovimProcess)
    """
    if context.print_protection:
        print_redirect_protection(context.tmp_dir)
    settings = context.settings
    address = context.socket_path
    nvim_proc = spawn(address, context.config, context.arguments, settings.executable)
    retry_strategy = BoundedRetryStrategy(settings.connect_interval, settings.connect_attempts)
    try:
        nvim = connect_with_retry(address, retry_strategy, connect, sleep)
    except ConnectionFailedError:
        nvim_proc.terminate()
        raise
    return nvim, nvim_proc


def open(context: PageContext, spawn=spawn_child_nvim_process, connect=session_at_address,
         sleep=time.sleep) -> NeovimConnection:
    """
    Connects to the neovim the user named or spawns a new one, and starts listening for notifications.
    If anything fails once a session is established, everything acquired so far is released,
    a spawned child is terminated and ConnectionFailedError is raised.
    """
    target = session_target(context)
    logger.debug("neovim target: %s" % target)
    if isinstance(target, AttachTarget):
        nvim, nvim_proc = connect_once(target.address, connect), None
    else:
        nvim, nvim_proc = session_with_new_neovim_process(context, spawn, connect, sleep)
    listener_nvim, listener = None, None
    try:
        # the listener gets a channel of its own, see NotificationListener
        listener_nvim = connect_once(target.address, connect)
        listener = subscribe(listener_nvim, context.session_id, context.settings.queue_capacity)
        nvim_actions = NeovimActions(nvim, context.settings.max_suffix)
        initial_win_and_buf = nvim_actions.get_current_window_and_buffer()
        initial_buf_number = nvim_actions.get_buffer_number(initial_win_and_buf[1])
    except (FatalPageError, NvimError, OSError) as e:
        release(nvim, nvim_proc, listener_nvim, listener)
        if isinstance(e, FatalPageError):
            raise
        raise ConnectionFailedError("Cannot set up neovim session at '%s': %s" % (target.address, e)) from e
    return NeovimConnection(nvim_proc, nvim_actions, initial_win_and_buf, initial_buf_number, listener)


def _close_session(nvim, description):
    try:
        nvim.close()
    except (NvimError, OSError, RuntimeError) as e:
        logger.debug("cannot close %s: %s" % (description, e))


def release(nvim, nvim_proc=None, listener_nvim=None, listener: NotificationListener=None):
    """
    Releases a partly established connection: stops the listener or closes its channel,
    closes the main channel and terminates the child neovim, if any.
    """
    if listener is not None:
        listener.queue.close()
        listener.stop()
    elif listener_nvim is not None:
        _close_session(listener_nvim, "listener channel")
    _close_session(nvim, "main channel")
    if nvim_proc is not None:
        nvim_proc.terminate()


def close(nvim_connection: NeovimConnection):
    """
    Stops listening and waits until the child neovim exits. Without a child neovim, returns at once.
    """
    nvim_connection.notifications.close()
    nvim_connection.listener.stop()
    nvim_proc = nvim_connection.nvim_proc   # type: NeovimProcess
    if nvim_proc is not None:
        logger.debug("waiting for neovim process %s" % nvim_proc.pid)
        nvim_proc.wait_for_exit()
    nvim_connection.nvim_actions.nvim.close()
