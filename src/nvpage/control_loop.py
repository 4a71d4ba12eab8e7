import logging

from nvpage import connection
from nvpage.connection import NeovimConnection
from nvpage.context import PageContext
from nvpage.errors import FatalPageError
from nvpage.notifications import BufferClosed, FetchLines, FetchPart

logger = logging.getLogger(__name__)


class NotificationHandler:
    """
    Receives the notifications of one page invocation on the main thread.
    Each method returns False to stop the control loop.
    """

    def fetch_part(self):
        return True

    def fetch_lines(self, count):
        return True

    def buffer_closed(self):
        return False


class ControlLoop:
    """
    Waits for notifications from neovim and passes them to a handler, until the handler
    asks to stop or neovim stops sending them.
    """

    def __init__(self, nvim_connection: NeovimConnection, handler: NotificationHandler):
        self.connection = nvim_connection
        self.handler = handler

    def dispatch(self, event):
        if isinstance(event, FetchLines):
            return self.handler.fetch_lines(event.count)
        if isinstance(event, FetchPart):
            return self.handler.fetch_part()
        if isinstance(event, BufferClosed):
            return self.handler.buffer_closed()
        logger.warning("unexpected notification %s" % event)
        return True

    def run(self):
        """ :return: the number of notifications handled """
        handled = 0
        while True:
            event = self.connection.receive_notification()
            if event is None:
                logger.debug("notifications ended")
                break
            handled += 1
            if self.dispatch(event) is False:
                break
        return handled


def run(context: PageContext, handler_factory, open_connection=connection.open):
    """
    Runs one page invocation: connects to neovim, hands notifications to the handler created
    by handler_factory(nvim_connection) and disconnects.
    Fatal errors exit the process with a message.
    """
    try:
        nvim_connection = open_connection(context)
        try:
            actions = nvim_connection.nvim_actions
            actions.execute_connect_autocmd_on_current_buffer()
            ControlLoop(nvim_connection, handler_factory(nvim_connection)).run()
            actions.execute_disconnect_autocmd_on_current_buffer()
        finally:
            connection.close(nvim_connection)
    except FatalPageError as e:
        logger.critical("%s" % e)
        raise SystemExit("page: %s" % e) from e
