"""
Notifications sent from neovim to page.

Neovim sends `rpcnotify(0, 'page_fetch_lines', <page id>[, <count>])` and
`rpcnotify(0, 'page_buffer_closed', <page id>)` from commands and autocmds that the embedding
program defines on its output buffer. A NotificationListener receives them on a background thread, a
NotificationReceiver keeps those addressed to this page invocation and turns them into
typed events, and a bounded NotificationQueue hands the events to the control loop in the
order they arrived.
"""
import logging
from queue import Queue

from nvpage.errors import ReceiverDisconnectedError
from nvpage.support.async_loop import AsyncLoop
from nvpage.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)

FETCH_LINES = 'page_fetch_lines'
BUFFER_CLOSED = 'page_buffer_closed'

NOTIFICATIONS = (FETCH_LINES, BUFFER_CLOSED)

DEFAULT_CAPACITY = 16


class NotificationFromNeovim(CommonEqualityMixin, StringerMixin):
    """ base class for notifications. Every notification carries the id of the page it is addressed to. """
    def __init__(self, session_id):
        self.session_id = session_id


class FetchPart(NotificationFromNeovim):
    """ The user asked for the next part of the input. """


class FetchLines(NotificationFromNeovim):
    """ The user asked for a number of lines of the input. """
    def __init__(self, session_id, count):
        super().__init__(session_id)
        self.count = count


class BufferClosed(NotificationFromNeovim):
    """ The output buffer was deleted. """


def _is_line_count(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class NotificationQueue(Queue):
    """
    A bounded queue with one producer, the listener, and one consumer, the control loop.
    A full queue blocks the producer. Once the consumer closes the queue, any further send
    raises ReceiverDisconnectedError. When the producer finishes, the consumer receives None.
    """

    def __init__(self, maxsize=DEFAULT_CAPACITY):
        if maxsize < 1:
            raise ValueError("queue capacity must be at least 1, not %s" % maxsize)
        super().__init__(maxsize)
        self.closed = False
        self.ended = False

    def _put(self, item):
        if self.closed:
            raise ReceiverDisconnectedError("cannot send notification %s: receiver is disconnected" % item)
        super()._put(item)

    def send(self, event: NotificationFromNeovim):
        """ Sends an event, blocking while the queue is full. """
        self.put(event)

    def finish(self):
        """ Called by the producer when no further events will be sent. """
        if not self.closed:
            self.put(None)

    def receive(self, timeout=None):
        """
        Blocks until the next event arrives.
        :return: the event, or None once the producer has finished.
        raises queue.Empty if a timeout is given and expires.
        """
        if self.ended:
            return None
        event = self.get(timeout=timeout)
        if event is None:
            self.ended = True
        return event

    def close(self):
        """ Called by the consumer when it stops receiving. Pending events are dropped. """
        with self.mutex:
            self.closed = True
            self.queue.clear()
            self.not_full.notify_all()


class NotificationReceiver:
    """
    Receives notifications addressed to one page and sends them to the queue.

    :param session_id: the id of this page invocation. Notifications for other ids are dropped.
    :param queue: the queue the control loop receives from.
    """

    def __init__(self, session_id, queue: NotificationQueue):
        self.session_id = session_id
        self.queue = queue

    def handle_notification(self, name, args):
        logger.debug("notification %s: %s" % (name, args))
        page_id = args[0] if args else None
        if page_id != self.session_id:
            logger.warning("invalid page id %s in notification %s" % (page_id, name))
            return None
        if name == FETCH_LINES:
            count = args[1] if len(args) > 1 else None
            event = FetchLines(page_id, count) if _is_line_count(count) else FetchPart(page_id)
        elif name == BUFFER_CLOSED:
            event = BufferClosed(page_id)
        else:
            logger.warning("unhandled notification %s" % name)
            return None
        self.queue.send(event)
        return event

    def handle_request(self, name, args):
        logger.warning("unhandled request %s: %s" % (name, args))
        return 0


class NotificationListener(AsyncLoop):
    """
    Runs the event loop of a dedicated neovim channel on a background thread, passing
    notifications to a receiver.

    The channel is used only by this listener: a pynvim session may not be used from two
    threads, and only a channel that has subscribed receives broadcast notifications.
    """

    def __init__(self, nvim, receiver: NotificationReceiver, log=logger):
        super().__init__(log=log)
        self.nvim = nvim
        self.receiver = receiver

    @property
    def queue(self) -> NotificationQueue:
        return self.receiver.queue

    def subscribe(self):
        for name in NOTIFICATIONS:
            self.nvim.subscribe(name)

    def loop(self):
        try:
            self.nvim.run_loop(self._on_request, self._on_notification)
        finally:
            # run_loop returns when neovim closes the channel or stop_loop is called
            self.stop_event.set()

    def shutdown(self):
        self.queue.finish()
        self.nvim.close()

    def _on_request(self, name, args):
        return self.receiver.handle_request(name, args)

    def _on_notification(self, name, args):
        try:
            self.receiver.handle_notification(name, args)
        except ReceiverDisconnectedError as e:
            self.logger.critical("notification listener stopped: %s" % e)
            self.nvim.stop_loop()

    def stop(self):
        if self.background_thread is not None and self.running():
            try:
                self.nvim.async_call(self.nvim.stop_loop)
            except (RuntimeError, OSError) as e:
                # the loop has already finished and closed
                self.logger.debug("cannot interrupt notification loop: %s" % e)
        super().stop()


def subscribe(nvim, session_id, capacity=DEFAULT_CAPACITY) -> NotificationListener:
    """
    Subscribes the given channel to page notifications and starts listening on a background thread.
    :param nvim: a neovim session used only by the listener.
    :param session_id: notifications for other page ids are dropped.
    :return: the running listener. Events are received from its queue.
    """
    logger.debug("subscribe to notifications, id: %s" % session_id)
    receiver = NotificationReceiver(session_id, NotificationQueue(capacity))
    listener = NotificationListener(nvim, receiver)
    listener.subscribe()
    listener.start()
    return listener
