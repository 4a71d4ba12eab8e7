"""
Runs a loop on a background thread.
"""
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class AsyncLoop:
    """
    Runs `loop()` on a daemon thread until stopped, calling `startup()` before and `shutdown()` after.
    Subclasses override these template methods, or pass the function to run as the loop.
    An exception raised by any of them goes to `exception_handler` and doesn't end the thread.
    """

    def __init__(self, fn: Callable=None, args=(), log=logger, name=None):
        self.fn = fn
        self.args = args
        self.name = name or type(self).__name__
        self.stop_event = threading.Event()
        self.background_thread = None
        self.logger = log

    def start(self):
        """ Starts the background thread. Starting a started loop does nothing. """
        if self.background_thread is not None:
            return
        self.background_thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self.background_thread.start()

    def running(self):
        return not self.stop_event.is_set()

    def stop(self, timeout=None):
        """ Signals the loop to stop and waits for the thread to exit, unless called on that thread. """
        self.stop_event.set()
        thread, self.background_thread = self.background_thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self):
        self._guarded(self.startup)
        while self.running():
            self._guarded(self.loop)
        self._guarded(self.shutdown)
        self.logger.debug("%s exiting" % self.name)

    def _guarded(self, step):
        try:
            step()
        except Exception as e:
            self.exception_handler(e)

    def exception_handler(self, e):
        self.logger.exception(e)

    def startup(self):
        pass

    def loop(self):
        self.fn(*self.args)

    def shutdown(self):
        pass
