"""
Page instances are named output buffers that later page invocations can write to again.

An instance is marked by the buffer variable b:page_instance = [name, sink path]. The variable
lives in neovim, so every lookup scans the buffers neovim has open rather than remembering
anything locally: buffers come and go without page being told.
"""
import logging

from pynvim.api import NvimError

from nvpage.errors import InstanceStateError
from nvpage.rpc.classify import is_key_not_found

logger = logging.getLogger(__name__)

INSTANCE_VAR = 'page_instance'


def decode_instance_mark(value):
    """
    Decodes the value of an instance mark.
    :return: a (name, sink path) tuple, or None if the value is not a pair of strings.
    """
    if isinstance(value, (list, tuple)) and len(value) == 2 \
            and all(isinstance(v, str) for v in value):
        return value[0], value[1]
    return None


class InstanceRegistry:
    """ Marks, finds, closes and focuses instance buffers on a neovim session. """

    def __init__(self, nvim):
        self.nvim = nvim

    def mark(self, buffer, name, sink_path):
        """ Marks the buffer as the instance called name. Failures are logged. """
        logger.debug("new instance: %s -> %s -> %s" % (buffer, name, sink_path))
        try:
            buffer.vars[INSTANCE_VAR] = [name, sink_path]
        except NvimError as e:
            logger.error("Error when setting instance mark: %s" % e)

    def read_mark(self, buffer):
        """
        Reads the instance mark of a buffer.
        :return: (name, sink path) or None if the buffer isn't marked.
        raises InstanceStateError when the variable can't be read for any other reason.
        """
        try:
            value = buffer.vars[INSTANCE_VAR]
        except (KeyError, NvimError) as e:
            if is_key_not_found(e, INSTANCE_VAR):
                return None
            raise InstanceStateError("Error when getting instance mark: %s" % e) from e
        return decode_instance_mark(value)

    def find(self, name):
        """
        Finds the buffer marked as the named instance.
        :return: (buffer, sink path) for the first buffer with that name, or None.
        """
        for buffer in self.nvim.buffers:
            mark = self.read_mark(buffer)
            logger.debug("instances: %s => %s: %s" % (buffer, name, mark))
            if mark is not None and mark[0] == name:
                logger.debug("found instance: %s -> %s" % mark)
                return buffer, mark[1]
        return None

    def close(self, name):
        """ Deletes the named instance's buffer, discarding changes. Failures are logged. """
        logger.debug("close instance: %s" % name)
        found = self.find(name)
        if found is None:
            return
        buffer = found[0]
        try:
            self.nvim.command("exe 'bd!' . %d" % buffer.number)
        except NvimError as e:
            logger.error("Error when closing instance buffer: %s, %s" % (name, e))

    def focus(self, buffer):
        """
        Makes the buffer current: switches to a window showing it, or shows it in the current window.
        Failures are logged.
        """
        logger.debug("focus instance: %s" % buffer)
        try:
            if self.nvim.current.buffer == buffer:
                return
            for window in self.nvim.windows:
                if window.buffer == buffer:
                    logger.debug("focus instance: use window %s" % window)
                    self.nvim.current.window = window
                    return
            self.nvim.current.buffer = buffer
        except NvimError as e:
            logger.error("Error when focusing instance buffer %s: %s" % (buffer, e))
