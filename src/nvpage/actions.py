"""
Actions page performs on neovim over the main channel.

Most calls are best effort: when neovim refuses a cosmetic command the error is logged and
page carries on. Calls whose result page depends on raise.
"""
import logging
import os

from pynvim.api import NvimError

from nvpage.errors import BufferTitleError, PageError
from nvpage.instances import InstanceRegistry
from nvpage.rpc.classify import is_key_not_found
from nvpage.titles import DEFAULT_MAX_SUFFIX, BufferTitleManager

logger = logging.getLogger(__name__)


class NeovimActions:
    """
    Wraps a pynvim session with the operations page needs.

    :param nvim: the main neovim channel. Only used from the thread that created it.
    :param max_suffix: highest numeric suffix tried when renaming buffers.
    """

    def __init__(self, nvim, max_suffix=DEFAULT_MAX_SUFFIX):
        self.nvim = nvim
        self.instances = InstanceRegistry(nvim)
        self.titles = BufferTitleManager(nvim, max_suffix)

    def get_current_window_and_buffer(self):
        return self.nvim.current.window, self.nvim.current.buffer

    def get_current_buffer(self):
        return self.nvim.current.buffer

    def get_buffer_number(self, buffer):
        return buffer.number

    def create_substituting_output_buffer(self):
        """ Replaces the current window's buffer with a terminal buffer that page writes into. """
        self.nvim.command('term tail -f <<EOF')
        buffer = self.get_current_buffer()
        logger.debug("new substituting output buffer: %d" % buffer.number)
        return buffer

    def get_current_buffer_pty_path(self):
        """ The pty of the current terminal buffer. Output written there appears in the buffer. """
        chan_info = self.nvim.eval('nvim_get_chan_info(&channel)')
        pty = chan_info.get('pty') if isinstance(chan_info, dict) else None
        if not pty:
            raise PageError("Cannot find 'pty' on channel info: %s" % chan_info)
        logger.debug("use pty: %s" % pty)
        return pty

    def mark_buffer_as_instance(self, buffer, name, sink_path):
        self.instances.mark(buffer, name, sink_path)

    def find_instance_buffer(self, name):
        return self.instances.find(name)

    def close_instance_buffer(self, name):
        self.instances.close(name)

    def focus_instance_buffer(self, buffer):
        self.instances.focus(buffer)

    def update_buffer_title(self, buffer, title):
        """ Renames the buffer. A failure is logged and leaves the old name. """
        try:
            return self.titles.update(buffer, title)
        except BufferTitleError as e:
            logger.error("%s" % e)
            return None

    def _command_or_log(self, cmd, description):
        try:
            self.nvim.command(cmd)
            return True
        except NvimError as e:
            logger.error("%s: %s" % (description, e))
            return False

    def execute_connect_autocmd_on_current_buffer(self):
        logger.debug("au PageConnect")
        return self._command_or_log('silent doautocmd User PageConnect', "Cannot execute PageConnect")

    def execute_disconnect_autocmd_on_current_buffer(self):
        logger.debug("au PageDisconnect")
        return self._command_or_log('silent doautocmd User PageDisconnect', "Cannot execute PageDisconnect")

    def execute_command_post(self, cmd):
        logger.debug("command post: %s" % cmd)
        return self._command_or_log(cmd, "Error when executing post command '%s'" % cmd)

    def switch_to_window_and_buffer(self, win_and_buf):
        window, buffer = win_and_buf
        logger.debug("set window and buffer: win:%s buf:%s" % (window, buffer))
        try:
            self.nvim.current.window = window
        except NvimError as e:
            logger.error("Can't switch to window: %s" % e)
        try:
            self.nvim.current.buffer = buffer
        except NvimError as e:
            logger.error("Can't switch to buffer: %s" % e)

    def switch_to_buffer(self, buffer):
        logger.debug("set buffer: %s" % buffer)
        self.nvim.current.buffer = buffer

    def open_file_buffer(self, file_path):
        """
        Opens a file in the current window.
        raises OSError if the file doesn't exist and NvimError if neovim can't open it.
        """
        logger.debug("open file: %s" % file_path)
        path = os.path.realpath(file_path)
        if not os.path.exists(path):
            raise FileNotFoundError("No such file: '%s'" % file_path)
        self.nvim.command('e %s' % self.nvim.funcs.fnameescape(path))

    def notify_query_finished(self, lines_read):
        logger.debug("query finished: %d" % lines_read)
        self.nvim.command("redraw | echoh Comment | echom '-- [PAGE] %d lines read; has more --' | echoh None"
                          % lines_read)

    def notify_end_of_input(self):
        logger.debug("end input")
        self.nvim.command("redraw | echoh Comment | echom '-- [PAGE] end of input --' | echoh None")

    def get_var_or(self, key, default):
        """ Reads global variable g:<key>, returning default if it isn't set or can't be read. """
        try:
            return str(self.nvim.vars[key])
        except (KeyError, NvimError) as e:
            if not is_key_not_found(e, key):
                logger.error("Error when getting var: %s, %s" % (key, e))
            return default
