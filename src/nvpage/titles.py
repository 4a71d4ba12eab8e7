import logging

from pynvim.api import NvimError

from nvpage.errors import BufferTitleError
from nvpage.rpc.classify import is_rename_collision

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUFFIX = 99


def title_candidates(title, max_suffix=DEFAULT_MAX_SUFFIX):
    """
    Lists the names tried for a title, in order.
    >>> list(title_candidates('out', 2))
    [(0, 'out'), (1, 'out(1)'), (2, 'out(2)')]
    """
    yield 0, title
    for attempt_nr in range(1, max_suffix + 1):
        yield attempt_nr, "%s(%d)" % (title, attempt_nr)


class BufferTitleManager:
    """
    Renames buffers. When another buffer already has the name, "(1)", "(2)", ... is appended
    until a free name is found or max_suffix is reached.
    """

    def __init__(self, nvim, max_suffix=DEFAULT_MAX_SUFFIX):
        self.nvim = nvim
        self.max_suffix = max_suffix

    def update(self, buffer, title):
        """
        Renames the buffer and redraws so the statusline shows the new name.
        :return: the name given to the buffer.
        raises BufferTitleError if renaming fails for a reason other than the name being
        taken, or every suffix is taken.
        """
        logger.debug("update title: %s => %s" % (buffer, title))
        for attempt_nr, name in title_candidates(title, self.max_suffix):
            try:
                buffer.name = name
            except NvimError as e:
                logger.debug("update title: %s => %s: %s" % (buffer, name, e))
                if not is_rename_collision(e):
                    raise BufferTitleError("Cannot update title '%s': %s" % (title, e)) from e
                continue
            self.nvim.command('redraw!')
            return name
        raise BufferTitleError("Cannot update title '%s': names up to '%s(%d)' are taken" %
                               (title, title, self.max_suffix))
