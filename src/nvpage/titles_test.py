import unittest
from unittest.mock import Mock

from hamcrest import assert_that, calling, is_, raises
from pynvim.api import NvimError

from nvpage.errors import BufferTitleError
from nvpage.titles import BufferTitleManager, title_candidates


class NamedBuffer:
    """ a buffer whose rename fails when the name is used by another buffer """
    def __init__(self, taken, error=None):
        self.taken = set(taken)
        self.error = error
        self.attempts = []
        self._name = ''

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        self.attempts.append(value)
        if self.error is not None:
            raise self.error
        if value in self.taken:
            raise NvimError("Failed to rename buffer")
        self._name = value


class TitleCandidatesTest(unittest.TestCase):
    def test_candidates(self):
        candidates = list(title_candidates('out'))
        assert_that(len(candidates), is_(100))
        assert_that(candidates[0], is_((0, 'out')))
        assert_that(candidates[1], is_((1, 'out(1)')))
        assert_that(candidates[-1], is_((99, 'out(99)')))


class BufferTitleManagerTest(unittest.TestCase):
    def setUp(self):
        self.nvim = Mock()
        self.sut = BufferTitleManager(self.nvim)

    def test_free_title(self):
        buffer = NamedBuffer([])
        assert_that(self.sut.update(buffer, 'out'), is_('out'))
        assert_that(buffer.name, is_('out'))
        self.nvim.command.assert_called_once_with('redraw!')

    def test_taken_titles_get_suffix(self):
        buffer = NamedBuffer(['out'] + ['out(%d)' % n for n in range(1, 6)])
        assert_that(self.sut.update(buffer, 'out'), is_('out(6)'))
        assert_that(buffer.attempts, is_(['out', 'out(1)', 'out(2)', 'out(3)', 'out(4)', 'out(5)', 'out(6)']))
        self.nvim.command.assert_called_once_with('redraw!')

    def test_all_suffixes_taken(self):
        buffer = NamedBuffer(['out'] + ['out(%d)' % n for n in range(1, 100)])
        assert_that(calling(self.sut.update).with_args(buffer, 'out'), raises(BufferTitleError, r"out\(99\)"))
        assert_that(len(buffer.attempts), is_(100))
        assert_that(buffer.attempts[-1], is_('out(99)'))
        assert_that('out(100)' in buffer.attempts, is_(False))
        self.nvim.command.assert_not_called()

    def test_other_error_is_not_retried(self):
        buffer = NamedBuffer([], error=NvimError("Invalid buffer id: 4"))
        assert_that(calling(self.sut.update).with_args(buffer, 'out'), raises(BufferTitleError, "Invalid buffer id"))
        assert_that(buffer.attempts, is_(['out']))
        self.nvim.command.assert_not_called()

    def test_configured_max_suffix(self):
        buffer = NamedBuffer(['out', 'out(1)', 'out(2)'])
        sut = BufferTitleManager(self.nvim, max_suffix=2)
        assert_that(calling(sut.update).with_args(buffer, 'out'), raises(BufferTitleError))
        assert_that(buffer.attempts, is_(['out', 'out(1)', 'out(2)']))
