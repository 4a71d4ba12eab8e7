import errno
import unittest

from hamcrest import assert_that, is_
from pynvim.api import NvimError

from nvpage.rpc.classify import error_message, is_key_not_found, is_rename_collision, is_socket_not_found


class IsSocketNotFoundTest(unittest.TestCase):
    def test_file_not_found(self):
        assert_that(is_socket_not_found(FileNotFoundError(errno.ENOENT, 'No such file')), is_(True))

    def test_oserror_with_enoent(self):
        assert_that(is_socket_not_found(OSError(errno.ENOENT, 'No such file')), is_(True))

    def test_refused_is_not_tolerated(self):
        assert_that(is_socket_not_found(ConnectionRefusedError(errno.ECONNREFUSED, 'refused')), is_(False))

    def test_permission_denied_is_not_tolerated(self):
        assert_that(is_socket_not_found(PermissionError(errno.EACCES, 'denied')), is_(False))

    def test_other_exceptions(self):
        assert_that(is_socket_not_found(ValueError('bad')), is_(False))


class IsKeyNotFoundTest(unittest.TestCase):
    def test_old_neovim_message(self):
        assert_that(is_key_not_found(NvimError("Key 'page_instance' not found"), 'page_instance'), is_(True))

    def test_new_neovim_message(self):
        assert_that(is_key_not_found(NvimError("Key not found: page_instance"), 'page_instance'), is_(True))

    def test_bytes_message(self):
        assert_that(is_key_not_found(NvimError(b"Key not found: page_instance"), 'page_instance'), is_(True))

    def test_message_for_other_key(self):
        assert_that(is_key_not_found(NvimError("Key not found: other"), 'page_instance'), is_(False))

    def test_other_neovim_error(self):
        assert_that(is_key_not_found(NvimError("Invalid buffer id: 7"), 'page_instance'), is_(False))

    def test_key_error(self):
        assert_that(is_key_not_found(KeyError('page_instance'), 'page_instance'), is_(True))

    def test_unrelated_exception(self):
        assert_that(is_key_not_found(OSError("Key not found: page_instance"), 'page_instance'), is_(False))


class IsRenameCollisionTest(unittest.TestCase):
    def test_collision(self):
        assert_that(is_rename_collision(NvimError("Failed to rename buffer")), is_(True))

    def test_other_error(self):
        assert_that(is_rename_collision(NvimError("Invalid buffer id: 3")), is_(False))
        assert_that(is_rename_collision(ValueError("Failed to rename buffer")), is_(False))


class ErrorMessageTest(unittest.TestCase):
    def test_message(self):
        assert_that(error_message(NvimError(" Key not found: x ")), is_("Key not found: x"))
        assert_that(error_message(NvimError()), is_(""))
