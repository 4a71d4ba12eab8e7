"""
Error classification for pynvim and socket errors.

Connection errors are classified by type and errno. pynvim's NvimError only carries neovim's
message text, so "key not found" and rename collisions are recognised by matching the message
against the phrasings that different neovim versions use.
"""
import errno

from pynvim.api import NvimError

# neovim < 0.5 and neovim >= 0.5 respectively
KEY_NOT_FOUND_FORMATS = (
    "Key '{key}' not found",
    "Key not found: {key}",
)

RENAME_COLLISION_MESSAGE = "Failed to rename buffer"


def error_message(e):
    """
    Extracts neovim's message from an error.
    >>> error_message(NvimError(b'Key not found: x'))
    'Key not found: x'
    >>> error_message(NvimError())
    ''
    """
    if not e.args:
        return ''
    message = e.args[0]
    if isinstance(message, bytes):
        message = message.decode('utf-8', errors='replace')
    return str(message).strip()


def is_socket_not_found(e):
    """
    Determines if a connection error means the socket does not exist yet.
    Refused connections and any other error are not included.
    """
    return isinstance(e, FileNotFoundError) or \
        (isinstance(e, OSError) and e.errno == errno.ENOENT)


def is_key_not_found(e, key):
    """
    Determines if an error raised while reading variable `key` means the variable is not set.
    """
    if isinstance(e, KeyError):
        return True
    if not isinstance(e, NvimError):
        return False
    message = error_message(e)
    return any(message == fmt.format(key=key) for fmt in KEY_NOT_FOUND_FORMATS)


def is_rename_collision(e):
    """ Determines if a failed buffer rename was caused by another buffer having the name. """
    return isinstance(e, NvimError) and error_message(e) == RENAME_COLLISION_MESSAGE
