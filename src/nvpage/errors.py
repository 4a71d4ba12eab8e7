class PageError(Exception):
    """ Base class for errors raised by page. """


class FatalPageError(PageError):
    """ An error after which page cannot continue. """


class ConnectionFailedError(FatalPageError):
    """ Indicates neovim could not be reached at the requested or derived address. """


class SpawnError(FatalPageError):
    """ Indicates the child neovim process could not be started. """


class RedirectProtectionError(FatalPageError):
    """ The redirect protection directory could not be created. """


class InstanceStateError(FatalPageError):
    """
    Reading an instance mark failed in a way that is not a missing variable.
    Neovim's variable storage no longer behaves as expected.
    """


class ReceiverDisconnectedError(FatalPageError):
    """ A notification was sent after the consumer stopped receiving them. """


class BufferTitleError(PageError):
    """ The buffer could not be renamed. """
