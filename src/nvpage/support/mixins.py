"""
Mixins for small value objects: notification events, transports and session targets.
Their state is their attributes, which are set in the constructor and not changed afterwards.
"""


def quote(val):
    """
    >>> quote('/tmp/nvim.sock')
    "'/tmp/nvim.sock'"
    >>> quote(None)
    'None'
    """
    return repr(val) if isinstance(val, str) else str(val)


class StringerMixin:
    """ Renders an object as its class name and attributes, e.g. FetchLines(count=3, session_id='abc') """

    def __str__(self):
        attrs = ", ".join("%s=%s" % (key, quote(val)) for key, val in sorted(vars(self).items()))
        return "%s(%s)" % (type(self).__name__, attrs)


class CommonEqualityMixin(object):
    """ Objects are equal when they are of the same class and have equal attributes. """

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self),) + tuple(sorted(vars(self).items())))
