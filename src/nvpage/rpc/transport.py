import ipaddress
import logging

import pynvim

from nvpage.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)


class Transport(CommonEqualityMixin, StringerMixin):
    """ Describes how to reach a neovim listen address. """

    def attach(self):
        """
        Opens a new pynvim session over this transport.
        raises OSError when the endpoint cannot be reached.
        """
        raise NotImplementedError


class TcpTransport(Transport):
    def __init__(self, host, port):
        self.host = host
        self.port = port

    def attach(self):
        logger.debug("attaching to neovim over tcp %s:%d" % (self.host, self.port))
        return pynvim.attach('tcp', address=self.host, port=self.port)


class SocketTransport(Transport):
    def __init__(self, path):
        self.path = path

    def attach(self):
        logger.debug("attaching to neovim over socket %s" % self.path)
        return pynvim.attach('socket', path=self.path)


def parse_tcp_address(address):
    """
    Parses an ip:port address.
    :return: a (host, port) tuple or None if the address is not of that shape.

    >>> parse_tcp_address('127.0.0.1:6666')
    ('127.0.0.1', 6666)
    >>> parse_tcp_address('[::1]:6666')
    ('::1', 6666)
    >>> parse_tcp_address('/tmp/nvim.sock') is None
    True
    """
    host, sep, port = address.rpartition(':')
    if not sep or not port.isdigit():
        return None
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
        version = 6
    else:
        version = 4
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return None
    port = int(port)
    if ip.version != version or port > 65535:
        return None
    return host, port


def transport_for(address) -> Transport:
    """
    Selects the transport for a neovim listen address: TCP when the address is ip:port,
    otherwise a unix domain socket at that path.
    """
    if not address:
        raise ValueError("neovim address must not be empty")
    tcp = parse_tcp_address(address)
    if tcp is not None:
        return TcpTransport(*tcp)
    return SocketTransport(address)


def session_at_address(address):
    """ Returns a pynvim session backed by a TCP or unix socket. """
    return transport_for(address).attach()
