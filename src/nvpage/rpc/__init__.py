"""
Neovim RPC plumbing shared by the connection, notification and instance modules.

- transport: selects a TCP or unix socket transport from an address string and attaches
  a pynvim session through it.
- classify: decides whether an error raised by the transport or by neovim is one of the
  expected shapes ("socket not yet created", "variable not set", "name already in use").
"""
from nvpage.rpc.classify import is_key_not_found, is_rename_collision, is_socket_not_found
from nvpage.rpc.transport import SocketTransport, TcpTransport, session_at_address, transport_for

__all__ = ['is_key_not_found', 'is_rename_collision', 'is_socket_not_found',
           'SocketTransport', 'TcpTransport', 'session_at_address', 'transport_for']
