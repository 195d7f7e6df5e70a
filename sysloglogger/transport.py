"""
Transports that deliver an encoded syslog message.

Every sender opens a fresh socket for each message and closes it before
returning, whether the send worked or not. Failures surface as TransportError.
"""
import errno
import logging
import socket
from enum import Enum

from .errors import TransportError

logger = logging.getLogger(__name__)

SYSLOG_PORT = 514
SYSLOG_SOCKET = '/dev/log'

# RFC6587 framing
FRAMING_OCTET_COUNTING = 1
FRAMING_NON_TRANSPARENT = 2


class Transport(Enum):
    """Built-in transports selectable from the settings."""
    UDP = 'udp'
    TCP = 'tcp'
    UNIX = 'unix'


def _resolve(host, port, socktype):
    addrinfo = socket.getaddrinfo(host, port, 0, socktype)
    if not addrinfo:
        raise OSError("getaddrinfo returns an empty list")
    return addrinfo


class UdpMessageSender(object):
    """Sends each message as one UDP datagram to host:port."""

    def __init__(self, host, port=SYSLOG_PORT):
        self.host = host
        self.port = port

    def send(self, data):
        try:
            family, socktype, proto, _, sockaddr = _resolve(self.host, self.port, socket.SOCK_DGRAM)[0]
            with socket.socket(family, socktype, proto) as sock:
                sock.sendto(data, sockaddr)
        except OSError as e:
            raise TransportError('Failed to send syslog datagram to {0}:{1}: {2}'.format(
                self.host, self.port, e), (self.host, self.port)) from e
        logger.debug('Sent %d bytes to udp://%s:%s', len(data), self.host, self.port)

    def __repr__(self):
        return 'UdpMessageSender({0!r}, {1!r})'.format(self.host, self.port)


class TcpMessageSender(object):
    """Opens a TCP connection per message and writes it with RFC 6587 framing."""

    def __init__(self, host, port=SYSLOG_PORT, framing=FRAMING_NON_TRANSPARENT):
        if framing not in (FRAMING_OCTET_COUNTING, FRAMING_NON_TRANSPARENT):
            raise ValueError("Framing is not valid")
        self.host = host
        self.port = port
        self.framing = framing

    def frame(self, data):
        if self.framing == FRAMING_NON_TRANSPARENT:
            data = data.replace(b"\n", b"\\n")
            return b"".join((data, b"\n"))
        return b" ".join((str(len(data)).encode("ascii"), data))

    def _connect(self):
        error = None
        for family, socktype, proto, _, sockaddr in _resolve(self.host, self.port, socket.SOCK_STREAM):
            sock = socket.socket(family, socktype, proto)
            try:
                sock.connect(sockaddr)
                return sock
            except OSError as e:
                error = e
                sock.close()
        raise error

    def send(self, data):
        try:
            with self._connect() as sock:
                sock.sendall(self.frame(data))
        except OSError as e:
            raise TransportError('Failed to send syslog message to tcp://{0}:{1}: {2}'.format(
                self.host, self.port, e), (self.host, self.port)) from e
        logger.debug('Sent %d bytes to tcp://%s:%s', len(data), self.host, self.port)

    def __repr__(self):
        return 'TcpMessageSender({0!r}, {1!r})'.format(self.host, self.port)


class UnixSocketMessageSender(object):
    """
    Writes each message to a Unix domain socket such as /dev/log.

    When no socket type is given, a datagram socket is tried first and a
    stream socket second, since local syslog daemons listen on either.
    """

    def __init__(self, path=SYSLOG_SOCKET, socket_type=None):
        self.path = path
        self.socket_type = socket_type

    def _socket_types(self):
        if self.socket_type is None:
            return [socket.SOCK_DGRAM, socket.SOCK_STREAM]
        return [self.socket_type]

    def send(self, data):
        if not hasattr(socket, 'AF_UNIX'):
            raise TransportError('Unix domain sockets are not available on this platform', self.path)
        error = None
        for type_ in self._socket_types():
            try:
                with socket.socket(socket.AF_UNIX, type_) as sock:
                    sock.connect(self.path)
                    sock.sendall(data)
                logger.debug('Sent %d bytes to unix://%s', len(data), self.path)
                return
            except OSError as e:
                error = e
                # EPROTOTYPE: the listener uses the other socket type
                if e.errno != errno.EPROTOTYPE:
                    break
        raise TransportError('Failed to send syslog message to unix://{0}: {1}'.format(
            self.path, error), self.path) from error

    def __repr__(self):
        return 'UnixSocketMessageSender({0!r})'.format(self.path)


def create_message_sender(settings):
    """Pick the sender described by the settings. A custom sender always wins."""
    if settings.custom_sender is not None:
        return settings.custom_sender
    if settings.transport == Transport.UDP:
        return UdpMessageSender(settings.server_host, settings.server_port)
    if settings.transport == Transport.TCP:
        return TcpMessageSender(settings.server_host, settings.server_port, settings.framing)
    if settings.transport == Transport.UNIX:
        return UnixSocketMessageSender(settings.socket_path)
    raise ValueError("Transport '{0}' is not recognized.".format(settings.transport))
