"""
This library sends log events to a syslog receiver in RFC 3164 or RFC 5424 format.

Messages are built and sent synchronously on the calling thread, over UDP, TCP
or a Unix domain socket, or through any object with a ``send(bytes)`` method.
Nothing is retried or queued: a failing receiver raises TransportError.
"""

from .context import ContextStructuredDataProvider, LoggingContext, logging_context
from .errors import (FormatError, FormatterError, ParseError, SyslogError, TransportError,
                     ValidationError)
from .handler import SyslogHandler
from .logger import LogRequest, Syslog3164Logger, Syslog5424Logger, SyslogLogger
from .provider import SyslogLoggerProvider
from .settings import HeaderType, SyslogSettings
from .severity import Facility, LogLevel, Severity
from .structured_data import (CompositeStructuredDataProvider, StaticStructuredDataProvider,
                              StructuredData, StructuredDataElement,
                              StructuredDataProviderContext)
from .transport import (TcpMessageSender, Transport, UdpMessageSender, UnixSocketMessageSender,
                        create_message_sender)
