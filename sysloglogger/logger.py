"""Per-category loggers that format a log call and hand the bytes to a sender."""
import functools
import time
from collections import namedtuple
from datetime import datetime

import psutil
from pytz import utc
from tzlocal import get_localzone

from . import encoders
from .errors import FormatterError
from .severity import LogLevel, encode_priority, parse_level, to_severity
from .structured_data import StructuredDataProviderContext
from .transport import create_message_sender

# Original log request as received by a logger, handed to structured data providers.
LogRequest = namedtuple('LogRequest', ['event_id', 'category', 'level', 'state', 'exception'])


@functools.lru_cache(maxsize=None)
def process_id():
    """The id of the current process, looked up once. 0 when it is not available."""
    try:
        return psutil.Process().pid
    except (psutil.Error, OSError):
        return 0


def _message_formatter(message, args):
    def formatter(state, exception):
        if args:
            return message % args
        return message
    return formatter


class SyslogLogger(object):
    """
    Base class for the RFC specific loggers.

    A log call is synchronous: the message is formatted, encoded and sent on
    the calling thread. Errors from formatting, encoding or sending are raised
    to the caller.
    """

    def __init__(self, name, settings, host, level=LogLevel.Trace, message_sender=None, clock=None):
        self.name = name
        self.settings = settings
        self.host = host
        self.level = parse_level(level)
        self.message_sender = message_sender if message_sender is not None \
            else create_message_sender(settings)
        self._clock = clock if clock is not None else time.time
        self._local_zone = get_localzone()

    def is_enabled(self, level):
        return level != LogLevel.NONE and level >= self.level

    def now(self):
        """Current time in UTC or the local zone, depending on the settings."""
        if self.settings.use_utc:
            return datetime.fromtimestamp(self._clock(), utc)
        return datetime.fromtimestamp(self._clock(), self._local_zone)

    def log(self, level, event_id=0, state=None, exception=None, formatter=None):
        if formatter is None or not callable(formatter):
            raise FormatterError('A callable message formatter is required')

        try:
            level = parse_level(level)
        except ValueError:
            # levels outside LogLevel are logged with Debug severity
            level = LogLevel.Debug
        if not self.is_enabled(level):
            return

        message = formatter(state, exception)
        if not message:
            return

        request = LogRequest(event_id, self.name, level, state, exception)

        # Defined in RFC 5424, section 6.2.1, and RFC 3164, section 4.1.1.
        priority = encode_priority(self.settings.facility, to_severity(level))
        syslog_msg = self.format_message(request, priority, self.now(), self.host,
                                         self.settings.app_name or self.name,
                                         process_id(), event_id, message)
        data = encoders.to_wire(syslog_msg)
        self.message_sender.send(data)

    def format_message(self, request, priority, timestamp, host, app_name, procid, msgid, message):
        raise NotImplementedError(
            '{0} must implement format_message'.format(type(self).__name__))

    def _log_message(self, level, message, args, event_id, exception):
        self.log(level, event_id, None, exception, _message_formatter(message, args))

    def trace(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Trace, message, args, event_id, exception)

    def debug(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Debug, message, args, event_id, exception)

    def information(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Information, message, args, event_id, exception)

    def warning(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Warning, message, args, event_id, exception)

    def error(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Error, message, args, event_id, exception)

    def critical(self, message, *args, event_id=0, exception=None):
        self._log_message(LogLevel.Critical, message, args, event_id, exception)


class Syslog3164Logger(SyslogLogger):
    """Based on RFC 3164: https://tools.ietf.org/html/rfc3164"""

    def format_message(self, request, priority, timestamp, host, app_name, procid, msgid, message):
        return encoders.format_rfc3164(priority, timestamp, host, app_name, message)


class Syslog5424Logger(SyslogLogger):
    """Based on RFC 5424: https://tools.ietf.org/html/rfc5424"""

    def __init__(self, name, settings, host, level=LogLevel.Trace, message_sender=None,
                 clock=None, structured_data_provider=None):
        super(Syslog5424Logger, self).__init__(name, settings, host, level, message_sender, clock)
        self.structured_data_provider = structured_data_provider

    def get_structured_data(self, request):
        if self.structured_data_provider is None:
            return []
        context = StructuredDataProviderContext(request)
        return list(self.structured_data_provider.provide(context) or [])

    def format_message(self, request, priority, timestamp, host, app_name, procid, msgid, message):
        structured_data = self.get_structured_data(request)
        return encoders.format_rfc5424(priority, timestamp, host, app_name, procid, msgid,
                                       structured_data, message)
