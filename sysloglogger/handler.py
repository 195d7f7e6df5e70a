# coding=utf-8
import logging
from logging import Handler

from .provider import SyslogLoggerProvider
from .settings import SyslogSettings
from .severity import LogLevel, from_logging_level
from .structured_data import RecordStructuredDataProvider

_PACKAGE = __name__.split('.')[0]


class SyslogHandler(Handler):
    """
    A handler class which sends logging records to a syslog server in RFC 3164 or RFC 5424 format.

    Each record goes through the syslog logger of its category (the record's
    logger name). Unlike the built-in SysLogHandler, errors raised while
    encoding or sending are not swallowed by handleError: they propagate to
    the code that made the logging call.
    """

    def __init__(self, settings=None, level=logging.NOTSET, host_name=None, clock=None, **overrides):
        """
        Args:
            settings (SyslogSettings):
                Base configuration. Defaults to ``SyslogSettings()``, i.e. RFC 3164 over UDP
                to ``127.0.0.1:514`` with the Local0 facility.
            level (int):
                Standard logging level of the handler.
            host_name (str):
                The hostname of the system where the message originated from.
                Defaults to ``settings.host_name`` and then ``socket.gethostname()``.
            clock (callable):
                Returns the current time as a POSIX timestamp. Defaults to ``time.time``.
            overrides:
                Any ``SyslogSettings`` field, applied on top of ``settings``.

        Per record structured data is read from the ``structured_data`` attribute
        (``extra={'structured_data': {'sd_id@32473': {'key': 'value'}}}``) and wins
        over static and provider data with the same id. The message id comes from
        the ``event_id`` attribute and defaults to 0.
        """
        super(SyslogHandler, self).__init__(level)

        if settings is None:
            settings = SyslogSettings()
        if overrides:
            settings = settings.replace(**overrides)
        providers = settings.structured_data_providers + (RecordStructuredDataProvider(),)
        self.settings = settings.replace(structured_data_providers=providers)
        self.provider = SyslogLoggerProvider(self.settings, host_name=host_name,
                                             level=LogLevel.Trace, clock=clock)

    def _format(self, record, exception):
        return self.format(record)

    def emit(self, record):
        """
        Emit a record.

        Records logged by this package itself are skipped, sending them would
        re-enter the handler.
        """
        if record.name == _PACKAGE or record.name.startswith(_PACKAGE + '.'):
            return
        exception = record.exc_info[1] if record.exc_info else None
        event_id = getattr(record, 'event_id', 0)
        syslog_logger = self.provider.create_logger(record.name)
        syslog_logger.log(from_logging_level(record.levelno), event_id, record, exception, self._format)

    def close(self):
        """
        Drops the cached loggers.
        """
        self.acquire()
        try:
            self.provider.close()
            super(SyslogHandler, self).close()
        finally:
            self.release()
