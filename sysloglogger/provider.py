"""Creates and caches one syslog logger per category."""
import logging
import socket
import threading

from .severity import LogLevel, parse_level
from .settings import HeaderType
from .structured_data import CompositeStructuredDataProvider, StaticStructuredDataProvider
from .logger import Syslog3164Logger, Syslog5424Logger
from .transport import create_message_sender

logger = logging.getLogger(__name__)


class SyslogLoggerProvider(object):
    """
    Owns the sender and the structured data pipeline shared by its loggers.

    create_logger() is safe to call from several threads. Creating a logger
    for a new category takes a lock, looking up an existing one does not.
    """

    def __init__(self, settings, host_name=None, level=LogLevel.Trace, clock=None):
        self.settings = settings
        self.host_name = host_name or settings.host_name or socket.gethostname()
        self.level = parse_level(level)
        self.clock = clock
        self.message_sender = create_message_sender(settings)
        self._loggers = {}
        self._lock = threading.Lock()

        # static structured data has the lowest priority
        providers = [StaticStructuredDataProvider(settings.structured_data)]
        providers.extend(settings.structured_data_providers)
        self.structured_data_provider = CompositeStructuredDataProvider(providers)

    def create_logger(self, name):
        syslog_logger = self._loggers.get(name)
        if syslog_logger is None:
            with self._lock:
                syslog_logger = self._loggers.get(name)
                if syslog_logger is None:
                    syslog_logger = self._create_logger_instance(name)
                    self._loggers[name] = syslog_logger
        return syslog_logger

    def _create_logger_instance(self, name):
        logger.debug('Creating %s syslog logger for %s', self.settings.header_type.value, name)
        if self.settings.header_type == HeaderType.RFC3164:
            return Syslog3164Logger(name, self.settings, self.host_name, self.level,
                                    self.message_sender, self.clock)
        if self.settings.header_type == HeaderType.RFC5424:
            return Syslog5424Logger(name, self.settings, self.host_name, self.level,
                                    self.message_sender, self.clock,
                                    self.structured_data_provider)
        raise ValueError("Header type '{0}' is not recognized.".format(self.settings.header_type))

    def close(self):
        with self._lock:
            self._loggers.clear()
