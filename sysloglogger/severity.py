"""Log levels, syslog facilities and severities, and the priority encoding."""
import logging
from enum import IntEnum


class LogLevel(IntEnum):
    """Levels accepted by the dispatch facade, ordered by importance."""
    Trace = 0
    Debug = 1
    Information = 2
    Warning = 3
    Error = 4
    Critical = 5
    NONE = 6


class Facility(IntEnum):
    """Facility codes from RFC 5424 section 6.2.1 (RFC 3164 section 4.1.1)."""
    Kernel = 0        # kernel messages
    User = 1          # random user-level messages
    Mail = 2          # mail system
    Daemon = 3        # system daemons
    Auth = 4          # security/authorization messages
    Syslog = 5        # messages generated internally by syslogd
    Lpr = 6           # line printer subsystem
    News = 7          # network news subsystem
    Uucp = 8          # UUCP subsystem
    Cron = 9          # clock daemon
    AuthPriv = 10     # security/authorization messages (private)
    Ftp = 11          # FTP daemon
    Ntp = 12          # NTP subsystem
    Audit = 13        # log audit
    Alert = 14        # log alert
    Clock = 15        # clock daemon (note 2)
    Local0 = 16       # reserved for local use
    Local1 = 17
    Local2 = 18
    Local3 = 19
    Local4 = 20
    Local5 = 21
    Local6 = 22
    Local7 = 23


class Severity(IntEnum):
    """Severity codes, lower is more urgent."""
    Emergency = 0      # system is unusable
    Alert = 1          # action must be taken immediately
    Critical = 2       # critical conditions
    Error = 3          # error conditions
    Warning = 4        # warning conditions
    Notice = 5         # normal but significant condition
    Informational = 6  # informational
    Debug = 7          # debug-level messages


_SEVERITY_MAP = {
    LogLevel.Information: Severity.Informational,
    LogLevel.Warning: Severity.Warning,
    LogLevel.Error: Severity.Error,
    LogLevel.Critical: Severity.Critical,
}


def to_severity(level):
    """Map a LogLevel to its syslog severity. Anything unmapped is Debug."""
    return _SEVERITY_MAP.get(level, Severity.Debug)


def encode_priority(facility, severity):
    """Combine facility and severity into the PRI value (facility * 8 + severity)."""
    return int(facility) * 8 + int(severity)


def from_logging_level(levelno):
    """Translate a standard library logging level number into a LogLevel."""
    if levelno >= logging.CRITICAL:
        return LogLevel.Critical
    if levelno >= logging.ERROR:
        return LogLevel.Error
    if levelno >= logging.WARNING:
        return LogLevel.Warning
    if levelno >= logging.INFO:
        return LogLevel.Information
    if levelno >= logging.DEBUG:
        return LogLevel.Debug
    return LogLevel.Trace


def parse_facility(value):
    """Accept a Facility, its code or its (case-insensitive) name."""
    if isinstance(value, Facility):
        return value
    if isinstance(value, int):
        return Facility(value)
    text = str(value).strip()
    if text.isdigit():
        return Facility(int(text))
    for facility in Facility:
        if facility.name.lower() == text.lower():
            return facility
    raise ValueError("Facility is not valid: {0}".format(value))


def parse_level(value):
    """Accept a LogLevel, its number or its (case-insensitive) name."""
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, int):
        return LogLevel(value)
    text = str(value).strip().lower()
    aliases = {'info': LogLevel.Information, 'warn': LogLevel.Warning,
               'none': LogLevel.NONE}
    if text in aliases:
        return aliases[text]
    for level in LogLevel:
        if level.name.lower() == text:
            return level
    raise ValueError("Log level is not valid: {0}".format(value))
