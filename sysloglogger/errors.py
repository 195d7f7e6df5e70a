"""Exceptions raised while formatting and sending syslog messages."""


class SyslogError(Exception):
    """Base class for every error raised by sysloglogger."""


class FormatError(SyslogError, ValueError):
    """A message could not be turned into its wire format."""


class ValidationError(FormatError):
    """A structured data id or parameter name is not a valid SD-NAME."""

    def __init__(self, message, sd_id, param_name=None):
        super(ValidationError, self).__init__(message)
        self.sd_id = sd_id
        self.param_name = param_name


class FormatterError(SyslogError, TypeError):
    """The message formatter passed to a log call is unusable."""


class ParseError(FormatError):
    """Raised by the parser when a message does not follow the RFC grammar."""


class TransportError(SyslogError):
    """Sending the encoded message failed. The OSError is kept as __cause__."""

    def __init__(self, message, address=None):
        super(TransportError, self).__init__(message)
        self.address = address
