# coding=utf-8
"""Wire formats for RFC 3164 and RFC 5424 syslog messages."""
from datetime import timedelta

from .errors import ValidationError

NILVALUE = '-'
SYSLOG_VERSION = '1'
MAX_TAG_LENGTH = 32

# RFC 5424, section 6: HOSTNAME, APP-NAME, PROCID and MSGID lengths
MAX_HOSTNAME_LENGTH = 255
MAX_APPNAME_LENGTH = 48
MAX_PROCID_LENGTH = 128
MAX_MSGID_LENGTH = 32

# SD-NAME = 1*32PRINTUSASCII ; except '=', SP, ']', %d34 (")
SD_NAME_RESERVED = ('=', ' ', ']', '"')

_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
           'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def format_tag(app_name):
    """Build the RFC 3164 TAG: no '.' or '_', at most 32 characters."""
    tag = (app_name or '').replace('.', '').replace('_', '')
    return tag[:MAX_TAG_LENGTH]


def format_rfc3164_timestamp(timestamp):
    """Mmm dd hh:mm:ss, English month names regardless of the locale."""
    return '{0} {1:02d} {2:02d}:{3:02d}:{4:02d}'.format(
        _MONTHS[timestamp.month - 1], timestamp.day,
        timestamp.hour, timestamp.minute, timestamp.second)


def format_rfc3164(priority, timestamp, host, app_name, message):
    """<PRI>TIMESTAMP HOSTNAME TAG MSG"""
    return '<{0}>{1} {2} {3} {4}'.format(
        priority, format_rfc3164_timestamp(timestamp), _field(host, MAX_HOSTNAME_LENGTH),
        format_tag(app_name), message)


def format_rfc5424_timestamp(timestamp):
    """ISO 8601 with microseconds, 'Z' for UTC and +hh:mm for other offsets."""
    text = timestamp.isoformat(timespec='microseconds')
    if timestamp.utcoffset() == timedelta(0):
        text = text[:-6] + 'Z'
    return text


def is_valid_sd_name(name):
    """SD-NAME: non-empty, printable US-ASCII 33-126 without '=', SP, ']' or '"'."""
    if not name or not isinstance(name, str):
        return False
    for char in name:
        if not 33 <= ord(char) <= 126:
            return False
        if char in SD_NAME_RESERVED:
            return False
    return True


def escape_param_value(value):
    """Escape '\\', '"' and ']' in a PARAM-VALUE, backslash first."""
    if value is None:
        return ''
    return str(value).replace('\\', '\\\\').replace('"', '\\"').replace(']', '\\]')


def format_structured_data(structured_data):
    """
    Serialize a sequence of StructuredData blocks.

    Every id and parameter name is checked before anything is built, so an
    invalid block never yields a partial result. Returns NILVALUE when empty.
    """
    if not structured_data:
        return NILVALUE

    for data in structured_data:
        if not is_valid_sd_name(data.id):
            raise ValidationError(
                "ID for structured data {0!r} is not valid. US-ASCII 33-126 only, "
                "except '=', ' ', ']', '\"'".format(data.id), data.id)
        for element in data.elements:
            if not is_valid_sd_name(element.name):
                raise ValidationError(
                    "Element {0!r} in structured data {1!r} is not valid. US-ASCII 33-126 "
                    "only, except '=', ' ', ']', '\"'".format(element.name, data.id),
                    data.id, element.name)

    pieces = []
    for data in structured_data:
        pieces.append('[')
        pieces.append(data.id)
        for element in data.elements:
            pieces.append(' {0}="{1}"'.format(element.name, escape_param_value(element.value)))
        pieces.append(']')
    return ''.join(pieces)


def filter_printusascii(text):
    """Keep only the characters in 33-126."""
    return ''.join([char for char in text if 33 <= ord(char) <= 126])


def _field(value, max_length):
    if value is None:
        return NILVALUE
    value = filter_printusascii(str(value))[:max_length]
    return value or NILVALUE


def format_rfc5424(priority, timestamp, host, app_name, procid, msgid, structured_data, message):
    """
    Build an RFC 5424 message:

        SYSLOG-MSG = HEADER SP STRUCTURED-DATA [SP MSG]
        HEADER     = PRI VERSION SP TIMESTAMP SP HOSTNAME SP APP-NAME SP PROCID SP MSGID
    """
    sd = format_structured_data(structured_data)
    return '<{0}>{1} {2} {3} {4} {5} {6} {7} {8}'.format(
        priority, SYSLOG_VERSION, format_rfc5424_timestamp(timestamp),
        _field(host, MAX_HOSTNAME_LENGTH), _field(app_name, MAX_APPNAME_LENGTH),
        _field(procid, MAX_PROCID_LENGTH), _field(msgid, MAX_MSGID_LENGTH), sd, message)


def to_wire(syslog_msg):
    """Encode a formatted message as 7-bit ASCII, replacing anything else with '?'."""
    return syslog_msg.encode('ascii', 'replace')
