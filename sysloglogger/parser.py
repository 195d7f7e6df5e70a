"""Parse RFC 3164 and RFC 5424 messages back into their fields."""
import re
from codecs import BOM_UTF8
from collections import namedtuple
from datetime import datetime

import dateutil.parser

from .encoders import NILVALUE
from .errors import ParseError
from .severity import Facility, Severity
from .structured_data import StructuredData, StructuredDataElement

SyslogMessage = namedtuple('SyslogMessage', [
    'priority', 'facility', 'severity', 'version', 'timestamp', 'host',
    'app_name', 'procid', 'msgid', 'structured_data', 'message'])

_MONTHS = {name: index + 1 for index, name in enumerate(
    ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec'))}

_RFC3164 = re.compile(r'^<(?P<pri>\d{1,3})>(?P<month>[A-Z][a-z]{2}) (?P<day>[ \d]\d) '
                      r'(?P<hour>\d\d):(?P<minute>\d\d):(?P<second>\d\d) '
                      r'(?P<host>\S+) (?P<tag>\S+)(?: (?P<msg>.*))?$', re.DOTALL)
_RFC5424 = re.compile(r'^<(?P<pri>\d{1,3})>(?P<version>[1-9]\d{0,2}) (?P<timestamp>\S+) '
                      r'(?P<host>\S+) (?P<app>\S+) (?P<procid>\S+) (?P<msgid>\S+) '
                      r'(?P<rest>.*)$', re.DOTALL)
_SD_NAME = re.compile(r'[^\s=\]"]+')
_SD_PARAM = re.compile(r' ([^\s=\]"]+)="')


def _text(data):
    if isinstance(data, bytes):
        return data.decode('utf-8', 'replace')
    return data


def _split_priority(pri):
    priority = int(pri)
    if priority > 191:
        raise ParseError('PRI value {0} is out of range'.format(priority))
    return priority, Facility(priority >> 3), Severity(priority & 7)


def _nil(value):
    return None if value == NILVALUE else value


def parse_rfc3164(data, year=None):
    """
    Parse '<PRI>Mmm dd hh:mm:ss HOSTNAME TAG MSG'.

    RFC 3164 timestamps carry no year, the current one is used unless given.
    """
    match = _RFC3164.match(_text(data))
    if match is None:
        raise ParseError('Not an RFC 3164 message: {0!r}'.format(data))
    if match.group('month') not in _MONTHS:
        raise ParseError('Unknown month {0!r}'.format(match.group('month')))
    priority, facility, severity = _split_priority(match.group('pri'))
    if year is None:
        year = datetime.now().year
    try:
        timestamp = datetime(year, _MONTHS[match.group('month')], int(match.group('day')),
                             int(match.group('hour')), int(match.group('minute')),
                             int(match.group('second')))
    except ValueError as e:
        raise ParseError('Invalid RFC 3164 timestamp: {0}'.format(e)) from e
    return SyslogMessage(priority, facility, severity, None, timestamp, match.group('host'),
                         match.group('tag'), None, None, [], match.group('msg') or '')


def _parse_param_value(text, pos):
    value = []
    while pos < len(text):
        char = text[pos]
        if char == '\\' and text[pos + 1:pos + 2] in ('\\', '"', ']'):
            value.append(text[pos + 1])
            pos += 2
        elif char == '"':
            return ''.join(value), pos + 1
        else:
            value.append(char)
            pos += 1
    raise ParseError('Unterminated structured data value')


def parse_structured_data(text):
    """Parse STRUCTURED-DATA at the start of text. Returns (blocks, remainder)."""
    if text.startswith(NILVALUE):
        return [], text[1:]
    blocks = []
    pos = 0
    while text[pos:pos + 1] == '[':
        match = _SD_NAME.match(text, pos + 1)
        if match is None:
            raise ParseError('Missing structured data id at offset {0}'.format(pos + 1))
        block = StructuredData(match.group(0))
        pos = match.end()
        while True:
            match = _SD_PARAM.match(text, pos)
            if match is None:
                break
            value, pos = _parse_param_value(text, match.end())
            block.elements.append(StructuredDataElement(match.group(1), value))
        if text[pos:pos + 1] != ']':
            raise ParseError('Unterminated structured data element {0!r}'.format(block.id))
        pos += 1
        blocks.append(block)
    if not blocks:
        raise ParseError('Structured data must be NILVALUE or start with "["')
    return blocks, text[pos:]


def parse_rfc5424(data):
    """Parse an RFC 5424 message. NILVALUE fields come back as None."""
    match = _RFC5424.match(_text(data))
    if match is None:
        raise ParseError('Not an RFC 5424 message: {0!r}'.format(data))
    priority, facility, severity = _split_priority(match.group('pri'))
    timestamp = _nil(match.group('timestamp'))
    if timestamp is not None:
        try:
            timestamp = dateutil.parser.isoparse(timestamp)
        except ValueError as e:
            raise ParseError('Invalid RFC 5424 timestamp: {0}'.format(e)) from e
    structured_data, rest = parse_structured_data(match.group('rest'))
    if rest and not rest.startswith(' '):
        raise ParseError('Expected a space after the structured data')
    message = rest[1:]
    bom = BOM_UTF8.decode('utf-8')
    if message.startswith(bom):
        message = message[len(bom):]
    return SyslogMessage(priority, facility, severity, int(match.group('version')), timestamp,
                         _nil(match.group('host')), _nil(match.group('app')),
                         _nil(match.group('procid')), _nil(match.group('msgid')),
                         structured_data, message)
