from datetime import datetime

import pytest
from pytz import utc

from .encoders import format_rfc3164, format_rfc5424
from .errors import ParseError
from .parser import parse_rfc3164, parse_rfc5424, parse_structured_data
from .severity import Facility, Severity
from .structured_data import StructuredData

TIMESTAMP = datetime(2024, 1, 5, 3, 4, 5, 250000, tzinfo=utc)


def test_parse_rfc3164():
    parsed = parse_rfc3164(b'<134>Jan 05 03:04:05 h svc disk ok', year=2024)
    assert parsed.priority == 134
    assert parsed.facility == Facility.Local0
    assert parsed.severity == Severity.Informational
    assert parsed.timestamp == datetime(2024, 1, 5, 3, 4, 5)
    assert parsed.host == 'h'
    assert parsed.app_name == 'svc'
    assert parsed.message == 'disk ok'
    assert parsed.structured_data == []


def test_rfc3164_round_trip():
    text = format_rfc3164(165, TIMESTAMP, 'web-01', 'My.App_Name', 'user "x" [logged] in')
    parsed = parse_rfc3164(text, year=2024)
    assert parsed.priority == 165
    assert parsed.timestamp == TIMESTAMP.replace(microsecond=0, tzinfo=None)
    assert parsed.host == 'web-01'
    assert parsed.app_name == 'MyAppName'
    assert parsed.message == 'user "x" [logged] in'


def test_parse_rfc3164_space_padded_day():
    parsed = parse_rfc3164('<13>Feb  3 10:00:00 h app m', year=2023)
    assert parsed.timestamp == datetime(2023, 2, 3, 10, 0, 0)


def test_rfc5424_round_trip():
    blocks = [StructuredData('exampleSDID@32473', [('iut', '3'), ('path', 'a\\b]c"d')]),
              StructuredData('meta')]
    text = format_rfc5424(134, TIMESTAMP, 'h', 'svc', 1234, 7, blocks, 'disk ok')
    parsed = parse_rfc5424(text.encode('ascii'))
    assert parsed.priority == 134
    assert parsed.version == 1
    assert parsed.timestamp == TIMESTAMP
    assert parsed.host == 'h'
    assert parsed.app_name == 'svc'
    assert parsed.procid == '1234'
    assert parsed.msgid == '7'
    assert parsed.structured_data == blocks
    assert parsed.message == 'disk ok'


def test_rfc5424_nil_values():
    parsed = parse_rfc5424('<134>1 2024-01-05T03:04:05.000000Z - - - - - disk ok')
    assert parsed.host is None
    assert parsed.app_name is None
    assert parsed.procid is None
    assert parsed.msgid is None
    assert parsed.structured_data == []
    assert parsed.message == 'disk ok'


def test_rfc5424_rfc_example():
    parsed = parse_rfc5424('<165>1 2003-10-11T22:14:15.003Z mymachine.example.com evntslog - '
                           'ID47 [exampleSDID@32473 iut="3" eventSource="Application" '
                           'eventID="1011"] An application event log entry...')
    assert parsed.facility == Facility.Local4
    assert parsed.severity == Severity.Notice
    assert parsed.timestamp == datetime(2003, 10, 11, 22, 14, 15, 3000, tzinfo=utc)
    assert parsed.structured_data[0].elements[2] == ('eventID', '1011')
    assert parsed.message == 'An application event log entry...'


def test_parse_structured_data_remainder():
    blocks, rest = parse_structured_data('[a x="1"][b] tail')
    assert blocks == [StructuredData('a', {'x': '1'}), StructuredData('b')]
    assert rest == ' tail'


@pytest.mark.parametrize('text', [
    '[a x="1"',
    '[a x="1]',
    '[ x="1"]',
    'garbage',
])
def test_parse_structured_data_errors(text):
    with pytest.raises(ParseError):
        parse_structured_data(text)


@pytest.mark.parametrize('text', [
    'no priority',
    '<999>Jan 05 03:04:05 h svc m',
    '<13>Foo 05 03:04:05 h svc m',
])
def test_parse_rfc3164_errors(text):
    with pytest.raises(ParseError):
        parse_rfc3164(text, year=2024)


@pytest.mark.parametrize('text', [
    '<13>Jan 05 03:04:05 h svc m',
    '<13>1 not-a-time h svc - - - m',
    '<13>1 2024-01-05T03:04:05Z h svc - - [a x="1"]m',
])
def test_parse_rfc5424_errors(text):
    with pytest.raises(ParseError):
        parse_rfc5424(text)
