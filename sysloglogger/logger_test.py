import calendar
from datetime import datetime

import psutil
import pytest

from . import logger as logger_module
from .errors import FormatterError, TransportError, ValidationError
from .logger import LogRequest, Syslog3164Logger, Syslog5424Logger, SyslogLogger, process_id
from .settings import HeaderType, SyslogSettings
from .severity import Facility, LogLevel
from .structured_data import (CompositeStructuredDataProvider, StaticStructuredDataProvider,
                              StructuredData)

NOW = calendar.timegm(datetime(2024, 1, 5, 3, 4, 5).timetuple())


class RecordingSender(object):
    def __init__(self):
        self.messages = []

    def send(self, data):
        self.messages.append(data)


class FailingSender(object):
    def send(self, data):
        raise TransportError('receiver is down')


class RequestProvider(object):
    def __init__(self):
        self.requests = []

    def provide(self, context):
        self.requests.append(context.request)
        return [StructuredData('req', {'category': context.category})]


def settings(**kwargs):
    kwargs.setdefault('facility', Facility.Local0)
    kwargs.setdefault('use_utc', True)
    return SyslogSettings(**kwargs)


def make_3164(level=LogLevel.Trace, sender=None, **kwargs):
    return Syslog3164Logger('svc', settings(**kwargs), 'h', level,
                            sender or RecordingSender(), lambda: NOW)


def make_5424(level=LogLevel.Trace, sender=None, provider=None, host='h', **kwargs):
    kwargs.setdefault('header_type', HeaderType.RFC5424)
    return Syslog5424Logger('svc', settings(**kwargs), host, level,
                            sender or RecordingSender(), lambda: NOW, provider)


def message(text):
    return lambda state, exception: text


def test_rfc3164_reference_scenario():
    syslog_logger = make_3164()
    syslog_logger.log(LogLevel.Information, 0, None, None, message('disk ok'))
    assert syslog_logger.message_sender.messages == [b'<134>Jan 05 03:04:05 h svc disk ok']


def test_rfc3164_uses_app_name_for_tag():
    syslog_logger = make_3164(app_name='My.App_Name')
    syslog_logger.information('disk ok')
    assert syslog_logger.message_sender.messages == [b'<134>Jan 05 03:04:05 h MyAppName disk ok']


@pytest.mark.parametrize('level, priority', [
    (LogLevel.Trace, 135),
    (LogLevel.Debug, 135),
    (LogLevel.Information, 134),
    (LogLevel.Warning, 132),
    (LogLevel.Error, 131),
    (LogLevel.Critical, 130),
])
def test_priority_per_level(level, priority):
    syslog_logger = make_3164()
    syslog_logger.log(level, 0, None, None, message('m'))
    assert syslog_logger.message_sender.messages[0].startswith('<{0}>'.format(priority).encode())


@pytest.mark.parametrize('level', [7, -1, 'verbose'])
def test_unknown_level_is_debug(level):
    syslog_logger = make_3164()
    syslog_logger.log(level, 0, None, None, message('m'))
    assert syslog_logger.message_sender.messages == [b'<135>Jan 05 03:04:05 h svc m']


def test_facility_changes_priority():
    syslog_logger = make_3164(facility=Facility.User)
    syslog_logger.warning('m')
    assert syslog_logger.message_sender.messages[0].startswith(b'<12>')


def test_rfc5424_message():
    provider = CompositeStructuredDataProvider([
        StaticStructuredDataProvider([StructuredData('x', {'k': '1'})])])
    syslog_logger = make_5424(provider=provider)
    syslog_logger.log(LogLevel.Information, 7, None, None, message('disk ok'))
    expected = '<134>1 2024-01-05T03:04:05.000000Z h svc {0} 7 [x k="1"] disk ok'.format(process_id())
    assert syslog_logger.message_sender.messages == [expected.encode('ascii')]


def test_rfc5424_without_host_or_structured_data():
    syslog_logger = make_5424(host=None)
    syslog_logger.information('disk ok')
    text = syslog_logger.message_sender.messages[0].decode('ascii')
    assert text == '<134>1 2024-01-05T03:04:05.000000Z - svc {0} 0 - disk ok'.format(process_id())


def test_rfc5424_provider_sees_request():
    provider = RequestProvider()
    syslog_logger = make_5424(provider=provider)
    syslog_logger.log(LogLevel.Error, 9, {'user': 'bob'}, None, message('m'))
    assert provider.requests == [LogRequest(9, 'svc', LogLevel.Error, {'user': 'bob'}, None)]
    assert b'[req category="svc"]' in syslog_logger.message_sender.messages[0]


def test_rfc5424_invalid_structured_data_sends_nothing():
    sender = RecordingSender()
    provider = StaticStructuredDataProvider([StructuredData('has space', {'k': 'v'})])
    syslog_logger = make_5424(sender=sender, provider=provider)
    with pytest.raises(ValidationError):
        syslog_logger.information('m')
    assert sender.messages == []


def test_level_threshold():
    syslog_logger = make_3164(level=LogLevel.Warning)
    syslog_logger.information('skipped')
    syslog_logger.debug('skipped')
    syslog_logger.error('sent')
    assert len(syslog_logger.message_sender.messages) == 1
    assert syslog_logger.is_enabled(LogLevel.Warning)
    assert not syslog_logger.is_enabled(LogLevel.Information)


def test_none_level_is_never_enabled():
    syslog_logger = make_3164()
    assert not syslog_logger.is_enabled(LogLevel.NONE)
    syslog_logger.log(LogLevel.NONE, 0, None, None, message('m'))
    assert syslog_logger.message_sender.messages == []


def test_empty_message_is_ignored():
    syslog_logger = make_3164()
    syslog_logger.log(LogLevel.Error, 0, None, None, message(''))
    syslog_logger.log(LogLevel.Error, 0, None, None, message(None))
    assert syslog_logger.message_sender.messages == []


def test_formatter_is_required():
    syslog_logger = make_3164()
    with pytest.raises(FormatterError):
        syslog_logger.log(LogLevel.Error, 0, None, None, None)
    with pytest.raises(FormatterError):
        syslog_logger.log(LogLevel.Error, 0, None, None, 'not callable')


def test_formatter_receives_state_and_exception():
    seen = []
    error = ValueError('boom')

    def formatter(state, exception):
        seen.append((state, exception))
        return 'formatted'

    syslog_logger = make_3164()
    syslog_logger.log(LogLevel.Error, 0, 'state', error, formatter)
    assert seen == [('state', error)]


def test_raising_formatter_propagates():
    def formatter(state, exception):
        raise ZeroDivisionError()

    syslog_logger = make_3164()
    with pytest.raises(ZeroDivisionError):
        syslog_logger.log(LogLevel.Error, 0, None, None, formatter)


def test_transport_error_propagates():
    syslog_logger = make_3164(sender=FailingSender())
    with pytest.raises(TransportError):
        syslog_logger.information('m')


def test_message_arguments():
    syslog_logger = make_3164()
    syslog_logger.warning('disk %s at %d%%', 'sda', 93)
    assert syslog_logger.message_sender.messages[0].endswith(b'svc disk sda at 93%')


def test_non_ascii_is_replaced():
    syslog_logger = make_3164()
    syslog_logger.information('café')
    assert syslog_logger.message_sender.messages[0].endswith(b'svc caf?')


def test_local_time():
    syslog_logger = make_3164(use_utc=False)
    assert syslog_logger.now().utcoffset() is not None
    assert syslog_logger.now().timestamp() == NOW


def test_base_logger_requires_format_message():
    syslog_logger = SyslogLogger('svc', settings(), 'h', LogLevel.Trace, RecordingSender(), lambda: NOW)
    with pytest.raises(NotImplementedError):
        syslog_logger.information('m')


def test_default_sender_comes_from_settings():
    syslog_logger = Syslog3164Logger('svc', settings(server_host='10.1.2.3'), 'h')
    assert syslog_logger.message_sender.host == '10.1.2.3'


def test_process_id_is_cached(monkeypatch):
    process_id.cache_clear()
    try:
        first = process_id()
        assert first > 0

        def fail():
            raise psutil.Error()
        monkeypatch.setattr(logger_module.psutil, 'Process', fail)
        assert process_id() == first
    finally:
        process_id.cache_clear()


def test_process_id_defaults_to_zero(monkeypatch):
    def fail():
        raise psutil.AccessDenied()

    process_id.cache_clear()
    monkeypatch.setattr(logger_module.psutil, 'Process', fail)
    try:
        assert process_id() == 0
    finally:
        process_id.cache_clear()
