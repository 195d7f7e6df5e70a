"""
Process wide event id and structured data for stdlib logging calls.

The context renders itself as the ``extra`` mapping that SyslogHandler reads,
or feeds a logger directly through ContextStructuredDataProvider.
"""
from enum import IntEnum

from .structured_data import StructuredData


class EventId(IntEnum):
    """Well known event ids, used as the RFC 5424 MSGID."""
    NONE = 0
    STARTUP = 1
    SHUTDOWN = 2


class LoggingContext(object):
    """Event id and structured data blocks shared by every following logging call."""

    def __init__(self):
        self.event_id = EventId.NONE
        self.structured_data = {}

    def set_event_id(self, event_id):
        self.event_id = event_id

    def set_structured_data(self, sd_id, **params):
        """Store the block sd_id, replacing an earlier block with the same id."""
        self.structured_data[sd_id] = params

    def as_extra(self, one_time_data=None):
        """
        The ``extra`` mapping for a logging call. Blocks in one_time_data are
        added for this call only and replace stored blocks with the same id.
        """
        blocks = dict(self.structured_data)
        if isinstance(one_time_data, dict):
            blocks.update(one_time_data)
        # read back by RecordStructuredDataProvider
        return {'event_id': int(self.event_id), 'structured_data': blocks}


class ContextStructuredDataProvider(object):
    """Structured data provider returning the blocks stored in a LoggingContext."""

    def __init__(self, logging_context):
        self.logging_context = logging_context

    def provide(self, context):
        return [StructuredData(sd_id, params)
                for sd_id, params in list(self.logging_context.structured_data.items())]


context = LoggingContext()


def logging_context():
    return context
