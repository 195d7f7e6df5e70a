"""
RFC 5424 structured data and the providers that produce it for each log request.

A provider is any object with a ``provide(context)`` method returning an
iterable of ``StructuredData`` blocks. Providers are composed in order, and a
block returned later replaces an earlier block with the same id.
"""
import logging
from collections import OrderedDict, namedtuple

logger = logging.getLogger(__name__)

StructuredDataElement = namedtuple('StructuredDataElement', ['name', 'value'])


class StructuredData(object):
    """One SD-ELEMENT: an id plus an ordered list of (name, value) parameters."""

    def __init__(self, sd_id, elements=None):
        self.id = sd_id
        self.elements = []
        if elements is not None:
            if isinstance(elements, dict):
                elements = elements.items()
            for element in elements:
                if not isinstance(element, StructuredDataElement):
                    element = StructuredDataElement(*element)
                self.elements.append(element)

    def __eq__(self, other):
        if not isinstance(other, StructuredData):
            return NotImplemented
        return self.id == other.id and self.elements == other.elements

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.id, tuple(self.elements)))

    def __repr__(self):
        return 'StructuredData({0!r}, {1!r})'.format(self.id, self.elements)


class StructuredDataProviderContext(object):
    """Read-only view of the log request handed to structured data providers."""

    def __init__(self, request):
        self._request = request

    @property
    def request(self):
        """The original LogRequest."""
        return self._request

    @property
    def category(self):
        return self._request.category

    @property
    def level(self):
        return self._request.level

    @property
    def event_id(self):
        return self._request.event_id

    @property
    def state(self):
        return self._request.state

    @property
    def exception(self):
        return self._request.exception


class StaticStructuredDataProvider(object):
    """Returns the same configured blocks for every request."""

    def __init__(self, structured_data=None):
        self._structured_data = tuple(structured_data or ())

    def provide(self, context):
        return self._structured_data


class CompositeStructuredDataProvider(object):
    """Merges the blocks of several providers into one set, deduplicated by id."""

    def __init__(self, providers):
        self._providers = tuple(providers)

    @property
    def providers(self):
        return self._providers

    def provide(self, context):
        unique = OrderedDict()
        for provider in self._providers:
            blocks = provider.provide(context)
            if blocks is None:
                logger.debug('Structured data provider %r returned None', provider)
                continue
            for block in blocks:
                # a later block replaces the whole earlier one, position is kept
                unique[block.id] = block
        return list(unique.values())


class RecordStructuredDataProvider(object):
    """
    Reads per-call structured data from a logging.LogRecord passed as state.

    The data is given through ``extra={'structured_data': {...}}`` as a mapping
    of SD-ID to a mapping of parameter names and values.
    """

    attribute = 'structured_data'

    def provide(self, context):
        record_sd = getattr(context.state, self.attribute, None)
        if not isinstance(record_sd, dict):
            return []
        blocks = []
        for sd_id, params in record_sd.items():
            # ignore params not in key-value format
            if not isinstance(params, dict):
                params = {}
            blocks.append(StructuredData(sd_id, params))
        return blocks
