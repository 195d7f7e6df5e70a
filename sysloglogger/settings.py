"""Immutable configuration shared by every logger of a provider."""
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .severity import Facility, parse_facility
from .transport import FRAMING_NON_TRANSPARENT, SYSLOG_PORT, SYSLOG_SOCKET, Transport


class HeaderType(Enum):
    """Wire format of the messages."""
    RFC3164 = '3164'
    RFC5424 = '5424'


@dataclass(frozen=True)
class SyslogSettings:
    """
    Snapshot of the syslog configuration.

    structured_data is sent with every RFC 5424 message. The structured data
    providers run after it, in order, and a block returned later replaces an
    earlier block with the same id. custom_sender, when set, replaces the
    transport selected by transport/server_host/server_port/socket_path.
    """
    server_host: str = '127.0.0.1'
    server_port: int = SYSLOG_PORT
    socket_path: str = SYSLOG_SOCKET
    facility: Facility = Facility.Local0
    header_type: HeaderType = HeaderType.RFC3164
    transport: Transport = Transport.UDP
    framing: int = FRAMING_NON_TRANSPARENT
    structured_data: Tuple[Any, ...] = ()
    structured_data_providers: Tuple[Any, ...] = ()
    use_utc: bool = False
    app_name: Optional[str] = None
    host_name: Optional[str] = None
    custom_sender: Any = field(default=None, compare=False)

    def __post_init__(self):
        # normalize loose values so the snapshot is always well typed
        object.__setattr__(self, 'facility', parse_facility(self.facility))
        object.__setattr__(self, 'header_type', HeaderType(self.header_type))
        object.__setattr__(self, 'transport', Transport(self.transport))
        object.__setattr__(self, 'structured_data', tuple(self.structured_data or ()))
        object.__setattr__(self, 'structured_data_providers',
                           tuple(self.structured_data_providers or ()))

    def replace(self, **changes):
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
