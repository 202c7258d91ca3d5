"""Common modules for the SIP2 client.

This package contains code shared by the wire, transport and session layers:
- protocol: RequestType/ResponseType enums, wire constants, Stream Protocol
- config: ProtocolConfig dataclass
- errors: Exception taxonomy
- checksum: Message checksum compute/verify
- sequence: Cyclic AY sequence counter
- encoding: Date stamps and fixed-width field helpers
- report: Reporting abstractions
"""

from sip2.common.checksum import compute_checksum, verify_checksum
from sip2.common.config import ProtocolConfig
from sip2.common.errors import (
    ChecksumExhaustedError,
    ConfigError,
    SessionError,
    Sip2Error,
    TransportError,
    ValidationError,
)
from sip2.common.protocol import RequestType, ResponseType, Stream, TRACE
from sip2.common.sequence import SequenceCounter

__all__ = [
    # Protocol
    "RequestType",
    "ResponseType",
    "Stream",
    "TRACE",
    # Config
    "ProtocolConfig",
    # Checksum / sequence
    "compute_checksum",
    "verify_checksum",
    "SequenceCounter",
    # Exceptions
    "ChecksumExhaustedError",
    "ConfigError",
    "SessionError",
    "Sip2Error",
    "TransportError",
    "ValidationError",
]
