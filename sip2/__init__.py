"""Client-side SIP2 protocol engine.

Packages:
- common: constants, config, errors, checksum, sequence counter, encoding helpers
- wire: message builder, response layouts and parser
- transport: framer with checksum-driven resend, TCP/serial stream openers
- catalog: request encoders and response decoders
- session: login / self check / patron session orchestration
"""

from sip2.client import Sip2Client
from sip2.common.config import ProtocolConfig
from sip2.common.errors import (
    ChecksumExhaustedError,
    ConfigError,
    SessionError,
    Sip2Error,
    TransportError,
    ValidationError,
)
from sip2.wire.parser import ParsedResponse

__all__ = [
    "ChecksumExhaustedError",
    "ConfigError",
    "ParsedResponse",
    "ProtocolConfig",
    "SessionError",
    "Sip2Client",
    "Sip2Error",
    "TransportError",
    "ValidationError",
]
