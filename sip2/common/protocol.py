"""Protocol definitions for the SIP2 client.

Contains:
- RequestType / ResponseType enums for the two-character message codes
- Stream Protocol for type checking the byte transport
- Wire constants (field codes, widths, default terminators)
- Logging configuration
"""

import logging
from enum import Enum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class RequestType(str, Enum):
    """Message codes sent by the self-check terminal (SC)."""

    BLOCK_PATRON = "01"
    CHECKIN = "09"
    CHECKOUT = "11"
    HOLD = "15"
    ITEM_INFORMATION = "17"
    ITEM_STATUS_UPDATE = "19"
    PATRON_STATUS = "23"
    PATRON_ENABLE = "25"
    RENEW = "29"
    END_PATRON_SESSION = "35"
    FEE_PAID = "37"
    PATRON_INFORMATION = "63"
    RENEW_ALL = "65"
    LOGIN = "93"
    REQUEST_ACS_RESEND = "97"
    SC_STATUS = "99"


class ResponseType(str, Enum):
    """Message codes returned by the backend (ACS)."""

    CHECKIN = "10"
    CHECKOUT = "12"
    HOLD = "16"
    ITEM_INFORMATION = "18"
    ITEM_STATUS_UPDATE = "20"
    PATRON_STATUS = "24"
    PATRON_ENABLE = "26"
    RENEW = "30"
    END_SESSION = "36"
    FEE_PAID = "38"
    PATRON_INFORMATION = "64"
    RENEW_ALL = "66"
    LOGIN = "94"
    REQUEST_SC_RESEND = "96"
    ACS_STATUS = "98"


class Stream(Protocol):
    """Protocol for the bidirectional byte stream consumed by the framer.

    Both ``serial.Serial`` and ``transport.connection.SocketStream`` satisfy it.
    ``read`` returns ``b""`` on EOF or when a configured read timeout expires.
    """

    def write(self, data: bytes, /) -> int | None: ...
    def read(self, size: int = ..., /) -> bytes: ...


# Message code width in bytes
CODE_SIZE = 2

# Trailer field codes
SEQUENCE_CODE = "AY"
CHECKSUM_CODE = "AZ"

# Checksum value is 4 uppercase hex digits
CHECKSUM_SIZE = 4

# AZ + 4 hex digits, excluded from the variable-field token region
CHECKSUM_TRAILER_SIZE = len(CHECKSUM_CODE) + CHECKSUM_SIZE

# Variable field values are truncated to this many characters
MAX_VARIABLE_LENGTH = 255

# YYYYMMDDZZZZHHMMSS
DATESTAMP_SIZE = 18

# Default framing
DEFAULT_FIELD_TERMINATOR = "|"
DEFAULT_MESSAGE_TERMINATOR = "\r"

# Default connection/session values
DEFAULT_PORT = 6002
DEFAULT_LANGUAGE = "001"  # English
DEFAULT_MAX_RETRY = 3
DEFAULT_CONNECT_TIMEOUT_S = 30.0
DEFAULT_ENCODING = "utf-8"
