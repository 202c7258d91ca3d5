"""Field encoding helpers for SIP2 messages.

Contains:
- datestamp: 18-byte YYYYMMDDZZZZHHMMSS date/time field
- truncate_bytes: cut text to a byte budget on a character boundary
- pad_fixed: right-justified, space padded field of an exact byte width
- format_count: zero padded decimal for numeric fixed fields
- to_wire / from_wire: text <-> wire bytes
"""

import re
import time
from datetime import datetime

from sip2.common.protocol import DEFAULT_ENCODING

# Local time: the four ZZZZ bytes are blanks
_DATESTAMP_FORMAT = "%Y%m%d    %H%M%S"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def datestamp(when: datetime | float | int | None = None) -> str:
    """Format a SIP2 date/time field in local time.

    Args:
        when: None for the current time, a Unix timestamp, or a datetime
            (rendered as given, without zone conversion).
    """
    if when is None:
        return time.strftime(_DATESTAMP_FORMAT, time.localtime())
    if isinstance(when, datetime):
        return when.strftime(_DATESTAMP_FORMAT)
    return time.strftime(_DATESTAMP_FORMAT, time.localtime(when))


def truncate_bytes(value: str, limit: int, encoding: str = DEFAULT_ENCODING) -> str:
    """Cut value so its encoded form fits in limit bytes.

    A multi-byte character that would straddle the limit is dropped whole.
    """
    data = value.encode(encoding)
    if len(data) <= limit:
        return value
    return data[:limit].decode(encoding, errors="ignore")


def pad_fixed(value: str, width: int, encoding: str = DEFAULT_ENCODING) -> str:
    """Truncate value to width bytes and right-justify with spaces.

    The result always encodes to exactly width bytes.
    """
    value = truncate_bytes(value, width, encoding)
    return " " * (width - len(value.encode(encoding))) + value


def format_count(value: int, width: int) -> str:
    """Zero padded decimal, e.g. fee type 4 -> "04"."""
    return f"{value:0{width}d}"


def parse_int(text: str) -> int:
    """Lenient decimal parse of a fixed field. Non-numeric text yields 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def to_wire(text: str, encoding: str = DEFAULT_ENCODING) -> bytes:
    return text.encode(encoding)


def from_wire(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    return data.decode(encoding, errors="replace")
