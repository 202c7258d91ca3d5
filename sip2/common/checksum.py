"""Message checksum for SIP2.

The protocol calls this field a "CRC" but it is an additive checksum:
the byte values of the message body are summed, the sum is negated
modulo 2**16 and rendered as 4 uppercase hex digits.

  body = everything up to and including the "AZ" field code
  checksum = (-sum(body)) & 0xFFFF
"""

from sip2.common.protocol import CHECKSUM_SIZE

# PHP-style trim() set, applied before splitting off the claimed checksum
_TRIM_BYTES = b" \t\n\r\x00\x0b"


def compute_checksum(body: bytes) -> str:
    """Compute the 4 hex digit checksum of a message body."""
    total = sum(body)
    value = (-total) & 0xFFFF
    return f"{value:04X}"[-CHECKSUM_SIZE:]


def verify_checksum(message: bytes, enabled: bool = True, terminator: bytes = b"") -> bool:
    """Check the trailing checksum of a received message.

    Returns True without inspecting the message when checksums are disabled.
    The comparison is case-sensitive against the recomputed value.
    """
    if not enabled:
        return True

    trimmed = message.strip(_TRIM_BYTES + terminator)
    if len(trimmed) < CHECKSUM_SIZE:
        return False

    body, claimed = trimmed[:-CHECKSUM_SIZE], trimmed[-CHECKSUM_SIZE:]
    return compute_checksum(body).encode("ascii") == claimed
