"""Response parsing for SIP2 messages.

A response is split into fixed fields at layout-defined offsets and a
trailing run of variable fields::

    Code(2) FixedFields  AOinst|AApatron|...|AY<d>  AZ<4 hex>  Terminator
                         ^ variable_start           ^ last 6 bytes (checksum on)

Variable tokens are split on the field terminator. The first two
characters of a token are its field code; control bytes (0x00-0x1F) are
stripped from both ends of the value. Values that end up blank are kept
in ``raw`` but not stored under their code.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from sip2.common.encoding import parse_int
from sip2.common.protocol import (
    CHECKSUM_SIZE,
    CHECKSUM_TRAILER_SIZE,
    CODE_SIZE,
    DEFAULT_FIELD_TERMINATOR,
)
from sip2.wire.layouts import FieldSpec

_CONTROL_CHARS = "".join(chr(c) for c in range(0x20))

# PHP-style trim() set
_TRIM_CHARS = " \t\n\r\x00\x0b"


@dataclass(frozen=True)
class VariableFields:
    """Decoded variable-field region of a response."""

    raw: tuple[str, ...] = ()
    fields: dict[str, tuple[str, ...]] = field(default_factory=dict)
    checksum: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedResponse:
    """A decoded response message. Owned by the caller, never mutated."""

    code: str
    fixed: dict[str, str | int]
    fields: dict[str, tuple[str, ...]]
    raw: tuple[str, ...]
    checksum: tuple[str, ...]

    def values(self, code: str) -> tuple[str, ...]:
        """All decoded values for a field code, in encounter order."""
        return self.fields.get(code, ())

    def first(self, code: str, default: str = "") -> str:
        values = self.fields.get(code)
        return values[0] if values else default

    def __repr__(self) -> str:
        return (
            f"ParsedResponse(code={self.code!r}, fixed={self.fixed!r}, "
            f"fields={sorted(self.fields)})"
        )


def parse_fixed(response: str, layout: Iterable[FieldSpec]) -> dict[str, str | int]:
    """Slice fixed fields out of a response. Content is not validated."""
    result: dict[str, str | int] = {}
    for spec in layout:
        value = response[spec.offset : spec.end]
        result[spec.name] = parse_int(value) if spec.numeric else value
    return result


def parse_variable(
    response: str,
    start: int,
    with_checksum: bool = True,
    field_terminator: str = DEFAULT_FIELD_TERMINATOR,
) -> VariableFields:
    """Split the variable-field region of a response into coded values.

    With checksums on, the final AZ+4 hex digits are excluded from the
    token region and the 4 digits are returned as ``checksum``.
    """
    response = response.strip(_TRIM_CHARS)
    if with_checksum:
        region = response[start:-CHECKSUM_TRAILER_SIZE]
    else:
        region = response[start:]

    raw = tuple(region.split(field_terminator))
    collected: dict[str, list[str]] = {}
    for token in raw:
        code, value = token[:CODE_SIZE], token[CODE_SIZE:]
        clean = value.strip(_CONTROL_CHARS)
        if clean.strip() != "":
            collected.setdefault(code, []).append(clean)

    checksum = (response[-CHECKSUM_SIZE:],) if with_checksum else ()
    return VariableFields(
        raw=raw,
        fields={code: tuple(values) for code, values in collected.items()},
        checksum=checksum,
    )
