"""Fixed-field layouts of SIP2 responses.

Each response type maps to an ordered tuple of (name, offset, width) field
specs plus the offset where its variable fields begin. Offsets count from
the start of the message, so every layout begins at 2 (after the code).
"""

from dataclasses import dataclass

from sip2.common.protocol import CODE_SIZE, DATESTAMP_SIZE, ResponseType


@dataclass(frozen=True)
class FieldSpec:
    """One fixed field of a response."""

    name: str
    offset: int
    width: int
    numeric: bool = False  # Decimal-coerced (counts, codes)

    @property
    def end(self) -> int:
        return self.offset + self.width


@dataclass(frozen=True)
class ResponseLayout:
    """Fixed fields and variable-field start offset for one response type."""

    code: ResponseType
    fields: tuple[FieldSpec, ...]
    variable_start: int | None  # None: response carries no variable fields to parse

    def __post_init__(self) -> None:
        """Validate invariants."""
        position = CODE_SIZE
        for spec in self.fields:
            if spec.offset != position:
                raise ValueError(
                    f"{self.code.name}: field {spec.name} at {spec.offset}, expected {position}"
                )
            position = spec.end
        if self.variable_start is not None and self.variable_start != position:
            raise ValueError(
                f"{self.code.name}: variable fields start at {self.variable_start}, "
                f"fixed fields end at {position}"
            )


def _date(name: str, offset: int) -> FieldSpec:
    return FieldSpec(name, offset, DATESTAMP_SIZE)


def _flag(name: str, offset: int) -> FieldSpec:
    return FieldSpec(name, offset, 1)


_PATRON_STATUS_FIELDS = (
    FieldSpec("patron_status", 2, 14),
    FieldSpec("language", 16, 3),
    _date("transaction_date", 19),
)

_CHECKOUT_FIELDS = (
    _flag("ok", 2),
    _flag("renewal_ok", 3),
    _flag("magnetic", 4),
    _flag("desensitize", 5),
    _date("transaction_date", 6),
)

LAYOUTS: dict[ResponseType, ResponseLayout] = {
    layout.code: layout
    for layout in (
        ResponseLayout(ResponseType.LOGIN, (_flag("ok", 2),), None),
        ResponseLayout(
            ResponseType.ACS_STATUS,
            (
                _flag("online", 2),
                _flag("checkin", 3),
                _flag("checkout", 4),
                _flag("renewal", 5),
                _flag("patron_update", 6),
                _flag("offline", 7),
                FieldSpec("timeout", 8, 3),
                FieldSpec("retries", 11, 3),
                _date("transaction_date", 14),
                FieldSpec("protocol", 32, 4),
            ),
            36,
        ),
        ResponseLayout(ResponseType.PATRON_STATUS, _PATRON_STATUS_FIELDS, 37),
        ResponseLayout(ResponseType.PATRON_ENABLE, _PATRON_STATUS_FIELDS, 37),
        ResponseLayout(ResponseType.CHECKOUT, _CHECKOUT_FIELDS, 24),
        ResponseLayout(ResponseType.RENEW, _CHECKOUT_FIELDS, 24),
        ResponseLayout(
            ResponseType.CHECKIN,
            (
                _flag("ok", 2),
                _flag("resensitize", 3),
                _flag("magnetic", 4),
                _flag("alert", 5),
                _date("transaction_date", 6),
            ),
            24,
        ),
        ResponseLayout(
            ResponseType.PATRON_INFORMATION,
            _PATRON_STATUS_FIELDS
            + (
                FieldSpec("hold_count", 37, 4, numeric=True),
                FieldSpec("overdue_count", 41, 4, numeric=True),
                FieldSpec("charged_count", 45, 4, numeric=True),
                FieldSpec("fine_count", 49, 4, numeric=True),
                FieldSpec("recall_count", 53, 4, numeric=True),
                FieldSpec("unavailable_count", 57, 4, numeric=True),
            ),
            61,
        ),
        ResponseLayout(
            ResponseType.END_SESSION,
            (_flag("end_session", 2), _date("transaction_date", 3)),
            21,
        ),
        ResponseLayout(
            ResponseType.FEE_PAID,
            (_flag("payment_accepted", 2), _date("transaction_date", 3)),
            21,
        ),
        ResponseLayout(
            ResponseType.ITEM_INFORMATION,
            (
                FieldSpec("circulation_status", 2, 2, numeric=True),
                FieldSpec("security_marker", 4, 2, numeric=True),
                FieldSpec("fee_type", 6, 2, numeric=True),
                _date("transaction_date", 8),
            ),
            26,
        ),
        ResponseLayout(
            ResponseType.ITEM_STATUS_UPDATE,
            (_flag("properties_ok", 2), _date("transaction_date", 3)),
            21,
        ),
        ResponseLayout(
            ResponseType.HOLD,
            (
                _flag("ok", 2),
                _flag("available", 3),
                _date("transaction_date", 4),
                _date("expiration_date", 22),
            ),
            40,
        ),
        ResponseLayout(
            ResponseType.RENEW_ALL,
            (
                _flag("ok", 2),
                FieldSpec("renewed", 3, 4),
                FieldSpec("unrenewed", 7, 4),
                _date("transaction_date", 11),
            ),
            29,
        ),
    )
}
