"""SIP2 response decoders.

Each decoder applies the static layout of one response type (see
wire.layouts) and returns a ParsedResponse. Decoders do not judge the
content: an "ok" flag of "0" is returned as data, not raised.
"""

import logging

from sip2.common.config import ProtocolConfig
from sip2.common.protocol import CODE_SIZE, ResponseType
from sip2.wire.layouts import LAYOUTS, ResponseLayout
from sip2.wire.parser import ParsedResponse, VariableFields, parse_fixed, parse_variable

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ProtocolConfig()


def _decode(response: str, layout: ResponseLayout, config: ProtocolConfig | None) -> ParsedResponse:
    config = config or _DEFAULT_CONFIG
    code = response[:CODE_SIZE]
    if code != layout.code.value:
        logger.warning(f"Expected {layout.code.name} response ({layout.code.value}), got {code!r}")

    if layout.variable_start is None:
        variable = VariableFields()
    else:
        variable = parse_variable(
            response,
            layout.variable_start,
            with_checksum=config.with_checksum,
            field_terminator=config.field_terminator,
        )

    return ParsedResponse(
        code=code,
        fixed=parse_fixed(response, layout.fields),
        fields=variable.fields,
        raw=variable.raw,
        checksum=variable.checksum,
    )


def parse_login_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    """Login Response (94): ok is "1" on success."""
    return _decode(response, LAYOUTS[ResponseType.LOGIN], config)


def parse_acs_status(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    """ACS Status (98): backend capabilities, answered to SC Status."""
    return _decode(response, LAYOUTS[ResponseType.ACS_STATUS], config)


def parse_patron_status_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.PATRON_STATUS], config)


def parse_checkout_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.CHECKOUT], config)


def parse_checkin_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.CHECKIN], config)


def parse_patron_info_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    """Patron Information Response (64): item counts are decoded as ints."""
    return _decode(response, LAYOUTS[ResponseType.PATRON_INFORMATION], config)


def parse_end_session_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.END_SESSION], config)


def parse_fee_paid_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.FEE_PAID], config)


def parse_item_info_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    """Item Information Response (18): status/marker/fee codes are decoded as ints."""
    return _decode(response, LAYOUTS[ResponseType.ITEM_INFORMATION], config)


def parse_item_status_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.ITEM_STATUS_UPDATE], config)


def parse_patron_enable_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.PATRON_ENABLE], config)


def parse_hold_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.HOLD], config)


def parse_renew_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.RENEW], config)


def parse_renew_all_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    return _decode(response, LAYOUTS[ResponseType.RENEW_ALL], config)


def parse_response(response: str, config: ProtocolConfig | None = None) -> ParsedResponse:
    """Auto-dispatch a response on its two-character code.

    Unknown codes decode with no fixed fields and variable fields from
    offset 2.
    """
    code = response[:CODE_SIZE]
    try:
        layout = LAYOUTS[ResponseType(code)]
    except (ValueError, KeyError):
        logger.debug(f"No layout for response code {code!r}")
        config = config or _DEFAULT_CONFIG
        variable = parse_variable(
            response,
            CODE_SIZE,
            with_checksum=config.with_checksum,
            field_terminator=config.field_terminator,
        )
        return ParsedResponse(
            code=code,
            fixed={},
            fields=variable.fields,
            raw=variable.raw,
            checksum=variable.checksum,
        )
    return _decode(response, layout, config)
