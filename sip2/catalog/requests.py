"""SIP2 request encoders.

Each encoder validates its parameters, drives a fresh OutboundMessage
through the fields of one request type in wire order, and returns the
finalized message text. Engine-wide values (institution id, terminal
password, patron credentials, language, location) come from the
builder's ProtocolConfig. Nothing here touches the transport.

Raises ValidationError before building anything when a parameter is out
of range.
"""

from datetime import datetime

from sip2.common.encoding import datestamp, format_count
from sip2.common.errors import ValidationError
from sip2.common.protocol import DATESTAMP_SIZE, RequestType
from sip2.wire.builder import MessageBuilder

DateLike = datetime | float | int

# SC status codes
SC_STATUS_OK = 0
SC_STATUS_OUT_OF_PAPER = 1
SC_STATUS_SHUTTING_DOWN = 2

# Hold modes
HOLD_REMOVE = "-"
HOLD_PLACE = "+"
HOLD_MODIFY = "*"
HOLD_MODES = (HOLD_REMOVE, HOLD_PLACE, HOLD_MODIFY)

# Patron information summary: one Y position per item category
SUMMARY_WIDTH = 10
PATRON_INFO_SUMMARY: dict[str, str] = {
    "none": "      ",
    "hold": "Y     ",
    "overdue": " Y    ",
    "charged": "  Y   ",
    "fine": "   Y  ",
    "recall": "    Y ",
    "unavail": "     Y",
}


def _as_int(name: str, value: int | str, low: int, high: int) -> int:
    """Coerce a numeric parameter and check its range."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}")
    if not low <= number <= high:
        raise ValidationError(f"Invalid {name}: {value!r} (expected {low}-{high})")
    return number


def _optional_date(when: DateLike | None) -> str:
    """Date stamp, or a blank field so the backend applies its default."""
    return datestamp(when) if when is not None else " " * DATESTAMP_SIZE


def login(builder: MessageBuilder, user: str, password: str) -> str:
    """Login (93). Sent once per connection, before any other request."""
    config = builder.config
    msg = builder.new_message(RequestType.LOGIN)
    msg.add_fixed(str(config.uid_algorithm), 1)
    msg.add_fixed(str(config.pwd_algorithm), 1)
    msg.add_variable("CN", user)
    msg.add_variable("CO", password)
    msg.add_variable("CP", config.location, optional=True)
    return msg.finalize()


def sc_status(
    builder: MessageBuilder,
    status: int = SC_STATUS_OK,
    width: int = 80,
    version: float = 2,
) -> str:
    """SC Status (99). Sent right after login; answered with ACS Status.

    Args:
        status: 0 unit OK, 1 printer out of paper, 2 about to shut down.
        width: Maximum print width the terminal supports.
        version: Protocol version, rendered as e.g. "2.00".
    """
    if status not in (SC_STATUS_OK, SC_STATUS_OUT_OF_PAPER, SC_STATUS_SHUTTING_DOWN):
        raise ValidationError(f"Invalid SC status: {status!r} (expected 0, 1 or 2)")
    if not 1 <= version <= 3:
        raise ValidationError(f"Invalid protocol version: {version!r} (expected 1-3)")

    msg = builder.new_message(RequestType.SC_STATUS)
    msg.add_fixed(str(status), 1)
    msg.add_fixed(str(width), 3)
    msg.add_fixed(f"{version:03.2f}", 4)
    return msg.finalize()


def request_resend(builder: MessageBuilder) -> str:
    """Request ACS Resend (97). Carries no sequence number."""
    msg = builder.new_message(RequestType.REQUEST_ACS_RESEND)
    return msg.finalize(with_sequence=False)


def patron_status(builder: MessageBuilder) -> str:
    """Patron Status Request (23)."""
    config = builder.config
    msg = builder.new_message(RequestType.PATRON_STATUS)
    msg.add_fixed(config.language, 3)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password)
    msg.add_variable("AD", config.patron_password)
    return msg.finalize()


def checkout(
    builder: MessageBuilder,
    item: str,
    due_date: DateLike | None = None,
    renewal: str = "N",
    item_properties: str = "",
    fee: str = "N",
    no_block: str = "N",
    cancel: str = "N",
) -> str:
    """Checkout (11).

    A blank due date lets the backend compute the item's default.
    """
    config = builder.config
    msg = builder.new_message(RequestType.CHECKOUT)
    msg.add_fixed(renewal, 1)
    msg.add_fixed(no_block, 1)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_fixed(_optional_date(due_date), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AB", item)
    msg.add_variable("AC", config.terminal_password)
    msg.add_variable("CH", item_properties, optional=True)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("BO", fee, optional=True)
    msg.add_variable("BI", cancel, optional=True)
    return msg.finalize()


def checkin(
    builder: MessageBuilder,
    item: str,
    return_date: DateLike | None = None,
    location: str = "",
    item_properties: str = "",
    no_block: str = "N",
    cancel: str = "",
) -> str:
    """Checkin (09). Location defaults to the terminal's own location."""
    config = builder.config
    msg = builder.new_message(RequestType.CHECKIN)
    msg.add_fixed(no_block, 1)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_fixed(datestamp(return_date), DATESTAMP_SIZE)
    msg.add_variable("AP", location or config.location)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AB", item)
    msg.add_variable("AC", config.terminal_password)
    msg.add_variable("CH", item_properties, optional=True)
    msg.add_variable("BI", cancel, optional=True)
    return msg.finalize()


def block_patron(builder: MessageBuilder, message: str, retained: str = "N") -> str:
    """Block Patron (01). Answered with a Patron Status Response.

    Args:
        message: Reason for blocking (AL).
        retained: "Y" if the card was retained by the terminal.
    """
    config = builder.config
    msg = builder.new_message(RequestType.BLOCK_PATRON)
    msg.add_fixed(retained, 1)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AL", message)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password)
    return msg.finalize()


def patron_information(
    builder: MessageBuilder,
    category: str = "none",
    start: str = "1",
    end: str = "5",
) -> str:
    """Patron Information (63).

    Only one item category can be requested per message.

    Args:
        category: none, hold, overdue, charged, fine, recall or unavail.
        start: First item number to return (BP).
        end: Last item number to return (BQ).
    """
    summary = PATRON_INFO_SUMMARY.get(category)
    if summary is None:
        raise ValidationError(
            f"Invalid patron information category: {category!r} "
            f"(expected one of {list(PATRON_INFO_SUMMARY)})"
        )

    config = builder.config
    msg = builder.new_message(RequestType.PATRON_INFORMATION)
    msg.add_fixed(config.language, 3)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_fixed(summary.ljust(SUMMARY_WIDTH), SUMMARY_WIDTH)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("BP", start, optional=True)
    msg.add_variable("BQ", end, optional=True)
    return msg.finalize()


def end_patron_session(builder: MessageBuilder) -> str:
    """End Patron Session (35). Sent before switching to another patron."""
    config = builder.config
    msg = builder.new_message(RequestType.END_PATRON_SESSION)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("AD", config.patron_password, optional=True)
    return msg.finalize()


def fee_paid(
    builder: MessageBuilder,
    fee_type: int | str,
    payment_type: int | str,
    amount: str,
    currency: str = "USD",
    fee_id: str = "",
    transaction_id: str = "",
) -> str:
    """Fee Paid (37).

    Args:
        fee_type: 01 other/unknown, 02 administrative, 03 damage, 04 overdue,
            05 processing, 06 rental, 07 replacement, 08 computer access,
            09 hold fee. Any value 1-99 is accepted.
        payment_type: 00 cash, 01 VISA, 02 credit card. Any value 0-99.
        amount: Pre-formatted payment amount (BV); currency formatting is
            the caller's concern.
    """
    fee = _as_int("fee type", fee_type, 1, 99)
    payment = _as_int("payment type", payment_type, 0, 99)

    config = builder.config
    msg = builder.new_message(RequestType.FEE_PAID)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_fixed(format_count(fee, 2), 2)
    msg.add_fixed(format_count(payment, 2), 2)
    msg.add_fixed(currency, 3)
    msg.add_variable("BV", amount)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("CG", fee_id, optional=True)
    msg.add_variable("BK", transaction_id, optional=True)
    return msg.finalize()


def item_information(builder: MessageBuilder, item: str) -> str:
    """Item Information (17)."""
    config = builder.config
    msg = builder.new_message(RequestType.ITEM_INFORMATION)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AB", item)
    msg.add_variable("AC", config.terminal_password, optional=True)
    return msg.finalize()


def item_status_update(builder: MessageBuilder, item: str, item_properties: str = "") -> str:
    """Item Status Update (19). CH is required and sent even when empty."""
    config = builder.config
    msg = builder.new_message(RequestType.ITEM_STATUS_UPDATE)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AB", item)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("CH", item_properties)
    return msg.finalize()


def patron_enable(builder: MessageBuilder) -> str:
    """Patron Enable (25). Re-enables a blocked patron; meant for testing."""
    config = builder.config
    msg = builder.new_message(RequestType.PATRON_ENABLE)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("AD", config.patron_password, optional=True)
    return msg.finalize()


def hold(
    builder: MessageBuilder,
    mode: str,
    expiration_date: DateLike | None = None,
    hold_type: int | str = "",
    item: str = "",
    title: str = "",
    fee: str = "N",
    pickup_location: str = "",
) -> str:
    """Hold (15).

    Args:
        mode: "-" remove, "+" place, "*" modify.
        expiration_date: Optional hold expiration (BW).
        hold_type: 1 other, 2 any copy of title, 3 specific copy,
            4 any copy at a single branch. Any value 1-9, or "" to omit.
        fee: "Y" when the patron has acknowledged a fee notice.
    """
    if mode not in HOLD_MODES:
        raise ValidationError(f"Invalid hold mode: {mode!r} (expected one of {HOLD_MODES})")
    if hold_type != "":
        hold_type = str(_as_int("hold type", hold_type, 1, 9))

    config = builder.config
    msg = builder.new_message(RequestType.HOLD)
    msg.add_fixed(mode, 1)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    if expiration_date is not None:
        msg.add_variable("BW", datestamp(expiration_date), optional=True)
    msg.add_variable("BS", pickup_location, optional=True)
    msg.add_variable("BY", hold_type, optional=True)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("AB", item, optional=True)
    msg.add_variable("AJ", title, optional=True)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("BO", fee, optional=True)
    return msg.finalize()


def renew(
    builder: MessageBuilder,
    item: str = "",
    title: str = "",
    due_date: DateLike | None = None,
    item_properties: str = "",
    fee: str = "N",
    no_block: str = "N",
    third_party: str = "N",
) -> str:
    """Renew (29) a single item, identified by item id or title."""
    config = builder.config
    msg = builder.new_message(RequestType.RENEW)
    msg.add_fixed(third_party, 1)
    msg.add_fixed(no_block, 1)
    msg.add_fixed(datestamp(), DATESTAMP_SIZE)
    msg.add_fixed(_optional_date(due_date), DATESTAMP_SIZE)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("AB", item, optional=True)
    msg.add_variable("AJ", title, optional=True)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("CH", item_properties, optional=True)
    msg.add_variable("BO", fee, optional=True)
    return msg.finalize()


def renew_all(builder: MessageBuilder, fee: str = "N") -> str:
    """Renew All (65) items charged to the current patron."""
    config = builder.config
    msg = builder.new_message(RequestType.RENEW_ALL)
    msg.add_variable("AO", config.institution_id)
    msg.add_variable("AA", config.patron_id)
    msg.add_variable("AD", config.patron_password, optional=True)
    msg.add_variable("AC", config.terminal_password, optional=True)
    msg.add_variable("BO", fee, optional=True)
    return msg.finalize()
