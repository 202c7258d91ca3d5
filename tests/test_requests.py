"""Unit tests for the request encoders."""

from datetime import datetime

import pytest

from sip2.catalog import requests
from sip2.common.encoding import datestamp
from sip2.common.errors import ValidationError
from sip2.wire.builder import MessageBuilder
from tests.conftest import DATE

BLANK_DATE = " " * 18


@pytest.fixture
def frozen_date(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the current-time date stamp used by the encoders."""

    def fake_datestamp(when=None):
        return DATE if when is None else datestamp(when)

    monkeypatch.setattr(requests, "datestamp", fake_datestamp)


def _strip_trailers(wire: str) -> str:
    """Drop AY<d>AZ<4 hex> and the terminator."""
    assert wire.endswith("\r")
    return wire[:-10]


@pytest.mark.unit
@pytest.mark.usefixtures("frozen_date")
class TestEncoders:
    """Tests for field order and fixed-field rendering of each request."""

    def test_login(self, builder: MessageBuilder) -> None:
        wire = requests.login(builder, "user", "pass")
        assert _strip_trailers(wire) == "9300CNuser|COpass|CPDesk1|"

    def test_login_without_location(self, builder: MessageBuilder) -> None:
        builder.config.location = ""
        wire = requests.login(builder, "user", "pass")
        assert _strip_trailers(wire) == "9300CNuser|COpass|"

    def test_sc_status(self, builder: MessageBuilder) -> None:
        wire = requests.sc_status(builder, status=1, width=40, version=2)
        assert _strip_trailers(wire) == "991 402.00"

    def test_request_resend_has_no_sequence(self, builder: MessageBuilder) -> None:
        wire = requests.request_resend(builder)
        assert wire.startswith("97AZ")
        assert len(wire) == 2 + 2 + 4 + 1
        assert builder.sequence.last is None

    def test_patron_status(self, builder: MessageBuilder) -> None:
        wire = requests.patron_status(builder)
        assert _strip_trailers(wire) == "23001" + DATE + "AOInst|AAP1|ACtpw|AD0000|"

    def test_checkout_default_due_date_blank(self, builder: MessageBuilder) -> None:
        wire = requests.checkout(builder, "item1")
        expected = (
            "11NN" + DATE + BLANK_DATE + "AOInst|AAP1|ABitem1|ACtpw|AD0000|BON|BIN|"
        )
        assert _strip_trailers(wire) == expected

    def test_checkout_with_due_date(self, builder: MessageBuilder) -> None:
        due = datetime(2024, 2, 1, 12, 0, 0)
        wire = requests.checkout(builder, "item1", due_date=due, item_properties="props")
        assert wire[22:40] == "20240201    120000"
        assert "|CHprops|" in wire

    def test_checkin_defaults_to_terminal_location(self, builder: MessageBuilder) -> None:
        returned = datetime(2024, 1, 15, 9, 0, 0)
        wire = requests.checkin(builder, "item1", return_date=returned)
        expected = "09N" + DATE + "20240115    090000" + "APDesk1|AOInst|ABitem1|ACtpw|"
        assert _strip_trailers(wire) == expected

    def test_checkin_explicit_location(self, builder: MessageBuilder) -> None:
        wire = requests.checkin(builder, "item1", location="Branch")
        assert "APBranch|" in wire

    def test_block_patron(self, builder: MessageBuilder) -> None:
        wire = requests.block_patron(builder, "card lost", retained="Y")
        expected = "01Y" + DATE + "AOInst|ALcard lost|AAP1|ACtpw|"
        assert _strip_trailers(wire) == expected

    def test_patron_information_summary(self, builder: MessageBuilder) -> None:
        wire = requests.patron_information(builder, "charged", start="1", end="10")
        expected = (
            "63001" + DATE + "  Y       " + "AOInst|AAP1|ACtpw|AD0000|BP1|BQ10|"
        )
        assert _strip_trailers(wire) == expected

    def test_patron_information_none(self, builder: MessageBuilder) -> None:
        wire = requests.patron_information(builder)
        assert wire[23:33] == " " * 10

    def test_end_patron_session(self, builder: MessageBuilder) -> None:
        wire = requests.end_patron_session(builder)
        assert _strip_trailers(wire) == "35" + DATE + "AOInst|AAP1|ACtpw|AD0000|"

    def test_fee_paid(self, builder: MessageBuilder) -> None:
        wire = requests.fee_paid(builder, 4, "1", "2.50", fee_id="F1")
        expected = "37" + DATE + "0401USD" + "BV2.50|AOInst|AAP1|ACtpw|AD0000|CGF1|"
        assert _strip_trailers(wire) == expected

    def test_item_information(self, builder: MessageBuilder) -> None:
        wire = requests.item_information(builder, "item1")
        assert _strip_trailers(wire) == "17" + DATE + "AOInst|ABitem1|ACtpw|"

    def test_item_status_update_sends_empty_properties(self, builder: MessageBuilder) -> None:
        wire = requests.item_status_update(builder, "item1")
        assert _strip_trailers(wire) == "19" + DATE + "AOInst|ABitem1|ACtpw|CH|"

    def test_patron_enable(self, builder: MessageBuilder) -> None:
        wire = requests.patron_enable(builder)
        assert _strip_trailers(wire) == "25" + DATE + "AOInst|AAP1|ACtpw|AD0000|"

    def test_hold(self, builder: MessageBuilder) -> None:
        wire = requests.hold(builder, "+", hold_type=2, item="item1", pickup_location="Main")
        expected = (
            "15+" + DATE + "BSMain|BY2|AOInst|AAP1|AD0000|ABitem1|ACtpw|BON|"
        )
        assert _strip_trailers(wire) == expected

    def test_hold_expiration(self, builder: MessageBuilder) -> None:
        expires = datetime(2024, 3, 1, 0, 0, 0)
        wire = requests.hold(builder, "-", expiration_date=expires)
        assert wire.startswith("15-" + DATE + "BW20240301    000000|")

    def test_renew(self, builder: MessageBuilder) -> None:
        wire = requests.renew(builder, item="item1")
        expected = "29NN" + DATE + BLANK_DATE + "AOInst|AAP1|AD0000|ABitem1|ACtpw|BON|"
        assert _strip_trailers(wire) == expected

    def test_renew_all(self, builder: MessageBuilder) -> None:
        wire = requests.renew_all(builder)
        assert _strip_trailers(wire) == "65AOInst|AAP1|AD0000|ACtpw|BON|"


@pytest.mark.unit
class TestValidation:
    """Tests for parameters rejected before anything is built."""

    @pytest.mark.parametrize("fee_type", [0, 100, "x"])
    def test_fee_type(self, builder: MessageBuilder, fee_type) -> None:
        with pytest.raises(ValidationError):
            requests.fee_paid(builder, fee_type, 0, "1.00")
        assert builder.sequence.last is None

    @pytest.mark.parametrize("payment_type", [-1, 100, ""])
    def test_payment_type(self, builder: MessageBuilder, payment_type) -> None:
        with pytest.raises(ValidationError):
            requests.fee_paid(builder, 1, payment_type, "1.00")

    def test_hold_mode(self, builder: MessageBuilder) -> None:
        with pytest.raises(ValidationError):
            requests.hold(builder, "x")

    @pytest.mark.parametrize("hold_type", [0, 10, "abc"])
    def test_hold_type(self, builder: MessageBuilder, hold_type) -> None:
        with pytest.raises(ValidationError):
            requests.hold(builder, "+", hold_type=hold_type)

    def test_sc_status_code(self, builder: MessageBuilder) -> None:
        with pytest.raises(ValidationError):
            requests.sc_status(builder, status=3)

    def test_protocol_version(self, builder: MessageBuilder) -> None:
        with pytest.raises(ValidationError):
            requests.sc_status(builder, version=4)

    def test_patron_information_category(self, builder: MessageBuilder) -> None:
        with pytest.raises(ValidationError):
            requests.patron_information(builder, "everything")
