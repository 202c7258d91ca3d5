"""Unit tests for the outbound message builder."""

import pytest

from sip2.catalog import requests
from sip2.common.checksum import compute_checksum, verify_checksum
from sip2.common.config import ProtocolConfig
from sip2.common.sequence import SequenceCounter
from sip2.wire.builder import FieldOutcome, MessageBuilder, Phase


@pytest.mark.unit
class TestFixedFields:
    """Tests for fixed-width fields."""

    def test_right_justified_and_padded(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        assert msg.add_fixed("80", 3) == FieldOutcome.APPENDED
        assert msg.buffer == "99 80"

    def test_truncated_to_width(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.add_fixed("abcdef", 3)
        assert msg.buffer == "99abc"

    def test_exact_width_unchanged(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("23")
        msg.add_fixed("001", 3)
        assert msg.buffer == "23001"

    def test_multibyte_value_truncated_to_byte_width(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.add_fixed("\u20ac\u20ac\u20ac", 3)
        assert len(msg.buffer.encode("utf-8")) == 2 + 3
        assert msg.buffer == "99\u20ac"

    def test_multibyte_value_padded_to_byte_width(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.add_fixed("\u00e9", 4)
        assert msg.buffer == "99  \u00e9"
        assert len(msg.buffer.encode("utf-8")) == 2 + 4

    def test_partial_character_is_dropped(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.add_fixed("a\u20ac", 2)
        assert msg.buffer == "99 a"

    def test_later_fixed_offsets_are_preserved(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.add_fixed("\u00e9\u00e9\u00e9", 3)
        msg.add_fixed("80", 3)
        wire = msg.buffer.encode("utf-8")
        assert wire[5:8] == b" 80"

    def test_width_follows_configured_encoding(self) -> None:
        builder = MessageBuilder(ProtocolConfig(encoding="latin-1"))
        msg = builder.new_message("99")
        msg.add_fixed("\u00e9\u00e9\u00e9", 3)
        assert msg.buffer == "99\u00e9\u00e9\u00e9"

    def test_rejected_after_variable_field(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("23")
        msg.add_variable("AO", "Inst")
        before = msg.buffer
        assert msg.add_fixed("X", 1) == FieldOutcome.REJECTED
        assert msg.buffer == before
        assert msg.phase is Phase.VARIABLE


@pytest.mark.unit
class TestVariableFields:
    """Tests for code-prefixed variable fields."""

    def test_code_value_terminator(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("93")
        assert msg.add_variable("CN", "user") == FieldOutcome.APPENDED
        assert msg.buffer == "93CNuser|"

    def test_required_empty_field_is_emitted(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("19")
        msg.add_variable("CH", "")
        assert msg.buffer == "19CH|"

    def test_optional_empty_field_is_skipped(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("93")
        assert msg.add_variable("CP", "", optional=True) == FieldOutcome.SKIPPED
        assert msg.buffer == "93"
        # Skipping does not end the fixed phase
        assert msg.phase is Phase.FIXED
        assert msg.add_fixed("0", 1) == FieldOutcome.APPENDED

    def test_value_truncated_to_255(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("17")
        msg.add_variable("AB", "x" * 300)
        assert msg.buffer == "17AB" + "x" * 255 + "|"

    def test_multibyte_value_truncated_to_255_bytes(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("17")
        msg.add_variable("AJ", "\u00e9" * 300)
        value = msg.buffer[len("17AJ"):-1].encode("utf-8")
        # 127 two-byte characters; the 128th would straddle the limit
        assert len(value) == 254
        assert value.decode("utf-8") == "\u00e9" * 127

    def test_multibyte_value_within_limit_unchanged(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("17")
        msg.add_variable("AJ", "\u00e9" * 100)
        assert msg.buffer == "17AJ" + "\u00e9" * 100 + "|"

    def test_custom_field_terminator(self) -> None:
        builder = MessageBuilder(ProtocolConfig(field_terminator="^"))
        msg = builder.new_message("17")
        msg.add_variable("AB", "item")
        assert msg.buffer == "17ABitem^"


@pytest.mark.unit
class TestFinalize:
    """Tests for sequence/checksum trailers."""

    def test_sc_status_example(self, builder: MessageBuilder) -> None:
        wire = requests.sc_status(builder)
        body = "990 802.00AY0AZ"
        assert wire == body + compute_checksum(body.encode("ascii")) + "\r"

    def test_checksum_verifies(self, builder: MessageBuilder) -> None:
        wire = requests.login(builder, "user", "pass")
        assert verify_checksum(wire.encode("ascii"), terminator=b"\r")

    def test_checksum_follows_sequence(self, builder: MessageBuilder) -> None:
        wire = builder.new_message("99").finalize()
        assert wire.endswith("\r")
        assert wire[2:5] == "AY0"
        assert wire[5:7] == "AZ"
        assert len(wire) == 2 + 3 + 2 + 4 + 1

    def test_sequence_increments_per_message(self, builder: MessageBuilder) -> None:
        first = builder.new_message("99").finalize()
        second = builder.new_message("99").finalize()
        assert first[2:5] == "AY0"
        assert second[2:5] == "AY1"

    def test_without_checksum(self) -> None:
        builder = MessageBuilder(ProtocolConfig(with_checksum=False))
        assert builder.new_message("99").finalize() == "99AY0\r"

    def test_without_sequence(self) -> None:
        builder = MessageBuilder(ProtocolConfig(with_sequence=False, with_checksum=False))
        assert builder.new_message("99").finalize() == "99\r"

    def test_without_sequence_does_not_consume_counter(self) -> None:
        sequence = SequenceCounter()
        builder = MessageBuilder(ProtocolConfig(), sequence)
        builder.new_message("97").finalize(with_sequence=False)
        assert sequence.last is None

    def test_per_call_override(self, builder: MessageBuilder) -> None:
        wire = builder.new_message("97").finalize(with_sequence=False, with_checksum=False)
        assert wire == "97\r"

    def test_finalize_twice_raises(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.finalize()
        assert msg.finalized
        with pytest.raises(RuntimeError):
            msg.finalize()

    def test_add_after_finalize_raises(self, builder: MessageBuilder) -> None:
        msg = builder.new_message("99")
        msg.finalize()
        with pytest.raises(RuntimeError):
            msg.add_variable("AO", "Inst")

    def test_new_message_starts_clean(self, builder: MessageBuilder) -> None:
        first = builder.new_message("93")
        first.add_variable("CN", "user")
        second = builder.new_message("93")
        assert second.buffer == "93"
        assert second.phase is Phase.FIXED

    def test_invalid_code_length(self, builder: MessageBuilder) -> None:
        with pytest.raises(ValueError):
            builder.new_message("9")
