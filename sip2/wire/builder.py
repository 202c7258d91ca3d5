"""Outbound message builder for SIP2 requests.

Message layout::

    TypeCode(2) FixedFields VariableFields [AY<digit>] [AZ<4 hex>] Terminator

A message starts in the FIXED phase. The first variable field that is
actually emitted moves it to the VARIABLE phase for good; fixed fields
offered after that are rejected and leave the buffer untouched.
"""

import logging
from enum import Enum, auto

from sip2.common.checksum import compute_checksum
from sip2.common.config import ProtocolConfig
from sip2.common.encoding import pad_fixed, to_wire, truncate_bytes
from sip2.common.protocol import (
    CHECKSUM_CODE,
    CODE_SIZE,
    MAX_VARIABLE_LENGTH,
    SEQUENCE_CODE,
    TRACE,
    RequestType,
)
from sip2.common.sequence import SequenceCounter

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Builder phase for one message."""

    FIXED = auto()
    VARIABLE = auto()


class FieldOutcome(Enum):
    """Result of offering a field to the builder."""

    APPENDED = auto()  # Bytes were added to the message
    SKIPPED = auto()  # Optional variable field with an empty value, omitted by design
    REJECTED = auto()  # Fixed field offered after the variable phase began


class OutboundMessage:
    """Mutable build state for exactly one request.

    Created by MessageBuilder.new_message(), populated by the request
    catalog, then finalized once into the wire string.
    """

    def __init__(self, code: str, config: ProtocolConfig, sequence: SequenceCounter) -> None:
        if len(code) != CODE_SIZE:
            raise ValueError(f"Message code must be {CODE_SIZE} characters, got {code!r}")
        self.code = code
        self._config = config
        self._sequence = sequence
        self._buffer = code
        self._phase = Phase.FIXED
        self._wire: str | None = None

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def buffer(self) -> str:
        """Message text built so far, without trailers."""
        return self._buffer

    @property
    def finalized(self) -> bool:
        return self._wire is not None

    def _check_open(self) -> None:
        if self._wire is not None:
            raise RuntimeError(f"Message {self.code} already finalized")

    def add_fixed(self, value: str, width: int) -> FieldOutcome:
        """Append a fixed-width field, right-justified and space padded to width bytes."""
        self._check_open()
        if self._phase is Phase.VARIABLE:
            logger.debug(f"Rejecting fixed field {value!r} after variable fields in {self.code}")
            return FieldOutcome.REJECTED
        self._buffer += pad_fixed(value, width, self._config.encoding)
        return FieldOutcome.APPENDED

    def add_variable(self, code: str, value: str, optional: bool = False) -> FieldOutcome:
        """Append a code-prefixed, terminated variable field.

        An optional field with an empty value is omitted entirely and does not
        end the fixed phase.
        """
        self._check_open()
        if optional and value == "":
            logger.debug(f"Skipping optional field {code}")
            return FieldOutcome.SKIPPED
        self._phase = Phase.VARIABLE
        value = truncate_bytes(value, MAX_VARIABLE_LENGTH, self._config.encoding)
        self._buffer += code + value + self._config.field_terminator
        return FieldOutcome.APPENDED

    def finalize(
        self,
        with_sequence: bool | None = None,
        with_checksum: bool | None = None,
    ) -> str:
        """Append the sequence/checksum trailers and terminator.

        None means "use the engine config"; False suppresses the trailer
        even when it is enabled globally.
        """
        self._check_open()
        if with_sequence is None:
            with_sequence = self._config.with_sequence
        if with_checksum is None:
            with_checksum = self._config.with_checksum

        message = self._buffer
        if with_sequence:
            message += SEQUENCE_CODE + str(self._sequence.next())
        if with_checksum:
            message += CHECKSUM_CODE
            message += compute_checksum(to_wire(message, self._config.encoding))
        message += self._config.message_terminator

        self._wire = message
        logger.log(TRACE, f"Built request {message!r}")
        return message


class MessageBuilder:
    """Factory for OutboundMessage instances sharing one config and counter."""

    def __init__(self, config: ProtocolConfig, sequence: SequenceCounter | None = None) -> None:
        self.config = config
        self.sequence = sequence if sequence is not None else SequenceCounter()

    def new_message(self, code: RequestType | str) -> OutboundMessage:
        """Start a fresh message. Previous messages are unaffected."""
        if isinstance(code, RequestType):
            code = code.value
        return OutboundMessage(code, self.config, self.sequence)
