"""Cyclic message sequence counter (the AY field)."""

SEQUENCE_MODULUS = 10


class SequenceCounter:
    """Produces 0, 1, ... 9, 0, ... one digit per finalized message.

    State lives for the lifetime of the owning engine; it is never persisted.
    """

    def __init__(self) -> None:
        self._value = -1

    def next(self) -> int:
        self._value = (self._value + 1) % SEQUENCE_MODULUS
        return self._value

    @property
    def last(self) -> int | None:
        """Most recently issued digit, or None before the first call."""
        return None if self._value < 0 else self._value
