"""Session reporting for the SIP2 client.

Contains:
- AcsStatusReport: Report after login and self check
- PatronReport: Report summarizing one patron session
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from sip2.common.report import Report
from sip2.transport.framer import FramerStats
from sip2.wire.parser import ParsedResponse


@dataclass
class AcsStatusReport(Report):
    """Report of the backend (ACS) status after self check.

    When connected=True, status is required.
    When connected=False, error should be set.
    """

    connected: bool
    status: ParsedResponse | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.connected and self.status is None:
            raise ValueError("status is required when connected=True")

    def lines(self) -> Iterator[str]:
        """Render the ACS status report."""
        if not self.connected:
            yield f"ACS: FAILED ({self.error})"
            return

        # status is guaranteed non-None by __post_init__
        assert self.status is not None
        fixed = self.status.fixed
        state = "ONLINE" if self.success() else "OFFLINE"
        yield f"ACS: {state} (protocol={fixed['protocol']}, institution={self.status.first('AO')})"
        yield (
            f"Allowed: checkin={fixed['checkin']} checkout={fixed['checkout']} "
            f"renewal={fixed['renewal']} patron_update={fixed['patron_update']}"
        )
        yield f"Timeout: {fixed['timeout'].strip()} retries={fixed['retries'].strip()}"
        for message in self.status.values("AF"):
            yield f"Message: {message}"

    def success(self) -> bool:
        """Return True if the backend reported itself online."""
        return self.connected and self.status is not None and self.status.fixed["online"] == "Y"


@dataclass
class PatronReport(Report):
    """Summary of one patron session."""

    patron_id: str
    valid: bool
    name: str = ""
    fines_total: float = 0.0
    screen_messages: tuple[str, ...] = ()
    items: dict[str, tuple[str, ...]] = field(default_factory=dict)
    stats: FramerStats | None = None
    error: Exception | None = None

    def lines(self) -> Iterator[str]:
        """Render the patron report."""
        if self.error is not None:
            yield f"Patron {self.patron_id}: FAILED ({self.error})"
            return
        if not self.valid:
            yield f"Patron {self.patron_id}: INVALID"
            return

        yield f"Patron {self.patron_id}: VALID ({self.name or 'no name'})"
        yield f"Fines: {self.fines_total:.2f}"
        for message in self.screen_messages:
            yield f"Message: {message}"
        for category, item_ids in self.items.items():
            yield f"{category}: {len(item_ids)} item(s)"
            for item_id in item_ids:
                yield f"  {item_id}"

        if self.stats is not None:
            s = self.stats
            yield (
                f"Exchange: {s.requests} requests, {s.responses} responses, "
                f"{s.checksum_errors} checksum errors, {s.resends} resends"
            )

    def success(self) -> bool:
        """Return True if the patron was found valid without errors."""
        return self.error is None and self.valid
