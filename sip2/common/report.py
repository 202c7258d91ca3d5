"""Printable outcome reports for the SIP2 client.

Contains:
- Report ABC: a result summary rendered as text lines, with a pass/fail verdict
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class Report(ABC):
    """Base class for the summaries the CLI prints after a run."""

    @abstractmethod
    def lines(self) -> Iterator[str]:
        """Yield the report text, one line at a time."""

    @abstractmethod
    def success(self) -> bool:
        """Return True if the outcome maps to a zero exit code."""

    def print(self) -> None:
        """Print the report to stdout."""
        for line in self.lines():
            print(line)
