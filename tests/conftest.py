"""pytest configuration and fixtures for sip2 tests.

Provides:
- ScriptedStream: Half-duplex peer answering each write with the next scripted response
- sip2_response / corrupt: helpers to build backend responses
- Markers for unit vs integration tests
"""

import pytest

from sip2.common.checksum import compute_checksum
from sip2.common.config import ProtocolConfig
from sip2.wire.builder import MessageBuilder

# Fixed fields shared by the canned responses below
DATE = "20240115    103000"
PATRON_STATUS_FIXED = " " * 14 + "001" + DATE


def sip2_response(body: str, sequence: int | None = 0, checksum: bool = True) -> bytes:
    """Build a backend response with optional AY/AZ trailers and the terminator."""
    message = body
    if sequence is not None:
        message += f"AY{sequence}"
    if checksum:
        message += "AZ"
        message += compute_checksum(message.encode("ascii"))
    return (message + "\r").encode("ascii")


def corrupt(response: bytes) -> bytes:
    """Replace the trailing checksum of a response with a wrong one."""
    body, claimed = response[:-5], response[-5:-1]
    wrong = f"{(int(claimed, 16) + 1) & 0xFFFF:04X}".encode("ascii")
    return body + wrong + b"\r"


class ScriptedStream:
    """Scripted backend: each write queues the next response for reading.

    Records every write. Once the script runs out, reads return b"" (EOF).
    inject() makes bytes readable without a preceding write.
    """

    def __init__(self, responses: list[bytes] | None = None) -> None:
        self.responses = list(responses or [])
        self.writes: list[bytes] = []
        self._pending = bytearray()
        self.closed = False

    def write(self, data: bytes, /) -> int:
        self.writes.append(bytes(data))
        if self.responses:
            self._pending += self.responses.pop(0)
        return len(data)

    def inject(self, data: bytes) -> None:
        """Queue unsolicited bytes from the backend."""
        self._pending += data

    def read(self, size: int = 1, /) -> bytes:
        data = bytes(self._pending[:size])
        del self._pending[:size]
        return data

    def close(self) -> None:
        self.closed = True

    @property
    def sent_codes(self) -> list[str]:
        """Two-character codes of the requests written so far."""
        return [w[:2].decode("ascii") for w in self.writes]


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (spawns processes)")


@pytest.fixture
def config() -> ProtocolConfig:
    return ProtocolConfig(
        institution_id="Inst",
        terminal_password="tpw",
        location="Desk1",
        patron_id="P1",
        patron_password="0000",
    )


@pytest.fixture
def builder(config: ProtocolConfig) -> MessageBuilder:
    return MessageBuilder(config)
