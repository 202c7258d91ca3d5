"""Request/response framing over a byte stream.

Contains:
- FramerStats: counters for one framer's lifetime
- Framer: send a finalized request, read one terminator-delimited response,
  resend the same bytes when the response fails checksum verification

The protocol is half-duplex: exactly one request is outstanding at a time.
Callers sharing a stream across threads must serialize calls to exchange().
"""

import logging
from dataclasses import dataclass

from sip2.common.checksum import verify_checksum
from sip2.common.config import ProtocolConfig
from sip2.common.errors import ChecksumExhaustedError, TransportError
from sip2.common.protocol import TRACE, Stream

logger = logging.getLogger(__name__)


@dataclass
class FramerStats:
    """Counters accumulated across exchanges."""

    requests: int = 0
    responses: int = 0
    checksum_ok: int = 0
    checksum_errors: int = 0
    resends: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0


class Framer:
    """Writes requests to and reads responses from an open stream.

    The read is byte-at-a-time until the message terminator. It has no
    deadline of its own: bound it with a read timeout on the stream
    (ProtocolConfig.read_timeout_s is applied by the connection openers).
    """

    def __init__(self, stream: Stream, config: ProtocolConfig) -> None:
        self.stream = stream
        self.config = config
        self.retry_count = 0  # Consecutive checksum failures for the current request
        self.stats = FramerStats()

    def send(self, message: bytes) -> int:
        """Write the full request to the stream."""
        try:
            written = self.stream.write(message)
        except OSError as e:
            raise TransportError(f"Write failed: {e}") from e
        if written is not None and written < len(message):
            raise TransportError(f"Short write: {written} of {len(message)} bytes")
        self.stats.bytes_sent += len(message)
        logger.log(TRACE, f"Sent {message!r}")
        return len(message)

    def receive(self) -> bytes:
        """Read one response, terminator included.

        Raises:
            TransportError: On read error, EOF or read timeout before the terminator.
        """
        terminator = self.config.terminator_bytes
        buffer = bytearray()
        while True:
            try:
                byte = self.stream.read(1)
            except OSError as e:
                raise TransportError(f"Read failed after {len(buffer)} bytes: {e}") from e
            if not byte:
                raise TransportError(
                    f"Stream closed or timed out after {len(buffer)} bytes: {bytes(buffer)!r}"
                )
            buffer += byte
            if buffer.endswith(terminator):
                break

        self.stats.responses += 1
        self.stats.bytes_received += len(buffer)
        logger.log(TRACE, f"Received {bytes(buffer)!r}")
        return bytes(buffer)

    def _verify(self, response: bytes) -> bool:
        return verify_checksum(
            response,
            enabled=self.config.with_checksum,
            terminator=self.config.terminator_bytes,
        )

    def exchange(self, message: bytes) -> bytes:
        """Send a request and return the first response that passes its checksum.

        A failed checksum resends the original bytes verbatim (no new
        sequence number) up to config.max_retry times.

        Raises:
            ChecksumExhaustedError: When the retry ceiling is exceeded.
            TransportError: On any stream failure. Not retried here.
        """
        self.retry_count = 0
        self.stats.requests += 1
        self.send(message)

        while True:
            response = self.receive()
            if self._verify(response):
                self.retry_count = 0
                self.stats.checksum_ok += 1
                logger.debug("Response passed checksum check")
                return response

            self.retry_count += 1
            self.stats.checksum_errors += 1
            if self.retry_count > self.config.max_retry:
                logger.error(
                    f"Failed to get valid checksum after {self.config.max_retry} retries"
                )
                raise ChecksumExhaustedError(self.retry_count, response)

            logger.warning(
                f"Response failed checksum check, resending ({self.retry_count}/{self.config.max_retry})"
            )
            self.stats.resends += 1
            self.send(message)
