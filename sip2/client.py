"""SIP2 engine: one connection's config, sequence counter, retry state and stream.

Usage::

    config = ProtocolConfig(host="sip.example.org", read_timeout_s=10)
    with Sip2Client(config) as client:
        login = client.call(requests.login, responses.parse_login_response, "user", "pw")
        if login.fixed["ok"] != "1":
            ...

The engine is exclusively owned by its caller. It is not thread-safe: use
one client per worker, or serialize calls to exchange()/call().
"""

import logging
from collections.abc import Callable

from sip2.common.config import ProtocolConfig
from sip2.common.encoding import from_wire, to_wire
from sip2.common.errors import TransportError
from sip2.common.protocol import Stream
from sip2.common.sequence import SequenceCounter
from sip2.transport.connection import open_tcp
from sip2.transport.framer import Framer, FramerStats
from sip2.wire.builder import MessageBuilder
from sip2.wire.parser import ParsedResponse

logger = logging.getLogger(__name__)

Encoder = Callable[..., str]
Decoder = Callable[[str, ProtocolConfig], ParsedResponse]


class Sip2Client:
    """Protocol engine bound to one backend connection."""

    def __init__(self, config: ProtocolConfig | None = None, stream: Stream | None = None) -> None:
        self.config = config if config is not None else ProtocolConfig()
        self.sequence = SequenceCounter()
        self.builder = MessageBuilder(self.config, self.sequence)
        self._stream: Stream | None = None
        self._owns_stream = False
        self.framer: Framer | None = None
        if stream is not None:
            self.attach(stream)

    @property
    def connected(self) -> bool:
        return self.framer is not None

    @property
    def stats(self) -> FramerStats:
        return self.framer.stats if self.framer is not None else FramerStats()

    def attach(self, stream: Stream) -> None:
        """Use an already open stream. The caller keeps ownership of it."""
        self._stream = stream
        self._owns_stream = False
        self.framer = Framer(stream, self.config)

    def connect(self) -> None:
        """Open a TCP connection to config.host:config.port."""
        if self.connected:
            return
        self._stream = open_tcp(self.config)
        self._owns_stream = True
        self.framer = Framer(self._stream, self.config)

    def close(self) -> None:
        if self._stream is not None and self._owns_stream:
            close = getattr(self._stream, "close", None)
            if close is not None:
                close()
            logger.info("Closed SIP2 connection")
        self._stream = None
        self._owns_stream = False
        self.framer = None

    def __enter__(self) -> "Sip2Client":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def exchange(self, message: str) -> str:
        """Send finalized wire text and return the verified response text."""
        if self.framer is None:
            raise TransportError("Not connected")
        logger.debug(f"Sending {message[:2]} request")
        response = self.framer.exchange(to_wire(message, self.config.encoding))
        return from_wire(response, self.config.encoding)

    def call(self, encoder: Encoder, decoder: Decoder, *args, **kwargs) -> ParsedResponse:
        """Encode a request, exchange it and decode the response.

        ValidationError from the encoder propagates before any I/O.
        """
        message = encoder(self.builder, *args, **kwargs)
        return decoder(self.exchange(message), self.config)
