"""Transport package for the SIP2 client.

- framer: Framer (send / receive / exchange with checksum-driven resend)
- connection: TCP and serial stream openers
"""

from sip2.transport.connection import SocketStream, open_serial, open_tcp
from sip2.transport.framer import Framer, FramerStats

__all__ = [
    "Framer",
    "FramerStats",
    "SocketStream",
    "open_serial",
    "open_tcp",
]
