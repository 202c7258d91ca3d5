"""Stream openers for the SIP2 client.

Contains:
- SocketStream: TCP socket adapted to the Stream protocol
- open_tcp: Resolve and connect to a SIP2 backend over TCP
- log_device_info: Log which serial port is about to be opened
- open_serial: Open and configure a serial port for SIP2 over RS-232

Both openers apply ProtocolConfig.read_timeout_s as the stream's read
deadline; an expired deadline surfaces as an empty read.
"""

import logging
import os
import socket

import serial
import serial.tools.list_ports

from sip2.common.config import ProtocolConfig
from sip2.common.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 9600


class SocketStream:
    """Blocking TCP socket exposing write(data) / read(size)."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    @property
    def name(self) -> str:
        try:
            host, port = self._sock.getpeername()[:2]
        except OSError:
            return "<closed>"
        return f"{host}:{port}"

    def write(self, data: bytes, /) -> int:
        self._sock.sendall(data)
        return len(data)

    def read(self, size: int = 1, /) -> bytes:
        try:
            return self._sock.recv(size)
        except TimeoutError:
            return b""

    def close(self) -> None:
        self._sock.close()


def open_tcp(config: ProtocolConfig) -> SocketStream:
    """Connect to config.host:config.port.

    Raises:
        TransportError: If the host cannot be resolved or the connect fails.
    """
    if not config.host:
        raise TransportError("No host configured")

    logger.info(f"Connecting to {config.host}:{config.port}...")
    try:
        sock = socket.create_connection(
            (config.host, config.port), timeout=config.connect_timeout_s
        )
    except OSError as e:
        raise TransportError(f"Connection to {config.host}:{config.port} failed: {e}") from e

    # None puts the socket back into blocking mode
    sock.settimeout(config.read_timeout_s)
    stream = SocketStream(sock)
    logger.info(f"Connected to {stream.name} (read_timeout={config.read_timeout_s})")
    return stream


def log_device_info(device: str) -> None:
    """Log which serial port a SIP2 terminal is about to use."""
    target = os.path.realpath(device)
    if target.startswith("/dev/pts/"):
        logger.info(f"SIP2 serial line {device}: pseudo-terminal {target}")
        return

    matches = [p for p in serial.tools.list_ports.comports() if p.device == device]
    if len(matches) > 1:
        raise TransportError(f"Ambiguous serial device {device}: {len(matches)} ports match")
    if not matches:
        logger.info(f"SIP2 serial line {device}: not enumerated, opening anyway")
        return

    port = matches[0]
    usb_id = f" [{port.vid:04x}:{port.pid:04x}]" if port.vid is not None else ""
    logger.info(f"SIP2 serial line {port.device}: {port.description}{usb_id}")


def open_serial(
    device: str,
    config: ProtocolConfig,
    baudrate: int = DEFAULT_BAUDRATE,
    rtscts: bool = False,
) -> serial.Serial:
    """Open and configure a serial port (8N1)."""
    log_device_info(device)
    try:
        ser = serial.Serial(
            port=device,
            baudrate=baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            xonxoff=False,
            rtscts=rtscts,
            timeout=config.read_timeout_s,
            write_timeout=config.connect_timeout_s,
        )
    except serial.SerialException as e:
        raise TransportError(f"Failed to open {device}: {e}") from e
    ser.reset_input_buffer()
    logger.debug(f"Serial port: baudrate={ser.baudrate}, rtscts={ser.rtscts}, timeout={ser.timeout}")
    return ser
