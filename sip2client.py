#!/usr/bin/env python3
"""SIP2 self-check client tool."""

import argparse
import logging
import sys
from enum import IntEnum

from sip2.client import Sip2Client
from sip2.common.config import ProtocolConfig
from sip2.common.errors import (
    ChecksumExhaustedError,
    ConfigError,
    SessionError,
    TransportError,
    ValidationError,
)
from sip2.common.protocol import TRACE
from sip2.session import ITEM_FIELDS, AcsStatusReport, PatronReport, PatronSession
from sip2.transport.connection import DEFAULT_BAUDRATE, open_serial

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit codes for the SIP2 client tool."""

    SUCCESS = 0
    TRANSPORT_FAILED = 1  # Connection refused, EOF or read timeout
    USAGE = 2  # Bad arguments or configuration
    SESSION_FAILED = 3  # Login refused, ACS offline or patron invalid
    CHECKSUM_EXHAUSTED = 4  # Retry ceiling reached on corrupted responses


def _config_from_args(args: argparse.Namespace) -> ProtocolConfig:
    """Merge SIP2_* environment variables with command-line overrides."""
    overrides: dict = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.institution is not None:
        overrides["institution_id"] = args.institution
    if args.location is not None:
        overrides["location"] = args.location
    if args.read_timeout is not None:
        overrides["read_timeout_s"] = args.read_timeout
    if args.max_retry is not None:
        overrides["max_retry"] = args.max_retry
    if args.no_checksum:
        overrides["with_checksum"] = False
    if args.no_sequence:
        overrides["with_sequence"] = False
    return ProtocolConfig.from_env(**overrides)


def _open_client(args: argparse.Namespace, config: ProtocolConfig) -> tuple[Sip2Client, object]:
    """Return a connected client and the serial port it borrows, if any."""
    client = Sip2Client(config)
    if args.device:
        ser = open_serial(args.device, config, args.baudrate, args.rtscts)
        client.attach(ser)
        return client, ser
    client.connect()
    return client, None


def run_status(session: PatronSession) -> int:
    """Run the self check and print the ACS status."""
    try:
        session.self_check()
    except SessionError as e:
        logger.error(f"Self check failed: {e}")
    if session.acs_status is None:
        return ExitCode.SESSION_FAILED

    report = AcsStatusReport(connected=True, status=session.acs_status)
    report.print()
    return ExitCode.SUCCESS if report.success() else ExitCode.SESSION_FAILED


def run_patron(session: PatronSession, patron_id: str, patron_password: str) -> int:
    """Start a patron session and print its summary."""
    client = session.client
    if not session.start(patron_id, patron_password):
        PatronReport(patron_id=patron_id, valid=False, stats=client.stats).print()
        return ExitCode.SESSION_FAILED

    items = {category: session.items(category) for category in ITEM_FIELDS}
    report = PatronReport(
        patron_id=patron_id,
        valid=session.is_valid,
        name=session.status.first("AE"),
        fines_total=session.fines_total,
        screen_messages=session.screen_messages,
        items=items,
    )
    session.end()
    report.stats = client.stats
    report.print()
    return ExitCode.SUCCESS if report.success() else ExitCode.SESSION_FAILED


def run(args: argparse.Namespace) -> int:
    """Connect, log in and dispatch the subcommand. Returns an exit code."""
    try:
        config = _config_from_args(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return ExitCode.USAGE

    if not args.device and not config.host:
        logger.error("Either --host (or SIP2_HOST) or --device is required")
        return ExitCode.USAGE

    try:
        client, ser = _open_client(args, config)
    except TransportError as e:
        logger.error(f"Failed to connect: {e}")
        AcsStatusReport(connected=False, error=e).print()
        return ExitCode.TRANSPORT_FAILED

    try:
        session = PatronSession(client)
        session.login(args.login, args.password, self_check=False)
        if args.mode == "status":
            return run_status(session)
        return run_patron(session, args.patron_id, args.patron_password)
    except ValidationError as e:
        logger.error(f"Invalid request: {e}")
        return ExitCode.USAGE
    except SessionError as e:
        logger.error(f"Session error: {e}")
        return ExitCode.SESSION_FAILED
    except ChecksumExhaustedError as e:
        logger.error(f"Checksum error: {e}")
        return ExitCode.CHECKSUM_EXHAUSTED
    except TransportError as e:
        logger.error(f"Transport error: {e}")
        return ExitCode.TRANSPORT_FAILED
    finally:
        client.close()
        if ser is not None:
            ser.close()
            logger.info(f"Closed {args.device}")


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    """Add transport, credential and protocol arguments to a parser."""
    parser.add_argument("--host", type=str, help="SIP2 server host (default: SIP2_HOST)")
    parser.add_argument("--port", type=int, help="SIP2 server port (default: SIP2_PORT or 6002)")
    parser.add_argument(
        "-d", "--device", type=str, help="Serial device path instead of TCP (e.g., /dev/ttyUSB0)"
    )
    parser.add_argument(
        "-b",
        "--baudrate",
        type=int,
        default=DEFAULT_BAUDRATE,
        help=f"Baud rate for --device (default: {DEFAULT_BAUDRATE})",
    )
    parser.add_argument(
        "--rtscts", action="store_true", help="Enable RTS/CTS flow control for --device"
    )
    parser.add_argument("--login", type=str, default="", help="Terminal login user id (CN)")
    parser.add_argument("--password", type=str, default="", help="Terminal login password (CO)")
    parser.add_argument("--institution", type=str, help="Institution id (AO)")
    parser.add_argument("--location", type=str, help="Location code (CP)")
    parser.add_argument(
        "--read-timeout", type=float, help="Read timeout in seconds (default: blocking)"
    )
    parser.add_argument(
        "--max-retry", type=int, help="Resends after a checksum failure (default: 3)"
    )
    parser.add_argument(
        "--no-checksum", action="store_true", help="Do not append or verify AZ checksums"
    )
    parser.add_argument(
        "--no-sequence", action="store_true", help="Do not append AY sequence numbers"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v debug, -vv wire trace)",
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        description="SIP2 self-check client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --host sip.example.org --login sc --password pw status
  %(prog)s --host sip.example.org --login sc --password pw patron 1234 --patron-password 0000
  %(prog)s -d /dev/ttyUSB0 -b 9600 status
""",
    )
    _add_connection_args(parser)

    subparsers = parser.add_subparsers(dest="mode")
    subparsers.add_parser("status", help="Log in and print the ACS status")
    patron_parser = subparsers.add_parser("patron", help="Print a patron session summary")
    patron_parser.add_argument("patron_id", type=str, help="Patron identifier (AA)")
    patron_parser.add_argument(
        "--patron-password", type=str, default="", help="Patron password (AD)"
    )

    args = parser.parse_args()

    if args.verbose >= 2:
        level = TRACE
    elif args.verbose == 1:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level)

    if args.mode is None:
        parser.print_help()
        return ExitCode.USAGE

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
