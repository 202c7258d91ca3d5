"""Exception taxonomy for the SIP2 client.

Contains:
- Sip2Error: Base class for every error raised by this package
- ConfigError: Invalid ProtocolConfig values
- ValidationError: Catalog input rejected before anything is sent
- ChecksumExhaustedError: Retry ceiling reached on checksum failures
- TransportError: Stream write/read failure, EOF or read timeout
- SessionError: Orchestration-level failures (login refused, ACS offline)
"""


class Sip2Error(Exception):
    """Base class for SIP2 client errors."""

    pass


class ConfigError(Sip2Error):
    """Raised when a ProtocolConfig holds an unusable value."""

    pass


class ValidationError(Sip2Error):
    """Raised when a request parameter is out of range. Nothing is sent."""

    pass


class ChecksumExhaustedError(Sip2Error):
    """Raised when responses keep failing checksum verification."""

    def __init__(self, attempts: int, last_response: bytes) -> None:
        super().__init__(
            f"Failed to get valid checksum after {attempts} attempts"
        )
        self.attempts = attempts
        self.last_response = last_response


class TransportError(Sip2Error):
    """Raised when the stream fails, closes or times out mid-message."""

    pass


class SessionError(Sip2Error):
    """Raised by the session layer when the backend refuses an operation."""

    pass
