"""Connection and session configuration for the SIP2 client.

Contains:
- ProtocolConfig: engine-wide defaults read by every builder/parser call
- ProtocolConfig.from_env: load overrides from SIP2_* environment variables
"""

import logging
import os
from dataclasses import dataclass, fields

from sip2.common.errors import ConfigError
from sip2.common.protocol import (
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_ENCODING,
    DEFAULT_FIELD_TERMINATOR,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RETRY,
    DEFAULT_MESSAGE_TERMINATOR,
    DEFAULT_PORT,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name: str, raw: str, kind: type) -> int | float:
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be {kind.__name__}, got {raw!r}")


# Environment variable -> (field name, type)
_ENV_FIELDS: dict[str, tuple[str, type]] = {
    "SIP2_HOST": ("host", str),
    "SIP2_PORT": ("port", int),
    "SIP2_LANGUAGE": ("language", str),
    "SIP2_INSTITUTION_ID": ("institution_id", str),
    "SIP2_TERMINAL_PASSWORD": ("terminal_password", str),
    "SIP2_LOCATION": ("location", str),
    "SIP2_WITH_CHECKSUM": ("with_checksum", bool),
    "SIP2_WITH_SEQUENCE": ("with_sequence", bool),
    "SIP2_MAX_RETRY": ("max_retry", int),
    "SIP2_ENCODING": ("encoding", str),
    "SIP2_CONNECT_TIMEOUT_S": ("connect_timeout_s", float),
    "SIP2_READ_TIMEOUT_S": ("read_timeout_s", float),
}


@dataclass
class ProtocolConfig:
    """Engine-wide connection and message defaults.

    Mutated only by the owner of the engine, before a request is built.

    Attributes:
        host: Backend host name for TCP connections.
        port: Backend TCP port.
        language: 3-digit language code (001 = English).
        institution_id: Value of the AO field.
        terminal_password: Value of the AC field.
        location: Terminal location code (CP on login, default AP on checkin).
        patron_id: Value of the AA field for patron requests.
        patron_password: Value of the AD field for patron requests.
        uid_algorithm: Login user id algorithm code (0 = plain text).
        pwd_algorithm: Login password algorithm code (0 = plain text).
        field_terminator: Terminates each variable field.
        message_terminator: Terminates each message on the stream.
        with_checksum: Append AZ to requests and verify it on responses.
        with_sequence: Append AY to requests.
        max_retry: Resends allowed after consecutive checksum failures.
        encoding: Text encoding of the wire bytes.
        connect_timeout_s: TCP connect timeout.
        read_timeout_s: Read deadline on the open stream, None blocks forever.
    """

    host: str = ""
    port: int = DEFAULT_PORT
    language: str = DEFAULT_LANGUAGE
    institution_id: str = "WohlersSIP"
    terminal_password: str = ""
    location: str = ""
    patron_id: str = ""
    patron_password: str = ""
    uid_algorithm: int = 0
    pwd_algorithm: int = 0
    field_terminator: str = DEFAULT_FIELD_TERMINATOR
    message_terminator: str = DEFAULT_MESSAGE_TERMINATOR
    with_checksum: bool = True
    with_sequence: bool = True
    max_retry: int = DEFAULT_MAX_RETRY
    encoding: str = DEFAULT_ENCODING
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S
    read_timeout_s: float | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        self.validate()

    def validate(self) -> None:
        if len(self.message_terminator) != 1:
            raise ConfigError(
                f"message_terminator must be a single character, got {self.message_terminator!r}"
            )
        if not self.field_terminator:
            raise ConfigError("field_terminator must not be empty")
        if self.max_retry < 0:
            raise ConfigError(f"max_retry must be >= 0, got {self.max_retry}")
        if self.read_timeout_s is not None and self.read_timeout_s <= 0:
            raise ConfigError(f"read_timeout_s must be positive, got {self.read_timeout_s}")

    @property
    def terminator_bytes(self) -> bytes:
        return self.message_terminator.encode(self.encoding)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "ProtocolConfig":
        """Build a config from SIP2_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        for name, (field_name, kind) in _ENV_FIELDS.items():
            raw = env.get(name)
            if raw is None or raw == "":
                continue
            if kind is bool:
                values[field_name] = _env_bool(name, raw)
            elif kind is str:
                values[field_name] = raw
            else:
                values[field_name] = _env_number(name, raw, kind)
            logger.debug(f"Config: {field_name} from {name}")

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config fields: {sorted(unknown)}")
        values.update(overrides)
        return cls(**values)
