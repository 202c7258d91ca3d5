"""Unit tests for ProtocolConfig."""

import pytest

from sip2.common.config import ProtocolConfig
from sip2.common.errors import ConfigError


@pytest.mark.unit
class TestProtocolConfig:
    """Tests for ProtocolConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = ProtocolConfig()
        assert config.port == 6002
        assert config.language == "001"
        assert config.institution_id == "WohlersSIP"
        assert config.field_terminator == "|"
        assert config.message_terminator == "\r"
        assert config.with_checksum is True
        assert config.with_sequence is True
        assert config.max_retry == 3
        assert config.read_timeout_s is None
        assert config.terminator_bytes == b"\r"

    def test_multi_character_terminator_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig(message_terminator="\r\n")

    def test_empty_terminator_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig(message_terminator="")

    def test_empty_field_terminator_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig(field_terminator="")

    def test_negative_retry_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig(max_retry=-1)

    def test_non_positive_read_timeout_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig(read_timeout_s=0)


@pytest.mark.unit
class TestFromEnv:
    """Tests for ProtocolConfig.from_env()."""

    def test_empty_environment_gives_defaults(self) -> None:
        assert ProtocolConfig.from_env({}) == ProtocolConfig()

    def test_reads_variables(self) -> None:
        env = {
            "SIP2_HOST": "sip.example.org",
            "SIP2_PORT": "7000",
            "SIP2_INSTITUTION_ID": "Lib",
            "SIP2_WITH_CHECKSUM": "no",
            "SIP2_MAX_RETRY": "5",
            "SIP2_READ_TIMEOUT_S": "2.5",
        }
        config = ProtocolConfig.from_env(env)
        assert config.host == "sip.example.org"
        assert config.port == 7000
        assert config.institution_id == "Lib"
        assert config.with_checksum is False
        assert config.max_retry == 5
        assert config.read_timeout_s == 2.5

    def test_empty_values_ignored(self) -> None:
        config = ProtocolConfig.from_env({"SIP2_PORT": ""})
        assert config.port == 6002

    def test_overrides_win(self) -> None:
        config = ProtocolConfig.from_env({"SIP2_HOST": "env-host"}, host="cli-host")
        assert config.host == "cli-host"

    def test_bad_number(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig.from_env({"SIP2_PORT": "abc"})

    def test_bad_boolean(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig.from_env({"SIP2_WITH_SEQUENCE": "maybe"})

    def test_unknown_override(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig.from_env({}, hostname="x")

    def test_invalid_value_from_environment(self) -> None:
        with pytest.raises(ConfigError):
            ProtocolConfig.from_env({"SIP2_MAX_RETRY": "-2"})

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIP2_LOCATION", "Desk9")
        assert ProtocolConfig.from_env().location == "Desk9"
