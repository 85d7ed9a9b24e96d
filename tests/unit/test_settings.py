"""Tests for Settings loading and precedence."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from conduit.config import LoggingSettings, Settings, find_toml_config_file
from conduit.exceptions import ConfigurationError
from conduit.registry import HandlerLifetime


def write_config(path: Path, content: str) -> Path:
    path.write_text(content)
    return path


@pytest.mark.unit
class TestSettingsDefaults:
    def test_defaults(self, test_settings: Settings) -> None:
        assert test_settings.handler_lifetime is HandlerLifetime.TRANSIENT
        assert test_settings.normalize_exceptions is True
        assert test_settings.log_dispatch is False
        assert test_settings.logging.level == "INFO"
        assert test_settings.logging.format == "auto"

    def test_environment_variables(
        self, clean_environment: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CONDUIT_HANDLER_LIFETIME", "singleton")
        monkeypatch.setenv("CONDUIT_LOG_DISPATCH", "true")
        monkeypatch.setenv("CONDUIT_LOGGING__LEVEL", "debug")

        settings = Settings()

        assert settings.handler_lifetime is HandlerLifetime.SINGLETON
        assert settings.log_dispatch is True
        assert settings.logging.level == "DEBUG"


@pytest.mark.unit
class TestLoggingSettings:
    def test_level_is_normalized(self) -> None:
        assert LoggingSettings(level="warning").level == "WARNING"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingSettings(level="verbose")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log format"):
            LoggingSettings(format="xml")

    def test_json_logs(self) -> None:
        assert LoggingSettings(format="json").json_logs is True
        assert LoggingSettings(format="rich").json_logs is False
        assert LoggingSettings(format="plain").json_logs is False


@pytest.mark.unit
class TestFromConfig:
    """Test TOML loading and precedence (overrides > env > TOML > defaults)."""

    def test_explicit_path(self, clean_environment: None, tmp_path: Path) -> None:
        config = write_config(
            tmp_path / "custom.toml",
            'handler_lifetime = "singleton"\n'
            "normalize_exceptions = false\n"
            "[logging]\n"
            'level = "error"\n',
        )

        settings = Settings.from_config(config)

        assert settings.handler_lifetime is HandlerLifetime.SINGLETON
        assert settings.normalize_exceptions is False
        assert settings.logging.level == "ERROR"

    def test_string_path(self, clean_environment: None, tmp_path: Path) -> None:
        config = write_config(tmp_path / "custom.toml", "log_dispatch = true\n")
        assert Settings.from_config(str(config)).log_dispatch is True

    def test_config_file_env_var(
        self,
        clean_environment: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        config = write_config(tmp_path / "from_env.toml", "log_dispatch = true\n")
        monkeypatch.setenv("CONDUIT_CONFIG_FILE", str(config))

        assert Settings.from_config().log_dispatch is True

    def test_discovers_file_in_working_directory(
        self, clean_environment: None, tmp_path: Path
    ) -> None:
        write_config(tmp_path / "conduit.toml", "log_dispatch = true\n")

        assert find_toml_config_file() == tmp_path / "conduit.toml"
        assert Settings.from_config().log_dispatch is True

    def test_hidden_file_takes_priority(
        self, clean_environment: None, tmp_path: Path
    ) -> None:
        write_config(tmp_path / "conduit.toml", "log_dispatch = true\n")
        write_config(tmp_path / ".conduit.toml", "log_dispatch = false\n")

        assert find_toml_config_file() == tmp_path / ".conduit.toml"

    def test_no_file_uses_defaults(self, clean_environment: None) -> None:
        assert find_toml_config_file() is None
        assert Settings.from_config().normalize_exceptions is True

    def test_environment_wins_over_toml(
        self,
        clean_environment: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        config = write_config(
            tmp_path / "custom.toml",
            'handler_lifetime = "singleton"\n[logging]\nlevel = "error"\nformat = "json"\n',
        )
        monkeypatch.setenv("CONDUIT_HANDLER_LIFETIME", "transient")
        monkeypatch.setenv("CONDUIT_LOGGING__LEVEL", "debug")

        settings = Settings.from_config(config)

        assert settings.handler_lifetime is HandlerLifetime.TRANSIENT
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"

    def test_overrides_win_over_everything(
        self,
        clean_environment: None,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        config = write_config(tmp_path / "custom.toml", "log_dispatch = false\n")
        monkeypatch.setenv("CONDUIT_LOG_DISPATCH", "false")

        settings = Settings.from_config(
            config, log_dispatch=True, logging={"level": "critical"}
        )

        assert settings.log_dispatch is True
        assert settings.logging.level == "CRITICAL"

    def test_missing_file(self, clean_environment: None, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Config file not found"):
            Settings.from_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, clean_environment: None, tmp_path: Path) -> None:
        config = write_config(tmp_path / "broken.toml", "handler_lifetime = \n")

        with pytest.raises(ConfigurationError, match="Invalid TOML syntax"):
            Settings.from_config(config)
