import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from conduit.core.logging import get_logger
from conduit.exceptions import ConfigurationError
from conduit.registry import HandlerLifetime

from .logging import LoggingSettings


__all__ = ["Settings", "find_toml_config_file"]

ENV_PREFIX = "CONDUIT_"
CONFIG_FILE_NAMES = (".conduit.toml", "conduit.toml")


def find_toml_config_file(search_dir: Path | None = None) -> Path | None:
    """Locate a TOML configuration file.

    Looks for ``.conduit.toml`` then ``conduit.toml`` in ``search_dir``
    (defaults to the current working directory).
    """
    base = search_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    """
    Configuration settings for Conduit.

    Settings are loaded from environment variables (``CONDUIT_`` prefix, ``__``
    as nested delimiter), ``.env`` files, and TOML configuration files.
    Environment variables take precedence over TOML values; explicit keyword
    overrides passed to ``from_config`` take precedence over both.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    handler_lifetime: HandlerLifetime = Field(
        default=HandlerLifetime.TRANSIENT,
        description="Default lifetime of handlers registered as classes or factories",
    )

    normalize_exceptions: bool = Field(
        default=True,
        description="Register the exception processor behaviors as the outermost behaviors",
    )

    log_dispatch: bool = Field(
        default=False,
        description="Register the structured logging behaviors after the exception processors",
    )

    configure_logging: bool = Field(
        default=False,
        description="Apply the logging settings to structlog and the root logger in create_conduit",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from a TOML file, the environment and overrides.

        Args:
            config_path: TOML file; falls back to ``CONDUIT_CONFIG_FILE`` and
                then to ``find_toml_config_file()``
            **kwargs: Explicit overrides, nested as dicts (``logging={"level": "DEBUG"}``)
        """
        if config_path is None:
            config_path_env = os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path is not None:
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            config_data = cls.load_toml_config(config_path)
            get_logger(__name__).info(
                "config_file_loaded", path=str(config_path), category="config"
            )

        values = _without_env_overrides(config_data, ENV_PREFIX)
        _deep_update(values, kwargs)
        return cls(**values)


def _env_is_set(env_key: str) -> bool:
    upper = env_key.upper()
    return any(key.upper() == upper for key in os.environ)


def _without_env_overrides(data: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Drop TOML values that an environment variable already sets."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        env_key = f"{prefix}{key}"
        if isinstance(value, dict):
            nested = _without_env_overrides(value, f"{env_key}__")
            if nested:
                result[key] = nested
        elif not _env_is_set(env_key):
            result[key] = value
    return result


def _deep_update(target: dict[str, Any], overrides: dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
