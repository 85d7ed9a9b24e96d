"""Configuration for Conduit: settings, logging settings and the fluent builder."""

from .configuration import ConduitConfiguration
from .logging import LoggingSettings
from .settings import Settings, find_toml_config_file


__all__ = [
    "ConduitConfiguration",
    "LoggingSettings",
    "Settings",
    "find_toml_config_file",
]
