"""Shared test fixtures and configuration for conduit tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from conduit.config.settings import Settings
from conduit.core.logging import setup_logging
from conduit.dispatchers import NotificationDispatcher, RequestDispatcher
from conduit.registry import HandlerRegistry


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    config.option.asyncio_mode = "auto"

    # Same logging pipeline as applications, so structlog events render in failures.
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.fixture
def clean_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Remove CONDUIT_* variables and run from an empty working directory."""
    for key in list(os.environ):
        if key.upper().startswith("CONDUIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def test_settings(clean_environment: None) -> Settings:
    """Settings built only from defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def registry() -> HandlerRegistry:
    """An empty handler registry."""
    return HandlerRegistry()


@pytest.fixture
def request_dispatcher(registry: HandlerRegistry) -> RequestDispatcher:
    return RequestDispatcher(registry)


@pytest.fixture
def notification_dispatcher(registry: HandlerRegistry) -> NotificationDispatcher:
    return NotificationDispatcher(registry)
