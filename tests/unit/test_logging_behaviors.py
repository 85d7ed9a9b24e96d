"""Tests for the structured logging behaviors."""

from typing import Any

import pytest
import structlog
from structlog.testing import capture_logs

from conduit.behaviors import NotificationLoggingBehavior, RequestLoggingBehavior
from conduit.cancellation import CancellationToken
from conduit.contract import Notification, ResponseRequest


class Lookup(ResponseRequest[int]):
    pass


class Refreshed(Notification):
    pass


def events(logs: list[dict[str, Any]]) -> list[str]:
    return [entry["event"] for entry in logs]


@pytest.mark.unit
class TestRequestLoggingBehavior:
    async def test_logs_started_and_completed(self) -> None:
        behavior = RequestLoggingBehavior[Lookup, int]()

        async def next_delegate() -> int:
            return 42

        with capture_logs() as logs:
            result = await behavior.handle(Lookup(), next_delegate, CancellationToken())

        assert result == 42
        assert events(logs) == ["request_started", "request_completed"]
        assert logs[1]["request_type"] == f"{__name__}.Lookup"
        assert logs[1]["duration_ms"] >= 0

    async def test_logs_failure_and_reraises(self) -> None:
        behavior = RequestLoggingBehavior[Lookup, int]()
        error = LookupError("gone")

        async def next_delegate() -> int:
            raise error

        with capture_logs() as logs, pytest.raises(LookupError) as exc_info:
            await behavior.handle(Lookup(), next_delegate, CancellationToken())

        assert exc_info.value is error
        assert events(logs) == ["request_started", "request_failed"]
        assert logs[1]["log_level"] == "warning"
        assert logs[1]["error_type"] == "LookupError"

    async def test_uses_injected_logger(self) -> None:
        logger = structlog.get_logger("custom")
        behavior = RequestLoggingBehavior[Lookup, int](logger=logger)
        assert behavior.logger is logger


@pytest.mark.unit
class TestNotificationLoggingBehavior:
    async def test_logs_one_pair_per_publish(self) -> None:
        behavior = NotificationLoggingBehavior[Refreshed]()

        async def next_delegate() -> None:
            return None

        with capture_logs() as logs:
            await behavior.handle(Refreshed(), next_delegate, CancellationToken())

        assert events(logs) == ["publish_started", "publish_completed"]
        assert logs[0]["notification_type"] == f"{__name__}.Refreshed"

    async def test_logs_failure(self) -> None:
        behavior = NotificationLoggingBehavior[Refreshed]()

        async def next_delegate() -> None:
            raise ExceptionGroup("handlers failed", [ValueError("x"), ValueError("y")])

        with capture_logs() as logs, pytest.raises(ExceptionGroup):
            await behavior.handle(Refreshed(), next_delegate, CancellationToken())

        assert events(logs) == ["publish_started", "publish_failed"]
        assert logs[1]["error_type"] == "ExceptionGroup"
