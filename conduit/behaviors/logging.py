"""Structured logging behaviors."""

import time
from typing import Any, TypeVar

import structlog

from conduit.cancellation import CancellationToken
from conduit.contract import (
    BaseRequest,
    Notification,
    NotificationHandlerDelegate,
    NotificationPipelineBehavior,
    PipelineBehavior,
    RequestHandlerDelegate,
)
from conduit.exceptions import qualified_name


TRequest = TypeVar("TRequest", bound=BaseRequest)
TResponse = TypeVar("TResponse")
TNotification = TypeVar("TNotification", bound=Notification)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def _error_data(error: BaseException) -> dict[str, Any]:
    return {"error_type": type(error).__name__, "error": str(error)}


class RequestLoggingBehavior(PipelineBehavior[TRequest, TResponse]):
    """Logs one started/completed pair per request dispatch."""

    def __init__(self, logger: structlog.BoundLogger | None = None):
        """Initialize logging behavior.

        Args:
            logger: Optional structlog logger instance. If None, creates a new one.
        """
        self.logger = logger or structlog.get_logger(__name__)

    async def handle(
        self,
        request: TRequest,
        next: RequestHandlerDelegate[TResponse],
        cancellation_token: CancellationToken,
    ) -> TResponse:
        request_type = qualified_name(type(request))
        self.logger.info("request_started", request_type=request_type)
        start = time.perf_counter()
        try:
            response = await next()
        except Exception as e:
            self.logger.warning(
                "request_failed",
                request_type=request_type,
                duration_ms=_elapsed_ms(start),
                **_error_data(e),
            )
            raise
        self.logger.info(
            "request_completed",
            request_type=request_type,
            duration_ms=_elapsed_ms(start),
        )
        return response


class NotificationLoggingBehavior(NotificationPipelineBehavior[TNotification]):
    """Logs one started/completed pair around a whole notification fan-out."""

    def __init__(self, logger: structlog.BoundLogger | None = None):
        self.logger = logger or structlog.get_logger(__name__)

    async def handle(
        self,
        notification: TNotification,
        next: NotificationHandlerDelegate,
        cancellation_token: CancellationToken,
    ) -> None:
        notification_type = qualified_name(type(notification))
        self.logger.info("publish_started", notification_type=notification_type)
        start = time.perf_counter()
        try:
            await next()
        except Exception as e:
            self.logger.warning(
                "publish_failed",
                notification_type=notification_type,
                duration_ms=_elapsed_ms(start),
                **_error_data(e),
            )
            raise
        self.logger.info(
            "publish_completed",
            notification_type=notification_type,
            duration_ms=_elapsed_ms(start),
        )
