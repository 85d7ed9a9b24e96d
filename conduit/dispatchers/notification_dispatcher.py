"""Notification dispatch: concurrent fan-out to every registered handler.

The notification behaviors wrap the fan-out as a whole, so each behavior sees
one entry and one exit per ``publish`` regardless of the handler count.
"""

import asyncio
from typing import Any

import structlog

from conduit.cancellation import CancellationToken
from conduit.contract import Notification
from conduit.exceptions import (
    ArgumentNullError,
    BehaviorResolutionError,
    HandlerResolutionError,
    OperationCancelledError,
    qualified_name,
)
from conduit.pipeline import compose_pipeline, invoke_handle
from conduit.registry import CapabilityRegistry


logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Publishes notifications to all handlers registered for their type."""

    def __init__(self, registry: CapabilityRegistry) -> None:
        """Initialize the notification dispatcher.

        Args:
            registry: The registry to resolve behaviors and handlers from
        """
        self._registry = registry

    async def publish(
        self,
        notification: Notification,
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        """Publish a notification to every handler bound to its runtime type.

        Handlers run concurrently and are all awaited; a failing handler does
        not cancel its siblings. Failures are raised together as an
        ``ExceptionGroup`` once every handler has finished.

        Args:
            notification: The notification to publish
            cancellation_token: Optional token shared with behaviors and handlers

        Raises:
            ArgumentNullError: If ``notification`` is None
            OperationCancelledError: If the token was cancelled before fan-out
        """
        if notification is None:
            raise ArgumentNullError("notification")
        if not isinstance(notification, Notification):
            raise TypeError(
                f"{type(notification).__name__} is not a notification; "
                "it must subclass Notification"
            )

        token = cancellation_token or CancellationToken.none()
        notification_type = type(notification)
        behaviors = self._registry.notification_behaviors_for(notification_type)

        async def publish_to_handlers() -> None:
            token.raise_if_cancelled()
            handlers = self._registry.notification_handlers_for(notification_type)
            logger.debug(
                "notification_fan_out",
                notification_type=qualified_name(notification_type),
                handler_count=len(handlers),
            )
            if not handlers:
                return
            await self._fan_out(notification, handlers, token)

        def invoke_behavior(behavior: Any, next_delegate: Any) -> Any:
            return invoke_handle(
                behavior,
                notification,
                next_delegate,
                token,
                error_type=BehaviorResolutionError,
                role="behavior",
            )

        pipeline = compose_pipeline(behaviors, publish_to_handlers, invoke_behavior)
        await pipeline()

    async def _fan_out(
        self,
        notification: Notification,
        handlers: list[Any],
        token: CancellationToken,
    ) -> None:
        async def run(handler: Any) -> None:
            await invoke_handle(
                handler,
                notification,
                token,
                error_type=HandlerResolutionError,
                role="handler",
            )

        results = await asyncio.gather(
            *(run(handler) for handler in handlers), return_exceptions=True
        )

        failures: list[BaseException] = []
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                failures.append(result)

        if not failures:
            return
        if all(isinstance(f, OperationCancelledError) for f in failures):
            raise failures[0]
        raise BaseExceptionGroup(
            f"{len(failures)} handler(s) failed for "
            f"{qualified_name(type(notification))}",
            failures,
        )
