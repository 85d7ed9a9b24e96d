"""Abstract pipeline behavior interfaces.

A behavior wraps a dispatch call. It receives the message, a ``next``
continuation, and the cancellation token. Calling ``next()`` hands control to
the following behavior (or to the handler); not calling it short-circuits the
pipeline.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from .delegates import NotificationHandlerDelegate, RequestHandlerDelegate
from .requests import BaseRequest, Notification


if TYPE_CHECKING:
    from conduit.cancellation import CancellationToken


TRequest = TypeVar("TRequest", bound=BaseRequest, contravariant=True)
TResponse = TypeVar("TResponse")
TNotification = TypeVar("TNotification", bound=Notification, contravariant=True)


class PipelineBehavior(ABC, Generic[TRequest, TResponse]):
    """Behavior wrapping request dispatch."""

    @abstractmethod
    async def handle(
        self,
        request: TRequest,
        next: RequestHandlerDelegate[TResponse],
        cancellation_token: "CancellationToken",
    ) -> TResponse:
        """Run the behavior around the rest of the pipeline.

        Args:
            request: The request being dispatched
            next: Continuation invoking the rest of the pipeline
            cancellation_token: Token shared by the whole dispatch call

        Returns:
            The response, normally the value returned by ``next()``
        """
        pass


class NotificationPipelineBehavior(ABC, Generic[TNotification]):
    """Behavior wrapping a whole notification fan-out."""

    @abstractmethod
    async def handle(
        self,
        notification: TNotification,
        next: NotificationHandlerDelegate,
        cancellation_token: "CancellationToken",
    ) -> None:
        """Run the behavior around the rest of the pipeline."""
        pass
