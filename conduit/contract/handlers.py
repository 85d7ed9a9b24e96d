"""Abstract handler interfaces."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from .requests import Notification, Request, ResponseRequest


if TYPE_CHECKING:
    from conduit.cancellation import CancellationToken


TRequest = TypeVar("TRequest", bound=Request, contravariant=True)
TResponseRequest = TypeVar(
    "TResponseRequest", bound=ResponseRequest, contravariant=True  # type: ignore[type-arg]
)
TResponse = TypeVar("TResponse")
TNotification = TypeVar("TNotification", bound=Notification, contravariant=True)

__all__ = [
    "RequestHandler",
    "ResponseRequestHandler",
    "NotificationHandler",
]


class RequestHandler(ABC, Generic[TRequest]):
    """Handles a ``Request`` that produces no response."""

    @abstractmethod
    async def handle(
        self, request: TRequest, cancellation_token: "CancellationToken"
    ) -> None:
        """Handle the request.

        Args:
            request: The request to handle
            cancellation_token: Token to observe for cooperative cancellation
        """
        pass


class ResponseRequestHandler(ABC, Generic[TResponseRequest, TResponse]):
    """Handles a ``ResponseRequest`` and produces its response."""

    @abstractmethod
    async def handle(
        self, request: TResponseRequest, cancellation_token: "CancellationToken"
    ) -> TResponse:
        """Handle the request and return the response.

        Args:
            request: The request to handle
            cancellation_token: Token to observe for cooperative cancellation

        Returns:
            The response for the request
        """
        pass


class NotificationHandler(ABC, Generic[TNotification]):
    """Handles one notification type. Many handlers may share a type."""

    @abstractmethod
    async def handle(
        self, notification: TNotification, cancellation_token: "CancellationToken"
    ) -> None:
        """Handle the notification."""
        pass
