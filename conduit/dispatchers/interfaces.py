"""Dispatcher protocols exposed to callers."""

from typing import Protocol, TypeVar, overload, runtime_checkable

from conduit.cancellation import CancellationToken
from conduit.contract import Notification, Request, ResponseRequest


TResponse = TypeVar("TResponse")


@runtime_checkable
class IRequestDispatcher(Protocol):
    """Sends a request to its single handler through the request behaviors."""

    @overload
    async def send(
        self, request: Request, cancellation_token: CancellationToken | None = None
    ) -> None: ...

    @overload
    async def send(
        self,
        request: ResponseRequest[TResponse],
        cancellation_token: CancellationToken | None = None,
    ) -> TResponse: ...


@runtime_checkable
class INotificationDispatcher(Protocol):
    """Publishes a notification to every handler through the notification behaviors."""

    async def publish(
        self,
        notification: Notification,
        cancellation_token: CancellationToken | None = None,
    ) -> None: ...
