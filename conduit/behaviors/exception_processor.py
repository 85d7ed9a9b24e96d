"""Behaviors that unwrap single-cause wrapper exceptions.

Fan-out aggregates handler failures into an ``ExceptionGroup`` and indirect
invocation adapters wrap failures in ``InvocationError``. These behaviors are
registered first, so they observe everything downstream and hand the caller
the original exception whenever there is exactly one cause.
"""

from typing import TypeVar

from conduit.cancellation import CancellationToken
from conduit.contract import (
    BaseRequest,
    Notification,
    NotificationHandlerDelegate,
    NotificationPipelineBehavior,
    PipelineBehavior,
    RequestHandlerDelegate,
)
from conduit.exceptions import InvocationError


TRequest = TypeVar("TRequest", bound=BaseRequest)
TResponse = TypeVar("TResponse")
TNotification = TypeVar("TNotification", bound=Notification)


def unwrap_exception(exc: BaseException) -> BaseException | None:
    """Return the single cause wrapped by ``exc``, or ``None`` to keep ``exc``.

    - ``InvocationError`` with an inner exception -> the inner exception
    - exception group with exactly one member -> that member
    - exception group with several members -> ``None``
    - anything else -> ``None``
    """
    if isinstance(exc, InvocationError) and exc.inner_exception is not None:
        return exc.inner_exception
    if isinstance(exc, BaseExceptionGroup) and len(exc.exceptions) == 1:
        return exc.exceptions[0]
    return None


def _reraise_unwrapped(exc: BaseException) -> None:
    inner = unwrap_exception(exc)
    if inner is None:
        return
    # Raising inside an except block rebinds __context__ to the wrapper.
    context = inner.__context__
    suppress_context = inner.__suppress_context__
    try:
        raise inner
    finally:
        inner.__context__ = context
        inner.__suppress_context__ = suppress_context


class RequestExceptionProcessorBehavior(PipelineBehavior[TRequest, TResponse]):
    """Unwraps single-cause wrapper exceptions on the request path."""

    async def handle(
        self,
        request: TRequest,
        next: RequestHandlerDelegate[TResponse],
        cancellation_token: CancellationToken,
    ) -> TResponse:
        try:
            return await next()
        except (InvocationError, BaseExceptionGroup) as exc:
            _reraise_unwrapped(exc)
            raise


class NotificationExceptionProcessorBehavior(NotificationPipelineBehavior[TNotification]):
    """Unwraps single-cause wrapper exceptions on the notification path."""

    async def handle(
        self,
        notification: TNotification,
        next: NotificationHandlerDelegate,
        cancellation_token: CancellationToken,
    ) -> None:
        try:
            await next()
        except (InvocationError, BaseExceptionGroup) as exc:
            _reraise_unwrapped(exc)
            raise
