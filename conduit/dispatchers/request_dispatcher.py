"""Request dispatch: one handler per request type, wrapped in request behaviors."""

from typing import Any, TypeVar, overload

import structlog

from conduit.cancellation import CancellationToken
from conduit.contract import UNIT, BaseRequest, Request, ResponseRequest
from conduit.exceptions import (
    ArgumentNullError,
    BehaviorResolutionError,
    HandlerNotFoundError,
    HandlerResolutionError,
    qualified_name,
)
from conduit.pipeline import compose_pipeline, invoke_handle
from conduit.registry import CapabilityRegistry


logger = structlog.get_logger(__name__)

TResponse = TypeVar("TResponse")


class RequestDispatcher:
    """Routes requests to their single registered handler.

    Both request forms share one code path. The terminal action of a
    no-response ``Request`` yields ``UNIT``, which ``send`` discards; for a
    ``ResponseRequest`` the handler's return value flows back through the
    behaviors to the caller.
    """

    def __init__(self, registry: CapabilityRegistry) -> None:
        self._registry = registry

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

    async def send(
        self,
        request: BaseRequest,
        cancellation_token: CancellationToken | None = None,
    ) -> Any:
        """Send a request through the pipeline to its handler.

        Args:
            request: The request to send
            cancellation_token: Optional token shared with behaviors and handler

        Returns:
            The handler's response for a ``ResponseRequest``, otherwise None

        Raises:
            ArgumentNullError: If ``request`` is None
            HandlerNotFoundError: If no handler is registered for the request type
            OperationCancelledError: If the token was cancelled before the handler ran
        """
        if request is None:
            raise ArgumentNullError("request")
        if not isinstance(request, BaseRequest):
            raise TypeError(
                f"{type(request).__name__} is not a request; it must subclass BaseRequest"
            )

        token = cancellation_token or CancellationToken.none()
        request_type = type(request)
        expects_response = not isinstance(request, Request)

        behaviors = self._registry.request_behaviors_for(request_type)
        logger.debug(
            "request_dispatch",
            request_type=qualified_name(request_type),
            behavior_count=len(behaviors),
        )

        async def invoke_handler() -> Any:
            handler = self._registry.request_handler_for(request_type)
            if handler is None:
                raise HandlerNotFoundError(request_type)
            token.raise_if_cancelled()

            result = await invoke_handle(
                handler,
                request,
                token,
                error_type=HandlerResolutionError,
                role="handler",
            )
            return result if expects_response else UNIT

        def invoke_behavior(behavior: Any, next_delegate: Any) -> Any:
            return invoke_handle(
                behavior,
                request,
                next_delegate,
                token,
                error_type=BehaviorResolutionError,
                role="behavior",
            )

        pipeline = compose_pipeline(behaviors, invoke_handler, invoke_behavior)
        response = await pipeline()
        return response if expects_response else None
