"""Assembly of a ready-to-use ``Conduit`` from settings and configuration."""

from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar, overload

from conduit.behaviors import (
    NotificationExceptionProcessorBehavior,
    NotificationLoggingBehavior,
    RequestExceptionProcessorBehavior,
    RequestLoggingBehavior,
)
from conduit.cancellation import CancellationToken
from conduit.config import ConduitConfiguration, Settings
from conduit.container import ServiceContainer
from conduit.contract import BaseRequest, Notification, Request, ResponseRequest
from conduit.core.logging import get_logger, setup_logging
from conduit.registry import HandlerLifetime, HandlerRegistry


logger = get_logger(__name__)

TResponse = TypeVar("TResponse")

ConfigureCallback = Callable[[ConduitConfiguration], Any]


class Conduit:
    """Facade over the request and notification dispatchers of one container."""

    def __init__(self, container: ServiceContainer) -> None:
        self.container = container

    @property
    def registry(self) -> HandlerRegistry:
        return self.container.get_registry()

    @property
    def settings(self) -> Settings:
        return self.container.get_settings()

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
        """Send a request to its handler. See ``RequestDispatcher.send``."""
        dispatcher = self.container.get_request_dispatcher()
        return await dispatcher.send(request, cancellation_token)  # type: ignore[call-overload]

    async def publish(
        self,
        notification: Notification,
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        """Publish a notification to its handlers. See ``NotificationDispatcher.publish``."""
        dispatcher = self.container.get_notification_dispatcher()
        await dispatcher.publish(notification, cancellation_token)

    async def close(self) -> None:
        await self.container.close()

    async def __aenter__(self) -> "Conduit":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


def build_registry(
    settings: Settings, configuration: ConduitConfiguration | None = None
) -> HandlerRegistry:
    """Create a registry with the built-in behaviors followed by the configured ones.

    Registration order, which is also pipeline order (outermost first):

    1. exception processor behaviors, when ``settings.normalize_exceptions``
    2. logging behaviors, when ``settings.log_dispatch``
    3. behaviors added on ``configuration``, in the order they were added
    """
    lifetime: HandlerLifetime = settings.handler_lifetime
    if configuration is not None and configuration.handler_lifetime is not None:
        lifetime = configuration.handler_lifetime

    registry = HandlerRegistry(default_lifetime=lifetime)

    if settings.normalize_exceptions:
        registry.add_request_behavior(
            RequestExceptionProcessorBehavior, lifetime=HandlerLifetime.SINGLETON
        )
        registry.add_notification_behavior(
            NotificationExceptionProcessorBehavior, lifetime=HandlerLifetime.SINGLETON
        )

    if settings.log_dispatch:
        registry.add_request_behavior(
            RequestLoggingBehavior, lifetime=HandlerLifetime.SINGLETON
        )
        registry.add_notification_behavior(
            NotificationLoggingBehavior, lifetime=HandlerLifetime.SINGLETON
        )

    if configuration is not None:
        configuration.apply(registry)

    return registry


def create_conduit(
    configure: ConfigureCallback | ConduitConfiguration | None = None,
    settings: Settings | None = None,
) -> Conduit:
    """Build a ``Conduit`` with its registry, dispatchers and container.

    Args:
        configure: A ``ConduitConfiguration``, or a callback receiving a fresh one
        settings: Settings to use; defaults to ``Settings()`` (environment and ``.env``)

    Returns:
        A ready ``Conduit``
    """
    settings = settings or Settings()
    if settings.configure_logging:
        setup_logging(
            json_logs=settings.logging.json_logs,
            log_level_name=settings.logging.level,
            show_time=settings.logging.show_time,
            plain=settings.logging.plain_logs,
        )

    if isinstance(configure, ConduitConfiguration):
        configuration: ConduitConfiguration | None = configure
    elif configure is not None:
        configuration = ConduitConfiguration()
        configure(configuration)
    else:
        configuration = None

    registry = build_registry(settings, configuration)
    container = ServiceContainer(settings, registry=registry)

    logger.debug(
        "conduit_created",
        normalize_exceptions=settings.normalize_exceptions,
        log_dispatch=settings.log_dispatch,
        handler_lifetime=registry.default_lifetime.value,
        **registry.get_summary(),
    )
    return Conduit(container)
