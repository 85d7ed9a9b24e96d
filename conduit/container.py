"""Service container holding the registry, dispatchers and settings.

One container is built per ``Conduit`` instance by ``create_conduit``. Tests
build their own containers, so there is no module-level singleton.
"""

import inspect
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog

from conduit.config.settings import Settings
from conduit.dispatchers import (
    INotificationDispatcher,
    IRequestDispatcher,
    NotificationDispatcher,
    RequestDispatcher,
)
from conduit.registry import HandlerRegistry


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ServiceContainer:
    """Dependency injection container for the dispatch services."""

    def __init__(
        self, settings: Settings, registry: HandlerRegistry | None = None
    ) -> None:
        """Initialize the service container.

        Args:
            settings: Settings the services were built from
            registry: Pre-populated registry; an empty one is created when omitted
        """
        self.settings = settings
        self._services: dict[object, Any] = {}
        self._factories: dict[object, Callable[[], Any]] = {}

        self.register_service(Settings, self.settings)
        self.register_service(ServiceContainer, self)
        self.register_service(
            HandlerRegistry,
            registry or HandlerRegistry(default_lifetime=settings.handler_lifetime),
        )
        self.register_service(
            IRequestDispatcher,
            factory=lambda: RequestDispatcher(self.get_registry()),
        )
        self.register_service(
            INotificationDispatcher,
            factory=lambda: NotificationDispatcher(self.get_registry()),
        )

    def register_service(
        self,
        service_type: object,
        instance: Any | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> None:
        """Register a service instance or factory."""
        if instance is not None:
            self._services[service_type] = instance
        elif factory is not None:
            self._services.pop(service_type, None)
            self._factories[service_type] = factory
        else:
            raise ValueError("Either instance or factory must be provided")

    def get_service(self, service_type: type[T]) -> T:
        """Get a service instance by key (type or protocol)."""
        if service_type not in self._services:
            if service_type in self._factories:
                self._services[service_type] = self._factories[service_type]()
            else:
                type_name = getattr(service_type, "__name__", str(service_type))
                raise ValueError(f"Service {type_name} not registered")
        return cast(T, self._services[service_type])

    def get_settings(self) -> Settings:
        """Get the settings instance."""
        return self.get_service(Settings)

    def get_registry(self) -> HandlerRegistry:
        """Get the handler registry instance."""
        return self.get_service(HandlerRegistry)

    def get_request_dispatcher(self) -> IRequestDispatcher:
        """Get the request dispatcher instance."""
        return self.get_service(IRequestDispatcher)  # type: ignore[type-abstract]

    def get_notification_dispatcher(self) -> INotificationDispatcher:
        """Get the notification dispatcher instance."""
        return self.get_service(INotificationDispatcher)  # type: ignore[type-abstract]

    async def close(self) -> None:
        """Close all managed resources during shutdown."""
        for service in list(self._services.values()):
            if service is self:
                continue

            try:
                if hasattr(service, "aclose") and callable(service.aclose):
                    maybe_coro = service.aclose()
                    if inspect.isawaitable(maybe_coro):
                        await maybe_coro
                elif hasattr(service, "close") and callable(service.close):
                    maybe_coro = service.close()
                    if inspect.isawaitable(maybe_coro):
                        await maybe_coro
            except Exception as e:
                logger.error(
                    "service_close_failed",
                    service=type(service).__name__,
                    error=str(e),
                    exc_info=e,
                    category="lifecycle",
                )
        self._services.clear()
        self._factories.clear()
        logger.debug("service_container_closed", category="lifecycle")
