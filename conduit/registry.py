"""Registry of handlers and behaviors keyed by message type.

The dispatchers only read from the registry through the lookup methods of
``CapabilityRegistry``. Registration happens once at configuration time.
"""

import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import structlog

from conduit.contract import BaseRequest, Notification, Request, ResponseRequest, Unit
from conduit.exceptions import (
    ConfigurationError,
    HandlerAlreadyRegisteredError,
    qualified_name,
)


__all__ = [
    "CapabilityRegistry",
    "HandlerLifetime",
    "HandlerRegistry",
    "Provider",
    "RequestHandlerBinding",
]

logger = structlog.get_logger(__name__)


class HandlerLifetime(str, Enum):
    """How often a registered class or factory is instantiated."""

    TRANSIENT = "transient"
    SINGLETON = "singleton"


@runtime_checkable
class CapabilityRegistry(Protocol):
    """Lookups the dispatchers need from a registry."""

    def request_behaviors_for(self, request_type: type) -> list[Any]:
        """Behaviors applying to ``request_type``, in registration order."""
        ...

    def notification_behaviors_for(self, notification_type: type) -> list[Any]:
        """Behaviors applying to ``notification_type``, in registration order."""
        ...

    def request_handler_for(self, request_type: type) -> Any | None:
        """The single handler bound to ``request_type``, or None."""
        ...

    def notification_handlers_for(self, notification_type: type) -> list[Any]:
        """All handlers bound to ``notification_type`` (possibly none)."""
        ...


def _describe(target: Any) -> str:
    if isinstance(target, type):
        return target.__name__
    name = getattr(target, "__name__", None)
    return name if isinstance(name, str) else type(target).__name__


class Provider:
    """Produces a handler or behavior instance according to its lifetime.

    Classes and plain callables are treated as factories. Objects exposing a
    ``handle`` attribute are treated as ready instances and always behave as
    singletons.
    """

    def __init__(self, target: Any, lifetime: HandlerLifetime) -> None:
        if target is None:
            raise ConfigurationError("Handler or behavior must not be None")

        self._lock = threading.Lock()
        self._instance: Any | None = None
        self._factory: Callable[[], Any] | None = None

        if isinstance(target, type) or (
            callable(target) and not hasattr(target, "handle")
        ):
            self._factory = target
            self.lifetime = HandlerLifetime(lifetime)
        else:
            self._instance = target
            self.lifetime = HandlerLifetime.SINGLETON

        self.name = _describe(target)

    def resolve(self) -> Any:
        """Return an instance, creating it if the lifetime requires."""
        if self._factory is None:
            return self._instance
        if self.lifetime is HandlerLifetime.TRANSIENT:
            return self._factory()
        with self._lock:
            if self._instance is None:
                self._instance = self._factory()
            return self._instance


@dataclass(frozen=True)
class RequestHandlerBinding:
    """The handler bound to one request type."""

    request_type: type
    response_type: Any
    provider: Provider


@dataclass(frozen=True)
class _BehaviorBinding:
    provider: Provider
    message_type: type | None = None

    def applies_to(self, message_type: type) -> bool:
        return self.message_type is None or issubclass(message_type, self.message_type)


@dataclass
class _Bindings:
    request_handlers: dict[type, RequestHandlerBinding] = field(default_factory=dict)
    notification_handlers: dict[type, list[Provider]] = field(
        default_factory=lambda: defaultdict(list)
    )
    request_behaviors: list[_BehaviorBinding] = field(default_factory=list)
    notification_behaviors: list[_BehaviorBinding] = field(default_factory=list)


class HandlerRegistry:
    """Central registry for request handlers, notification handlers and behaviors."""

    def __init__(
        self, default_lifetime: HandlerLifetime = HandlerLifetime.TRANSIENT
    ) -> None:
        self.default_lifetime = HandlerLifetime(default_lifetime)
        self._bindings = _Bindings()

    # === Registration ===

    def register_request_handler(
        self,
        request_type: type,
        handler: Any,
        *,
        response_type: Any = None,
        lifetime: HandlerLifetime | None = None,
    ) -> RequestHandlerBinding:
        """Bind the single handler for a request type.

        Args:
            request_type: Concrete request class
            handler: Handler class, zero-argument factory, or instance
            response_type: Declared response type; ``Unit`` for ``Request``
            lifetime: Instance lifetime; defaults to the registry default

        Raises:
            ConfigurationError: If the types are invalid
            HandlerAlreadyRegisteredError: If a handler is already bound
        """
        self._check_message_type(request_type, BaseRequest, "request")

        if issubclass(request_type, Request):
            if response_type not in (None, Unit):
                raise ConfigurationError(
                    f"{qualified_name(request_type)} produces no response; "
                    f"response_type must be Unit, got {response_type!r}"
                )
            response_type = Unit
        elif issubclass(request_type, ResponseRequest) and response_type is Unit:
            raise ConfigurationError(
                f"{qualified_name(request_type)} produces a response; "
                "response_type cannot be Unit"
            )

        if request_type in self._bindings.request_handlers:
            raise HandlerAlreadyRegisteredError(request_type)

        binding = RequestHandlerBinding(
            request_type=request_type,
            response_type=response_type,
            provider=Provider(handler, lifetime or self.default_lifetime),
        )
        self._bindings.request_handlers[request_type] = binding
        logger.debug(
            "request_handler_registered",
            request_type=qualified_name(request_type),
            handler=binding.provider.name,
            lifetime=binding.provider.lifetime.value,
        )
        return binding

    def unregister_request_handler(self, request_type: type) -> bool:
        """Remove the handler bound to ``request_type``. Returns whether one existed."""
        removed = self._bindings.request_handlers.pop(request_type, None)
        return removed is not None

    def register_notification_handler(
        self,
        notification_type: type,
        handler: Any,
        *,
        lifetime: HandlerLifetime | None = None,
    ) -> None:
        """Add a handler for a notification type. Order is kept."""
        self._check_message_type(notification_type, Notification, "notification")
        provider = Provider(handler, lifetime or self.default_lifetime)
        self._bindings.notification_handlers[notification_type].append(provider)
        logger.debug(
            "notification_handler_registered",
            notification_type=qualified_name(notification_type),
            handler=provider.name,
            lifetime=provider.lifetime.value,
        )

    def add_request_behavior(
        self,
        behavior: Any,
        *,
        request_type: type | None = None,
        lifetime: HandlerLifetime = HandlerLifetime.TRANSIENT,
    ) -> None:
        """Append a request behavior, optionally narrowed to one request type."""
        if request_type is not None:
            self._check_message_type(request_type, BaseRequest, "request")
        provider = Provider(behavior, lifetime)
        self._bindings.request_behaviors.append(
            _BehaviorBinding(provider=provider, message_type=request_type)
        )
        logger.debug(
            "request_behavior_added",
            behavior=provider.name,
            scope=qualified_name(request_type) if request_type else "*",
            position=len(self._bindings.request_behaviors),
        )

    def add_notification_behavior(
        self,
        behavior: Any,
        *,
        notification_type: type | None = None,
        lifetime: HandlerLifetime = HandlerLifetime.TRANSIENT,
    ) -> None:
        """Append a notification behavior, optionally narrowed to one notification type."""
        if notification_type is not None:
            self._check_message_type(notification_type, Notification, "notification")
        provider = Provider(behavior, lifetime)
        self._bindings.notification_behaviors.append(
            _BehaviorBinding(provider=provider, message_type=notification_type)
        )
        logger.debug(
            "notification_behavior_added",
            behavior=provider.name,
            scope=qualified_name(notification_type) if notification_type else "*",
            position=len(self._bindings.notification_behaviors),
        )

    def clear(self) -> None:
        """Remove every binding."""
        self._bindings = _Bindings()

    # === Lookups ===

    def request_behaviors_for(self, request_type: type) -> list[Any]:
        return [
            b.provider.resolve()
            for b in self._bindings.request_behaviors
            if b.applies_to(request_type)
        ]

    def notification_behaviors_for(self, notification_type: type) -> list[Any]:
        return [
            b.provider.resolve()
            for b in self._bindings.notification_behaviors
            if b.applies_to(notification_type)
        ]

    def request_handler_for(self, request_type: type) -> Any | None:
        binding = self._bindings.request_handlers.get(request_type)
        if binding is None:
            return None
        return binding.provider.resolve()

    def notification_handlers_for(self, notification_type: type) -> list[Any]:
        providers = self._bindings.notification_handlers.get(notification_type, [])
        return [provider.resolve() for provider in providers]

    def get_request_binding(self, request_type: type) -> RequestHandlerBinding | None:
        """Binding details for ``request_type``, for diagnostics."""
        return self._bindings.request_handlers.get(request_type)

    def get_summary(self) -> dict[str, Any]:
        """Counts of registered bindings."""
        return {
            "request_handlers": len(self._bindings.request_handlers),
            "notification_types": len(self._bindings.notification_handlers),
            "notification_handlers": sum(
                len(p) for p in self._bindings.notification_handlers.values()
            ),
            "request_behaviors": [
                b.provider.name for b in self._bindings.request_behaviors
            ],
            "notification_behaviors": [
                b.provider.name for b in self._bindings.notification_behaviors
            ],
        }

    @staticmethod
    def _check_message_type(message_type: Any, base: type, kind: str) -> None:
        if not isinstance(message_type, type) or not issubclass(message_type, base):
            raise ConfigurationError(
                f"{message_type!r} is not a {kind} type; it must subclass {base.__name__}"
            )
