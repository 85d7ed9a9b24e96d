"""Fluent configuration of handlers and behaviors.

``ConduitConfiguration`` only records what should be registered. The records
are replayed onto a ``HandlerRegistry`` by ``apply`` (called from
``create_conduit``) so that the built-in behaviors always come first.
"""

from dataclasses import dataclass
from typing import Any

from conduit.contract import NotificationPipelineBehavior, PipelineBehavior
from conduit.exceptions import ConfigurationError
from conduit.registry import HandlerLifetime, HandlerRegistry


__all__ = ["ConduitConfiguration"]


@dataclass(frozen=True)
class _BehaviorEntry:
    behavior_type: type
    message_type: type | None
    lifetime: HandlerLifetime


@dataclass(frozen=True)
class _HandlerEntry:
    message_type: type
    handler: Any
    response_type: Any
    lifetime: HandlerLifetime | None


class ConduitConfiguration:
    """Collects handler and behavior registrations.

    Every method returns the configuration itself so calls can be chained::

        configuration = (
            ConduitConfiguration()
            .add_request_behavior(TimingBehavior)
            .register_request_handler(GetUser, GetUserHandler)
        )
    """

    def __init__(self, handler_lifetime: HandlerLifetime | None = None) -> None:
        self.handler_lifetime = (
            HandlerLifetime(handler_lifetime) if handler_lifetime else None
        )
        self._request_behaviors: list[_BehaviorEntry] = []
        self._notification_behaviors: list[_BehaviorEntry] = []
        self._request_handlers: list[_HandlerEntry] = []
        self._notification_handlers: list[_HandlerEntry] = []

    def with_handler_lifetime(
        self, lifetime: HandlerLifetime | str
    ) -> "ConduitConfiguration":
        """Set the default lifetime for handlers registered without one."""
        self.handler_lifetime = HandlerLifetime(lifetime)
        return self

    def add_request_behavior(
        self,
        behavior_type: type,
        *,
        request_type: type | None = None,
        lifetime: HandlerLifetime = HandlerLifetime.TRANSIENT,
    ) -> "ConduitConfiguration":
        """Append a request behavior class.

        Args:
            behavior_type: A ``PipelineBehavior`` subclass
            request_type: Restrict the behavior to this request type and its subclasses
            lifetime: Instance lifetime of the behavior

        Raises:
            TypeError: If ``behavior_type`` is None
            ConfigurationError: If ``behavior_type`` is not a ``PipelineBehavior`` class
        """
        self._check_behavior_type(behavior_type, PipelineBehavior)
        self._request_behaviors.append(
            _BehaviorEntry(behavior_type, request_type, HandlerLifetime(lifetime))
        )
        return self

    def add_notification_behavior(
        self,
        behavior_type: type,
        *,
        notification_type: type | None = None,
        lifetime: HandlerLifetime = HandlerLifetime.TRANSIENT,
    ) -> "ConduitConfiguration":
        """Append a notification behavior class.

        Raises:
            TypeError: If ``behavior_type`` is None
            ConfigurationError: If ``behavior_type`` is not a
                ``NotificationPipelineBehavior`` class
        """
        self._check_behavior_type(behavior_type, NotificationPipelineBehavior)
        self._notification_behaviors.append(
            _BehaviorEntry(behavior_type, notification_type, HandlerLifetime(lifetime))
        )
        return self

    def register_request_handler(
        self,
        request_type: type,
        handler: Any,
        *,
        response_type: Any = None,
        lifetime: HandlerLifetime | None = None,
    ) -> "ConduitConfiguration":
        """Record the handler for a request type."""
        self._request_handlers.append(
            _HandlerEntry(request_type, handler, response_type, lifetime)
        )
        return self

    def register_notification_handler(
        self,
        notification_type: type,
        handler: Any,
        *,
        lifetime: HandlerLifetime | None = None,
    ) -> "ConduitConfiguration":
        """Record one more handler for a notification type."""
        self._notification_handlers.append(
            _HandlerEntry(notification_type, handler, None, lifetime)
        )
        return self

    @property
    def request_behavior_types(self) -> list[type]:
        return [entry.behavior_type for entry in self._request_behaviors]

    @property
    def notification_behavior_types(self) -> list[type]:
        return [entry.behavior_type for entry in self._notification_behaviors]

    def apply(self, registry: HandlerRegistry) -> None:
        """Register the recorded behaviors, then the recorded handlers."""
        for entry in self._request_behaviors:
            registry.add_request_behavior(
                entry.behavior_type,
                request_type=entry.message_type,
                lifetime=entry.lifetime,
            )
        for entry in self._notification_behaviors:
            registry.add_notification_behavior(
                entry.behavior_type,
                notification_type=entry.message_type,
                lifetime=entry.lifetime,
            )
        for entry in self._request_handlers:
            registry.register_request_handler(
                entry.message_type,
                entry.handler,
                response_type=entry.response_type,
                lifetime=entry.lifetime,
            )
        for entry in self._notification_handlers:
            registry.register_notification_handler(
                entry.message_type, entry.handler, lifetime=entry.lifetime
            )

    @staticmethod
    def _check_behavior_type(behavior_type: Any, base: type) -> None:
        if behavior_type is None:
            raise TypeError("behavior_type must not be None")
        if not isinstance(behavior_type, type):
            raise ConfigurationError(
                f"{behavior_type!r} is not a class; behaviors are registered by type",
                details={"behavior": repr(behavior_type)},
            )
        if not issubclass(behavior_type, base):
            raise ConfigurationError(
                f"{behavior_type.__name__} does not implement {base.__name__}",
                details={"behavior": behavior_type.__name__, "expected": base.__name__},
            )
