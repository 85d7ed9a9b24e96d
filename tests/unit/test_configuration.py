"""Tests for the ConduitConfiguration builder."""

from typing import Any

import pytest

from conduit.cancellation import CancellationToken
from conduit.config import ConduitConfiguration
from conduit.contract import (
    Notification,
    NotificationPipelineBehavior,
    PipelineBehavior,
    ResponseRequest,
)
from conduit.exceptions import ConfigurationError
from conduit.registry import HandlerLifetime, HandlerRegistry


class Query(ResponseRequest[str]):
    pass


class Event(Notification):
    pass


class FirstBehavior(PipelineBehavior[Any, Any]):
    async def handle(
        self, request: Any, next: Any, cancellation_token: CancellationToken
    ) -> Any:
        return await next()


class SecondBehavior(FirstBehavior):
    pass


class EventBehavior(NotificationPipelineBehavior[Any]):
    async def handle(
        self, notification: Any, next: Any, cancellation_token: CancellationToken
    ) -> None:
        await next()


class QueryHandler:
    async def handle(self, request: Query, cancellation_token: CancellationToken) -> str:
        return "answer"


class EventHandler:
    async def handle(self, notification: Event, cancellation_token: CancellationToken) -> None:
        return None


@pytest.mark.unit
class TestBehaviorValidation:
    def test_none_request_behavior(self) -> None:
        with pytest.raises(TypeError):
            ConduitConfiguration().add_request_behavior(None)  # type: ignore[arg-type]

    def test_none_notification_behavior(self) -> None:
        with pytest.raises(TypeError):
            ConduitConfiguration().add_notification_behavior(None)  # type: ignore[arg-type]

    def test_instance_is_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="is not a class"):
            ConduitConfiguration().add_request_behavior(FirstBehavior())  # type: ignore[arg-type]

    def test_request_behavior_must_implement_base(self) -> None:
        with pytest.raises(ConfigurationError, match="PipelineBehavior"):
            ConduitConfiguration().add_request_behavior(EventBehavior)

    def test_notification_behavior_must_implement_base(self) -> None:
        with pytest.raises(
            ConfigurationError, match="does not implement NotificationPipelineBehavior"
        ):
            ConduitConfiguration().add_notification_behavior(FirstBehavior)


@pytest.mark.unit
class TestFluentBuilder:
    def test_methods_chain(self) -> None:
        configuration = ConduitConfiguration()
        result = (
            configuration.with_handler_lifetime("singleton")
            .add_request_behavior(FirstBehavior)
            .add_notification_behavior(EventBehavior)
            .register_request_handler(Query, QueryHandler)
            .register_notification_handler(Event, EventHandler)
        )
        assert result is configuration
        assert configuration.handler_lifetime is HandlerLifetime.SINGLETON

    def test_behavior_order_is_kept(self) -> None:
        configuration = (
            ConduitConfiguration()
            .add_request_behavior(SecondBehavior)
            .add_request_behavior(FirstBehavior)
        )
        assert configuration.request_behavior_types == [SecondBehavior, FirstBehavior]

    def test_notification_behavior_order_is_kept(self) -> None:
        class LateEventBehavior(EventBehavior):
            pass

        configuration = (
            ConduitConfiguration()
            .add_notification_behavior(LateEventBehavior)
            .add_notification_behavior(EventBehavior)
        )
        assert configuration.notification_behavior_types == [
            LateEventBehavior,
            EventBehavior,
        ]
        assert configuration.request_behavior_types == []

    def test_apply_populates_registry(self) -> None:
        registry = HandlerRegistry()
        (
            ConduitConfiguration()
            .add_request_behavior(FirstBehavior)
            .add_request_behavior(SecondBehavior, request_type=Query)
            .add_notification_behavior(EventBehavior)
            .register_request_handler(Query, QueryHandler, response_type=str)
            .register_notification_handler(Event, EventHandler)
            .apply(registry)
        )

        behaviors = registry.request_behaviors_for(Query)
        assert [type(b) for b in behaviors] == [FirstBehavior, SecondBehavior]
        assert [type(b) for b in registry.notification_behaviors_for(Event)] == [
            EventBehavior
        ]
        assert isinstance(registry.request_handler_for(Query), QueryHandler)
        assert len(registry.notification_handlers_for(Event)) == 1

    def test_invalid_handler_surfaces_on_apply(self) -> None:
        configuration = ConduitConfiguration().register_request_handler(
            Event, QueryHandler
        )
        with pytest.raises(ConfigurationError):
            configuration.apply(HandlerRegistry())
