"""Tests for conduit exceptions."""

import pytest

from conduit.exceptions import (
    ArgumentNullError,
    BehaviorResolutionError,
    ConduitError,
    ConfigurationError,
    HandlerAlreadyRegisteredError,
    HandlerNotFoundError,
    HandlerResolutionError,
    InvocationError,
    OperationCancelledError,
    ResolutionError,
    qualified_name,
)


class Outer:
    class Inner:
        pass


@pytest.mark.unit
class TestQualifiedName:
    def test_includes_module_and_qualname(self) -> None:
        assert qualified_name(Outer.Inner) == f"{__name__}.Outer.Inner"

    def test_builtins_have_no_module_prefix(self) -> None:
        assert qualified_name(int) == "int"


@pytest.mark.unit
class TestConduitError:
    """Test ConduitError base exception."""

    def test_init_with_defaults(self) -> None:
        error = ConduitError("Test message")
        assert str(error) == "Test message"
        assert error.message == "Test message"
        assert error.details == {}

    def test_init_with_details(self) -> None:
        details = {"field": "value"}
        error = ConduitError("Custom message", details=details)
        assert error.details == details


@pytest.mark.unit
class TestSpecificErrors:
    """Test the concrete error types."""

    def test_argument_null_error(self) -> None:
        error = ArgumentNullError("request")
        assert isinstance(error, ValueError)
        assert isinstance(error, ConduitError)
        assert "request" in error.message
        assert error.details == {"argument": "request"}

    def test_handler_not_found_error_names_type(self) -> None:
        error = HandlerNotFoundError(Outer.Inner)
        assert isinstance(error, ResolutionError)
        assert isinstance(error, LookupError)
        assert error.message_type is Outer.Inner
        assert error.type_name == f"{__name__}.Outer.Inner"
        assert error.type_name in str(error)

    def test_resolution_errors_share_base(self) -> None:
        assert issubclass(HandlerResolutionError, ResolutionError)
        assert issubclass(BehaviorResolutionError, ResolutionError)

    def test_operation_cancelled_default_message(self) -> None:
        error = OperationCancelledError()
        assert error.message == "The operation was cancelled"

    def test_invocation_error_keeps_inner(self) -> None:
        inner = KeyError("missing")
        error = InvocationError(inner)
        assert error.inner_exception is inner
        assert error.__cause__ is inner

    def test_invocation_error_without_inner(self) -> None:
        error = InvocationError(None)
        assert error.inner_exception is None
        assert error.message == "Handler invocation failed"

    def test_handler_already_registered(self) -> None:
        error = HandlerAlreadyRegisteredError(Outer.Inner)
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, ValueError)
        assert error.message_type is Outer.Inner
        assert "already registered" in error.message
