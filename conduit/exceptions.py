"""Exceptions raised by the Conduit dispatch core."""

from typing import Any


__all__ = [
    "ConduitError",
    "ArgumentNullError",
    "ResolutionError",
    "HandlerNotFoundError",
    "HandlerResolutionError",
    "BehaviorResolutionError",
    "OperationCancelledError",
    "InvocationError",
    "ConfigurationError",
    "HandlerAlreadyRegisteredError",
    "qualified_name",
]


def qualified_name(message_type: type) -> str:
    """Return the fully-qualified name of a type (``module.QualName``)."""
    module = getattr(message_type, "__module__", None)
    qualname = getattr(message_type, "__qualname__", None) or getattr(
        message_type, "__name__", repr(message_type)
    )
    if module in (None, "builtins"):
        return str(qualname)
    return f"{module}.{qualname}"


class ConduitError(Exception):
    """Base exception for all Conduit errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ArgumentNullError(ConduitError, ValueError):
    """Raised when a required message argument is ``None``."""

    def __init__(self, argument_name: str) -> None:
        super().__init__(
            f"Argument '{argument_name}' must not be None",
            details={"argument": argument_name},
        )
        self.argument_name = argument_name


class ResolutionError(ConduitError, LookupError):
    """Raised when a handler or behavior cannot be resolved or invoked."""

    pass


class HandlerNotFoundError(ResolutionError):
    """Raised when no handler is registered for a request type."""

    def __init__(self, message_type: type) -> None:
        type_name = qualified_name(message_type)
        super().__init__(
            f"Handler for {type_name} was not found",
            details={"message_type": type_name},
        )
        self.message_type = message_type
        self.type_name = type_name


class HandlerResolutionError(ResolutionError):
    """Raised when a handler does not expose the expected ``handle`` call shape."""

    pass


class BehaviorResolutionError(ResolutionError):
    """Raised when a behavior does not expose the expected ``handle`` call shape."""

    pass


class OperationCancelledError(ConduitError):
    """Raised when a dispatch observes a cancelled cancellation token."""

    def __init__(self, message: str = "The operation was cancelled") -> None:
        super().__init__(message)


class InvocationError(ConduitError):
    """Wrapper for a failure raised by an indirectly invoked handler.

    Integrations that call handlers through an adapter raise this with the
    original exception; the exception processor behaviors unwrap it so the
    caller sees the original failure.
    """

    def __init__(
        self, inner_exception: BaseException | None, message: str | None = None
    ) -> None:
        if message is None:
            message = (
                f"Handler invocation failed: {inner_exception!r}"
                if inner_exception is not None
                else "Handler invocation failed"
            )
        super().__init__(message)
        self.inner_exception = inner_exception
        self.__cause__ = inner_exception


class ConfigurationError(ConduitError, ValueError):
    """Raised when registration or settings are invalid."""

    pass


class HandlerAlreadyRegisteredError(ConfigurationError):
    """Raised when a second handler is registered for one request type."""

    def __init__(self, message_type: type) -> None:
        type_name = qualified_name(message_type)
        super().__init__(
            f"A handler for {type_name} is already registered",
            details={"message_type": type_name},
        )
        self.message_type = message_type
