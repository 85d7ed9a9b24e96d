"""Pipeline composition.

A pipeline is a chain of zero-argument coroutine functions. Each behavior
receives the next link as its ``next`` argument; the innermost link is the
terminal action that invokes the handler(s). Pipelines are built per dispatch
call and discarded afterwards.
"""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from conduit.exceptions import ResolutionError


__all__ = ["compose_pipeline", "invoke_handle"]

T = TypeVar("T")
B = TypeVar("B")

Delegate = Callable[[], Awaitable[T]]
BehaviorInvoker = Callable[[B, Delegate[T]], Awaitable[T]]


def compose_pipeline(
    behaviors: Sequence[B],
    terminal: Delegate[T],
    invoke: BehaviorInvoker[B, T],
) -> Delegate[T]:
    """Fold behaviors around a terminal action.

    Behaviors are wrapped in reverse registration order so that the first
    registered behavior is the outermost one: it observes the call first and
    the result last. With no behaviors the terminal action is returned as is.

    Args:
        behaviors: Behaviors in registration order
        terminal: Innermost action invoking the handler(s)
        invoke: Calls one behavior with the per-call arguments and ``next``

    Returns:
        A zero-argument coroutine function running the whole chain
    """
    pipeline = terminal
    for behavior in reversed(behaviors):
        pipeline = _wrap(behavior, pipeline, invoke)
    return pipeline


def _wrap(
    behavior: B, next_delegate: Delegate[T], invoke: BehaviorInvoker[B, T]
) -> Delegate[T]:
    async def step() -> T:
        return await invoke(behavior, next_delegate)

    return step


def invoke_handle(
    component: Any,
    *args: Any,
    error_type: type[ResolutionError],
    role: str,
) -> Awaitable[Any]:
    """Call ``component.handle(*args)`` and check the call shape.

    Args:
        component: Handler or behavior instance
        *args: Arguments forwarded to ``handle``
        error_type: Resolution error raised when the shape does not match
        role: "handler" or "behavior", used in error messages

    Returns:
        The awaitable returned by ``handle``

    Raises:
        ResolutionError: If ``handle`` is missing or returns a non-awaitable
    """
    component_name = type(component).__name__
    handle = getattr(component, "handle", None)
    if not callable(handle):
        raise error_type(
            f"Handle method not found on {role} of type {component_name}",
            details={role: component_name},
        )

    result = handle(*args)
    if not inspect.isawaitable(result):
        raise error_type(
            f"Handle method on {role} of type {component_name} did not return an awaitable",
            details={role: component_name, "returned": type(result).__name__},
        )
    return result
