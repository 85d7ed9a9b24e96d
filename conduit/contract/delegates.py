"""Continuation types passed to behaviors as ``next``."""

from collections.abc import Awaitable, Callable
from typing import TypeAlias, TypeVar


T = TypeVar("T")

# Invokes the rest of a request pipeline and returns its response.
RequestHandlerDelegate: TypeAlias = Callable[[], Awaitable[T]]

# Invokes the rest of a notification pipeline.
NotificationHandlerDelegate: TypeAlias = Callable[[], Awaitable[None]]
