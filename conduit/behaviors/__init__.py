"""Built-in pipeline behaviors."""

from .exception_processor import (
    NotificationExceptionProcessorBehavior,
    RequestExceptionProcessorBehavior,
    unwrap_exception,
)
from .logging import NotificationLoggingBehavior, RequestLoggingBehavior


__all__ = [
    "RequestExceptionProcessorBehavior",
    "NotificationExceptionProcessorBehavior",
    "RequestLoggingBehavior",
    "NotificationLoggingBehavior",
    "unwrap_exception",
]
