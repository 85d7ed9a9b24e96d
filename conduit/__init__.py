"""Conduit: in-process request/response and notification dispatch.

Requests go to exactly one handler and may produce a response; notifications
fan out concurrently to every registered handler. Both pass through an
ordered chain of pipeline behaviors.
"""

from .behaviors import (
    NotificationExceptionProcessorBehavior,
    NotificationLoggingBehavior,
    RequestExceptionProcessorBehavior,
    RequestLoggingBehavior,
)
from .bootstrap import Conduit, build_registry, create_conduit
from .cancellation import CancellationToken
from .config import ConduitConfiguration, LoggingSettings, Settings
from .container import ServiceContainer
from .contract import (
    UNIT,
    BaseRequest,
    Notification,
    NotificationHandler,
    NotificationHandlerDelegate,
    NotificationPipelineBehavior,
    PipelineBehavior,
    Request,
    RequestHandler,
    RequestHandlerDelegate,
    ResponseRequest,
    ResponseRequestHandler,
    Unit,
)
from .core.logging import get_logger, setup_logging
from .dispatchers import (
    INotificationDispatcher,
    IRequestDispatcher,
    NotificationDispatcher,
    RequestDispatcher,
)
from .exceptions import (
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
)
from .pipeline import compose_pipeline
from .registry import CapabilityRegistry, HandlerLifetime, HandlerRegistry


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Facade
    "Conduit",
    "create_conduit",
    "build_registry",
    "ServiceContainer",
    # Contracts
    "BaseRequest",
    "Request",
    "ResponseRequest",
    "Notification",
    "RequestHandler",
    "ResponseRequestHandler",
    "NotificationHandler",
    "PipelineBehavior",
    "NotificationPipelineBehavior",
    "RequestHandlerDelegate",
    "NotificationHandlerDelegate",
    "Unit",
    "UNIT",
    # Dispatch
    "CancellationToken",
    "IRequestDispatcher",
    "INotificationDispatcher",
    "RequestDispatcher",
    "NotificationDispatcher",
    "compose_pipeline",
    # Registry
    "CapabilityRegistry",
    "HandlerLifetime",
    "HandlerRegistry",
    # Behaviors
    "RequestExceptionProcessorBehavior",
    "NotificationExceptionProcessorBehavior",
    "RequestLoggingBehavior",
    "NotificationLoggingBehavior",
    # Configuration
    "ConduitConfiguration",
    "LoggingSettings",
    "Settings",
    "setup_logging",
    "get_logger",
    # Errors
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
]
