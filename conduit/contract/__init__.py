"""Contracts shared by callers, handlers and behaviors.

Key components:
- BaseRequest / Request / ResponseRequest: request markers
- Notification: notification marker
- RequestHandler / ResponseRequestHandler / NotificationHandler: handler bases
- PipelineBehavior / NotificationPipelineBehavior: behavior bases
- Unit: the "no response" sentinel
"""

from .behaviors import NotificationPipelineBehavior, PipelineBehavior
from .delegates import NotificationHandlerDelegate, RequestHandlerDelegate
from .handlers import NotificationHandler, RequestHandler, ResponseRequestHandler
from .requests import BaseRequest, Notification, Request, ResponseRequest
from .unit import UNIT, Unit


__all__ = [
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
]
