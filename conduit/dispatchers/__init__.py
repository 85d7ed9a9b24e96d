"""Request and notification dispatchers."""

from .interfaces import INotificationDispatcher, IRequestDispatcher
from .notification_dispatcher import NotificationDispatcher
from .request_dispatcher import RequestDispatcher


__all__ = [
    "IRequestDispatcher",
    "INotificationDispatcher",
    "RequestDispatcher",
    "NotificationDispatcher",
]
