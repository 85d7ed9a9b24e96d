"""Message markers routed by the dispatchers.

Messages are plain objects (dataclasses, pydantic models, ordinary classes).
Routing uses the runtime type of the instance, so subclass these markers on
the concrete message classes.
"""

from typing import Generic, TypeVar


TResponse = TypeVar("TResponse", covariant=True)


class BaseRequest:
    """Marker for anything that can be sent through the request dispatcher."""

    __slots__ = ()


class Request(BaseRequest):
    """A request handled by exactly one handler and producing no response.

    Example:
        @dataclass(frozen=True)
        class DeleteUser(Request):
            user_id: int
    """

    __slots__ = ()


class ResponseRequest(BaseRequest, Generic[TResponse]):
    """A request handled by exactly one handler that produces a ``TResponse``.

    Example:
        @dataclass(frozen=True)
        class GetUser(ResponseRequest[User]):
            user_id: int
    """

    __slots__ = ()


class Notification:
    """Marker for messages broadcast to zero or more handlers."""

    __slots__ = ()
