"""Cooperative cancellation signal threaded through a dispatch call."""

import asyncio

from conduit.exceptions import OperationCancelledError


class CancellationToken:
    """A one-shot cancellation signal.

    The same token is passed to every behavior and handler taking part in one
    dispatch call. Handlers honour it at their own suspension points by calling
    ``raise_if_cancelled()`` or awaiting ``wait()``.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return a token that nobody else holds and that is therefore never cancelled."""
        return cls()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Reason passed to ``cancel()``, if any."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Cancelling an already cancelled token is a no-op."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``OperationCancelledError`` if cancellation has been requested."""
        if self._event.is_set():
            if self._reason:
                raise OperationCancelledError(
                    f"The operation was cancelled: {self._reason}"
                )
            raise OperationCancelledError()

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        await self._event.wait()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken({state})"
