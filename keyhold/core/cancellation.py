"""Cooperative cancellation for request-scoped work.

A CancellationToken is created per request and passed down through
handlers into every suspending repository or messaging call. Callees check
the token before each suspending step and raise OperationCancelledError,
which handlers distinguish from generic failures.

Usage:
    token = CancellationToken.with_timeout(30)
    result = await handler.handle(command, token)

    # Inside a repository
    token.raise_if_cancelled()
    row = await session.get(UserAccountModel, user_id)
"""

import asyncio


class OperationCancelledError(Exception):
    """Raised when work observes a cancelled token."""

    def __init__(self, reason: str = "A task was canceled.") -> None:
        super().__init__(reason)
        self.reason = reason


class CancellationToken:
    """Cancellation signal shared between a caller and its callees.

    Attributes:
        reason: Why the token was cancelled (None while active).
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._timer: asyncio.TimerHandle | None = None
        self.reason: str | None = None

    @classmethod
    def none(cls) -> "CancellationToken":
        """Token that is never cancelled by a timer."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        """Token that cancels itself after ``seconds``.

        Must be called from inside a running event loop.
        """
        token = cls()
        loop = asyncio.get_running_loop()
        token._timer = loop.call_later(seconds, token.cancel, "Request timed out")
        return token

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "A task was canceled.") -> None:
        """Signal cancellation. Idempotent."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        self.dispose()

    def dispose(self) -> None:
        """Stop the deadline timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if the token has fired."""
        if self._event.is_set():
            raise OperationCancelledError(self.reason or "A task was canceled.")

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()
