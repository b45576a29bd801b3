"""Deadline and cancellation token for remote calls."""

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

_T = TypeVar("_T")


class DeadlineExceeded(TimeoutError):
    """Raised when the time budget runs out before a call completes."""


class HydrationCancelled(Exception):
    """Raised when the caller cancels an in-flight resolution."""


@dataclass
class Deadline:
    """A monotonic time budget shared by every step of one request."""

    expires_at: float
    _cancelled: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        """Create a deadline that expires ``seconds`` from now."""
        return cls(expires_at=time.monotonic() + max(seconds, 0.0))

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Abort whatever is running under this deadline."""
        self._cancelled.set()

    async def run(self, awaitable: Awaitable[_T]) -> _T:
        """Await ``awaitable`` unless the deadline expires or is cancelled first.

        The losing side of the race is cancelled, so a late result is never
        observed. Exceptions raised by ``awaitable`` propagate unchanged.
        """
        if self.cancelled or self.expired:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            if self.cancelled:
                raise HydrationCancelled
            raise DeadlineExceeded

        task = asyncio.ensure_future(awaitable)
        cancel_waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, cancel_waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for pending in (task, cancel_waiter):
                if not pending.done():
                    pending.cancel()

        if cancel_waiter in done or self.cancelled:
            raise HydrationCancelled
        if task in done:
            return task.result()
        raise DeadlineExceeded
