"""Cancellation tokens and cancellable sleeps.

Every wait in the resilience and batch layers goes through
``cancellable_sleep`` so that an explicit ``cancel()`` or an expired
deadline ends the wait immediately instead of after the full delay.

Example:
    token = CancellationToken(timeout=120.0)
    executor = RetryExecutor(RetryPolicy())
    await executor.with_retry("search", op, token=token)

    # elsewhere, e.g. a signal handler
    token.cancel()
"""

import asyncio
import time
from typing import Callable, Optional

from search_scout.core.errors.resilience import OperationCancelledError

_PHASE_MESSAGES = {
    "before_attempt": "operation cancelled",
    "retry_delay": "operation cancelled during retry delay",
    "batch_delay": "operation cancelled during delay",
    "sleep": "operation cancelled during sleep",
}


class CancellationToken:
    """Cooperative cancellation signal with an optional deadline.

    The token is cancelled once ``cancel()`` is called or once ``timeout``
    seconds have passed since construction, whichever comes first.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._event = asyncio.Event()
        self._clock = clock
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = clock() + max(0.0, timeout)
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation. The first reason given wins."""
        if self._reason is None:
            self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            if self._reason is None:
                self._reason = "deadline_exceeded"
            return True
        return False

    @property
    def reason(self) -> Optional[str]:
        """Why the token is cancelled, or None while it is live."""
        return self._reason if self.cancelled else None

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self, phase: str = "sleep", label: Optional[str] = None) -> None:
        """Raise OperationCancelledError if the token is cancelled.

        Args:
            phase: Where the check happens, used in the error message.
            label: Operation label to include in the error.
        """
        if not self.cancelled:
            return
        message = _PHASE_MESSAGES.get(phase, _PHASE_MESSAGES["sleep"])
        if label:
            message = f"{message}: {label}"
        raise OperationCancelledError(
            f"{message} ({self._reason})",
            label=label,
            phase=phase,
            reason=self._reason or "cancelled",
        )

    async def wait(self, seconds: float) -> bool:
        """Wait up to ``seconds`` (bounded by the deadline).

        Returns:
            True if the token was cancelled when the wait ended.
        """
        remaining = self.remaining()
        hits_deadline = remaining is not None and remaining <= seconds
        timeout = remaining if hits_deadline else seconds
        if timeout > 0:
            try:
                await asyncio.wait_for(self._event.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                pass
        # loop timers may fire marginally before the clock reaches the deadline
        if hits_deadline and not self._event.is_set():
            self.cancel("deadline_exceeded")
        return self.cancelled


async def cancellable_sleep(
    seconds: float,
    token: Optional[CancellationToken] = None,
    *,
    phase: str = "sleep",
    label: Optional[str] = None,
) -> None:
    """Sleep for ``seconds`` unless ``token`` is cancelled first.

    A zero or negative delay returns immediately without checking the
    token.

    Raises:
        OperationCancelledError: If the token is cancelled before or
            during the sleep.
    """
    if seconds <= 0:
        return
    if token is None:
        await asyncio.sleep(seconds)
        return
    token.raise_if_cancelled(phase, label)
    if await token.wait(seconds):
        token.raise_if_cancelled(phase, label)
