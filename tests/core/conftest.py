"""Shared fixtures for core tests.

Provides a manual clock and a recording sleep so retry, pacing and metrics
tests never wait on real time.
"""

from typing import Callable, List, Optional, Tuple

import pytest

from search_scout.core.cancellation import CancellationToken


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Injectable sleep that records calls instead of waiting.

    Advances ``clock`` by the requested delay when one is given, and runs
    ``on_call`` before honouring the token so tests can cancel mid-sleep.
    """

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock
        self.calls: List[Tuple[float, str]] = []
        self.on_call: Optional[Callable[[], None]] = None

    async def __call__(
        self,
        seconds: float,
        token: Optional[CancellationToken] = None,
        *,
        phase: str = "sleep",
        label: Optional[str] = None,
    ) -> None:
        self.calls.append((seconds, phase))
        if self.on_call is not None:
            self.on_call()
        if token is not None:
            token.raise_if_cancelled(phase, label)
        if self.clock is not None:
            self.clock.advance(seconds)

    @property
    def delays(self) -> List[float]:
        return [seconds for seconds, _ in self.calls]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep(fake_clock):
    return RecordingSleep(fake_clock)
