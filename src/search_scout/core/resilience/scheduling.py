"""Complexity-aware pacing between successive searches.

Searches that are expensive server-side (long queries, wildcards, large
pages, filters) are followed by longer pauses so that a batch stays under
the secondary rate limit instead of reacting to it.
"""

import logging
from typing import Mapping, Optional

from search_scout.core.cancellation import CancellationToken, cancellable_sleep
from search_scout.core.resilience.models import OperationComplexity, SleepFunc

logger = logging.getLogger(__name__)

DEFAULT_DELAYS: Mapping[OperationComplexity, float] = {
    OperationComplexity.LOW: 0.5,
    OperationComplexity.MEDIUM: 1.0,
    OperationComplexity.HIGH: 2.0,
}

# Score thresholds for estimate_complexity.
HIGH_COMPLEXITY_SCORE = 4
MEDIUM_COMPLEXITY_SCORE = 2


def estimate_complexity(
    query: str, max_results: int, has_filters: bool
) -> OperationComplexity:
    """Estimate how expensive a search is for the remote API.

    The score only ever grows with query size, wildcard use, page size and
    filter use, so a heavier search never gets a lighter class.

    Args:
        query: Raw query text.
        max_results: Requested page size.
        has_filters: Whether any qualifier filters are applied.

    Returns:
        LOW, MEDIUM or HIGH.
    """
    score = 0

    if len(query.split()) > 3:
        score += 1
    if "*" in query or "?" in query:
        score += 1

    if max_results > 100:
        score += 2
    elif max_results > 50:
        score += 1

    if has_filters:
        score += 1

    if score >= HIGH_COMPLEXITY_SCORE:
        return OperationComplexity.HIGH
    if score >= MEDIUM_COMPLEXITY_SCORE:
        return OperationComplexity.MEDIUM
    return OperationComplexity.LOW


class DelayScheduler:
    """Map operation complexity to an inter-operation pause.

    Args:
        delays: Per-complexity overrides in seconds; missing entries use
            ``DEFAULT_DELAYS``.
        sleep_func: Injectable cancellable sleep, for tests.
    """

    def __init__(
        self,
        delays: Optional[Mapping[OperationComplexity, float]] = None,
        *,
        sleep_func: Optional[SleepFunc] = None,
    ) -> None:
        merged = dict(DEFAULT_DELAYS)
        for complexity, seconds in (delays or {}).items():
            if seconds < 0:
                raise ValueError(f"delay for {complexity.value} must be >= 0")
            merged[OperationComplexity(complexity)] = float(seconds)
        self._delays = merged
        self._sleep = sleep_func or cancellable_sleep

    def delay_for(self, complexity: OperationComplexity) -> float:
        """Seconds to pause after an operation of ``complexity``."""
        return self._delays[complexity]

    async def intelligent_delay(
        self,
        complexity: OperationComplexity,
        token: Optional[CancellationToken] = None,
    ) -> float:
        """Pause for ``delay_for(complexity)`` seconds.

        Returns immediately when the delay is zero.

        Returns:
            The delay that was applied, in seconds.

        Raises:
            OperationCancelledError: If ``token`` is cancelled mid-pause.
        """
        delay = self.delay_for(complexity)
        if delay <= 0:
            return 0.0
        logger.debug("Pausing %.2fs after %s-complexity operation", delay, complexity.value)
        await self._sleep(delay, token, phase="batch_delay")
        return delay
