"""
Bounded-rate sequential execution for calls to rate-limited services.
"""

from typing import Callable, List, Optional, Sequence, TypeVar

from ..scraper.cancellation import CancellationToken


T = TypeVar("T")
R = TypeVar("R")


class RateLimiter:
    """Fixed delay honoured after every call, whatever its outcome."""

    def __init__(self, interval_seconds: float, cancellation: Optional[CancellationToken] = None):
        if interval_seconds < 0:
            raise ValueError("Interval must be non-negative")
        self.interval_seconds = interval_seconds
        self.cancellation = cancellation or CancellationToken()

    def pause(self) -> None:
        """Wait out the interval; cancellation interrupts the wait."""
        self.cancellation.wait(self.interval_seconds)


class SequentialRunner:
    """
    Run a task over items one at a time, in input order.

    Items accepted by `skip` produce `skipped(item)` without calling the task
    and without a rate-limit pause.
    """

    def __init__(self, rate_limiter: RateLimiter, cancellation: Optional[CancellationToken] = None):
        self.rate_limiter = rate_limiter
        self.cancellation = cancellation or rate_limiter.cancellation

    def run(
        self,
        items: Sequence[T],
        task: Callable[[T], R],
        skip: Optional[Callable[[T], bool]] = None,
        skipped: Optional[Callable[[T], R]] = None
    ) -> List[R]:
        results: List[R] = []
        for item in items:
            if skip is not None and skip(item):
                results.append(skipped(item) if skipped else None)
                continue

            self.cancellation.raise_if_cancelled()
            results.append(task(item))
            self.rate_limiter.pause()

        return results
