"""Execution time budget for a single workflow run."""

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class TimeBudget:
    """Tracks elapsed time against a fixed maximum duration.

    The host kills the run once ``max_duration_seconds`` have passed, so
    every wait in the workflow asks ``remaining()`` first instead of relying
    on an external timer.
    """

    started_at: float
    max_duration_seconds: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def start_now(
        cls, max_duration_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> "TimeBudget":
        return cls(started_at=clock(), max_duration_seconds=max_duration_seconds, clock=clock)

    def elapsed(self) -> float:
        return max(0.0, self.clock() - self.started_at)

    def remaining(self) -> float:
        """Seconds left before the budget runs out, never negative."""
        remaining = self.max_duration_seconds - self.elapsed()
        return remaining if remaining > 0 else 0.0
