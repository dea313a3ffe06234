"""Resilience utilities: fixed-schedule retry for eventually-consistent mutations."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


# Seconds slept after each failed attempt. The trailing 0 belongs to the
# sixth and final attempt, after which nothing is slept.
DEFAULT_SCHEDULE: tuple[float, ...] = (1, 2, 5, 8, 10, 0)


# ---------------------------------------------------------------------------
# Mutation retrier
# ---------------------------------------------------------------------------


class MutationRetrier:
    """Retry a mutating control-plane call on a fixed delay schedule.

    IAM roles are reported as created before IoT Analytics can assume them,
    so a channel or datastore created in the same run as its role fails
    with "Unable to assume role" for a few seconds. Every error is retried
    the same way: there is no classification, jitter or growth. One attempt
    is made per schedule entry and the last error is re-raised unchanged.

    Args:
        schedule: Delay in seconds after each failed attempt.
        sleep: Sleep function, injectable for tests.
        name: Label used in log messages.
    """

    def __init__(
        self,
        schedule: Iterable[float] = DEFAULT_SCHEDULE,
        sleep: Callable[[float], None] = time.sleep,
        name: str = "mutation",
    ) -> None:
        self.schedule = tuple(schedule)
        if not self.schedule:
            raise ValueError("Retry schedule must contain at least one entry")
        if any(delay < 0 for delay in self.schedule):
            raise ValueError(f"Retry delays must be non-negative, got {self.schedule}")
        self.name = name
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return len(self.schedule)

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run *func* until it succeeds or the schedule is exhausted."""
        last_exception: Optional[Exception] = None

        for attempt, delay in enumerate(self.schedule, 1):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                last_exception = e
                if attempt == self.max_attempts:
                    logger.error(
                        "%s failed after %d attempts: %s",
                        self.name, self.max_attempts, e,
                    )
                    raise

                logger.warning(
                    "%s attempt %d/%d failed (%s), retrying in %.1fs",
                    self.name, attempt, self.max_attempts, e, delay,
                )
                self._sleep(delay)

        raise last_exception  # type: ignore[misc]
