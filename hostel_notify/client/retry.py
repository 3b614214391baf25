"""Exponential backoff used by the cache fetch path and the realtime listener."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait between attempts."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Return the wait after failed ``attempt`` (1-based), capped at ``max_delay``."""

        delay = self.base_delay * self.backoff_multiplier ** max(attempt - 1, 0)
        return min(delay, self.max_delay)

    def call(
        self,
        func: Callable[[], T],
        *,
        retry_on: tuple[type[BaseException], ...],
        sleep: Callable[[float], None] = time.sleep,
    ) -> T:
        """Run ``func`` until it succeeds or ``max_attempts`` is exhausted."""

        for attempt in range(1, self.max_attempts + 1):
            try:
                return func()
            except retry_on as exc:
                if attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "Attempt %s/%s failed (%s); retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                sleep(delay)
        raise RuntimeError("RetryPolicy requires max_attempts >= 1")


__all__ = ["RetryPolicy"]
