from __future__ import annotations

import math
import random
from typing import Any, Callable, Dict, Optional

from .base import FailureAction, FailureDecision, Policy


class RetryPolicy(Policy):
    """Retry a failed attempt up to ``retries`` extra times.

    The wait before each retry is ``delay`` plus a random share of
    ``jitter``, floored to whole milliseconds.
    """

    name = "retry"

    def __init__(
        self,
        retries: int = 2,
        delay: float = 0.0,
        jitter: float = 0.0,
        rand: Optional[Callable[[], float]] = None,
    ) -> None:
        self.retries = retries
        self.delay = delay
        self.jitter = jitter
        self.rand = rand

    def to_config(self) -> Dict[str, Any]:
        return {"retries": self.retries, "delay": self.delay, "jitter": self.jitter}

    def wait_time(self) -> float:
        rand = self.rand or random.random
        spread = math.floor(rand() * self.jitter * 1000) / 1000
        return max(self.delay, spread + self.delay)

    def on_failure(self, exc: Exception, failures: int) -> FailureDecision:
        retries_left = self.retries - failures
        if retries_left >= 0:
            attempt = self.retries - retries_left
            return FailureDecision(FailureAction.RETRY, self.wait_time(), attempt)
        return FailureDecision(FailureAction.FAIL)
