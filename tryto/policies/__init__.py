"""Policy interfaces and built-in implementations."""

from .base import FailureAction, FailureDecision, Policy
from .retry import RetryPolicy
from .timeout import TimeoutPolicy, detach, detached_tasks, timer_elapsed

__all__ = [
    "FailureAction",
    "FailureDecision",
    "Policy",
    "RetryPolicy",
    "TimeoutPolicy",
    "detach",
    "detached_tasks",
    "timer_elapsed",
]
