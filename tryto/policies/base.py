# -*- coding: utf-8 -*-
"""Policy interfaces for call behaviour.

These abstractions let a single call customise its execution semantics
without hardcoding the logic in the engine.  Policies either wrap an
async attempt (:py:meth:`Policy.execute_async`) or decide what happens
after it failed (:py:meth:`Policy.on_failure`).
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict


class FailureAction(str, Enum):
    """Decision returned when an attempt fails."""

    RETRY = "retry"
    FAIL = "fail"


@dataclass
class FailureDecision:
    """Outcome from :meth:`Policy.on_failure`."""

    action: FailureAction
    delay: float = 0.0
    attempt: int = 0


class Policy(abc.ABC):
    """Base class for all policies."""

    name = "policy"

    def to_config(self) -> Dict[str, Any]:
        """Return a serialisable representation."""
        return {}

    async def execute_async(self, call: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``call`` in an asynchronous context."""
        return await call()

    def on_failure(self, exc: Exception, failures: int) -> FailureDecision | None:
        return None
