"""Execution engines driving the call plan.

The plan (see :mod:`tryto.core`) is a generator that yields requests and
receives their outcomes.  An engine decides *how* a request is carried out:
:class:`SyncEngine` runs everything on the calling thread and has no way to
wait, :class:`AsyncEngine` awaits attempts, races them against timers and
sleeps between retries.
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generator, Optional, Sequence, Union

from .fallback import Operation
from .policies import Policy, timer_elapsed


@dataclass(frozen=True)
class Attempt:
    """Request to run ``operation`` once, wrapped by ``policies``."""

    operation: Operation
    policies: Sequence[Policy] = ()


@dataclass(frozen=True)
class Delay:
    """Request to wait ``seconds`` before the next attempt."""

    seconds: float


@dataclass(frozen=True)
class Outcome:
    """Settled attempt: either ``value`` or ``error``."""

    value: Any = None
    error: Optional[Exception] = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


Request = Union[Attempt, Delay]
Plan = Generator[Request, Optional[Outcome], Any]


class ExecutionEngine(ABC):
    """Interface for carrying out a call plan."""

    suspends = False

    @abstractmethod
    def run(self, plan: Plan) -> Any:
        """Drive ``plan`` to completion and return its result."""


class SyncEngine(ExecutionEngine):
    """Run a plan on the calling thread; delays are skipped."""

    suspends = False

    def attempt(self, request: Attempt) -> Outcome:
        try:
            value = request.operation()
        except Exception as exc:
            return Outcome(error=exc)
        if inspect.isawaitable(value):
            if inspect.iscoroutine(value):
                value.close()
            raise TypeError(
                f"{request.operation!r} returned an awaitable; await it with tryto() instead of tryto_sync()"
            )
        return Outcome(value=value)

    def run(self, plan: Plan) -> Any:
        try:
            request = next(plan)
            while True:
                if isinstance(request, Delay):
                    # no way to wait without a scheduler
                    request = plan.send(None)
                else:
                    request = plan.send(self.attempt(request))
        except StopIteration as stop:
            return stop.value


class AsyncEngine(ExecutionEngine):
    """Run a plan inside the running event loop."""

    suspends = True

    def __init__(self, sleep: Callable[[float], Any] = asyncio.sleep) -> None:
        self.sleep = sleep

    async def attempt(self, request: Attempt) -> Outcome:
        async def call() -> Any:
            result = request.operation()
            if inspect.isawaitable(result):
                result = await result
            return result

        wrapped: Callable[[], Any] = call
        for pol in reversed(request.policies):
            prev = wrapped

            async def wrapper(prev=prev, pol=pol) -> Any:
                return await pol.execute_async(prev)

            wrapped = wrapper

        try:
            return Outcome(value=await wrapped())
        except Exception as exc:
            return Outcome(error=exc, timed_out=timer_elapsed(exc))

    async def run(self, plan: Plan) -> Any:  # type: ignore[override]
        try:
            request = next(plan)
            while True:
                if isinstance(request, Delay):
                    if request.seconds > 0:
                        await self.sleep(request.seconds)
                    request = plan.send(None)
                else:
                    request = plan.send(await self.attempt(request))
        except StopIteration as stop:
            return stop.value


__all__ = ["AsyncEngine", "Attempt", "Delay", "ExecutionEngine", "Outcome", "Plan", "SyncEngine"]
