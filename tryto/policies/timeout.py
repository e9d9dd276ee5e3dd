from __future__ import annotations

import asyncio
import inspect
import weakref
from typing import Any, Callable, Dict, Set

from ..errors import OperationTimeout
from .base import Policy

# strong references to abandoned tasks, per event loop, until they settle
_DETACHED: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, Set[asyncio.Future[Any]]]" = (
    weakref.WeakKeyDictionary()
)


class _TimerElapsed(OperationTimeout):
    """Raised by :class:`TimeoutPolicy` itself when its timer wins the race."""


def timer_elapsed(exc: BaseException) -> bool:
    """Whether ``exc`` came from a timeout timer rather than the operation."""
    return isinstance(exc, _TimerElapsed)


def detached_tasks(loop: asyncio.AbstractEventLoop) -> Set["asyncio.Future[Any]"]:
    return _DETACHED.get(loop, set())


def _settle(task: "asyncio.Future[Any]") -> None:
    pending = _DETACHED.get(task.get_loop())
    if pending is not None:
        pending.discard(task)
    if not task.cancelled():
        # retrieve so the loop never reports it as unhandled
        task.exception()


def detach(task: "asyncio.Future[Any]") -> None:
    """Stop waiting for ``task`` without cancelling it; its outcome is discarded."""
    _DETACHED.setdefault(task.get_loop(), set()).add(task)
    task.add_done_callback(_settle)


async def _invoke(call: Callable[[], Any]) -> Any:
    result = call()
    if inspect.isawaitable(result):
        result = await result
    return result


class TimeoutPolicy(Policy):
    """Race an attempt against a timer of ``seconds``.

    The losing attempt is detached, never awaited again, and its eventual
    result is ignored.
    """

    name = "timeout"

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def to_config(self) -> Dict[str, Any]:
        return {"seconds": self.seconds}

    async def execute_async(self, call: Callable[[], Any]) -> Any:
        task = asyncio.ensure_future(_invoke(call))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task in done:
            return task.result()
        detach(task)
        raise _TimerElapsed(self.seconds)
