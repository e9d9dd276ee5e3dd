# -*- coding: utf-8 -*-
"""The call plan shared by the blocking and the async entry points.

:func:`plan_call` is a generator describing one protected call: it yields
:class:`~tryto.engines.Attempt` and :class:`~tryto.engines.Delay` requests
and is sent back each attempt's :class:`~tryto.engines.Outcome`.  Engines
carry the requests out, so retry counting, fallback resolution and hook
ordering live here exactly once.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, TypeVar, Union

from .engines import AsyncEngine, Attempt, Delay, Plan, SyncEngine
from .errors import FallbackChainError
from .fallback import FallbackChain, NoFallback, Operation, SingleFallback
from .options import Hook, Options, resolve_options
from .policies import FailureAction
from .utils.logging import get_logger

logger = get_logger()

T = TypeVar("T")

ERROR_PREFIX = "Error occurred"
FALLBACK_ERROR_PREFIX = "Fallback error occurred"


def _report(on_error: Hook, error: Any, prefix: str) -> None:
    if on_error:
        on_error(error)
    else:
        logger.error(f"{prefix}: {error}")


def plan_call(
    operation: Operation,
    options: Options,
    suspends: bool,
    rand: Optional[Callable[[], float]] = None,
) -> Plan:
    """Describe one protected call of ``operation`` under ``options``."""
    retry_policy = options.retry_policy(rand)
    policies = options.call_policies(suspends)
    failures = 0

    while True:
        outcome = yield Attempt(operation, policies)
        if outcome.ok:
            logger.trace(f"Attempt {failures + 1} succeeded")
            options.on_success(outcome.value)
            return outcome.value

        error = outcome.error
        if outcome.timed_out:
            logger.trace(f"Attempt {failures + 1} timed out after {options.timeout_after}s")
            options.on_timeout()

        failures += 1
        decision = retry_policy.on_failure(error, failures) if retry_policy else None
        if decision is not None and decision.action == FailureAction.RETRY:
            logger.trace(f"Retry {decision.attempt}/{options.retries} in {decision.delay}s after {error!r}")
            options.on_retry(decision.attempt)
            yield Delay(decision.delay)
            continue

        _report(options.on_error, error, ERROR_PREFIX)
        break

    return (yield from _resolve_fallback(options))


def _resolve_fallback(options: Options) -> Plan:
    fallback = options.fallback

    if isinstance(fallback, NoFallback):
        return None

    if isinstance(fallback, SingleFallback):
        logger.trace("Trying fallback")
        outcome = yield Attempt(fallback.operation)
        if outcome.ok:
            options.on_success(outcome.value)
            return outcome.value
        _report(options.on_error, outcome.error, FALLBACK_ERROR_PREFIX)
        return None

    assert isinstance(fallback, FallbackChain)
    errors: List[BaseException] = []
    for index, op in enumerate(fallback.operations, start=1):
        logger.trace(f"Trying fallback {index}/{len(fallback.operations)}")
        outcome = yield Attempt(op)
        if outcome.ok:
            options.on_success(outcome.value)
            return outcome.value
        errors.append(outcome.error)

    if options.on_error:
        options.on_error(errors)
    else:
        logger.error(f"{FALLBACK_ERROR_PREFIX}: {FallbackChainError(errors)}")
    return None


async def tryto(
    operation: Operation,
    options: Union[Options, Mapping[str, Any], None] = None,
    *,
    engine: Optional[AsyncEngine] = None,
    **overrides: Any,
) -> Any:
    """Await ``operation`` under retry, timeout and fallback policies.

    ``options`` is an :class:`Options` instance or a mapping of its fields;
    keyword ``overrides`` are applied on top.  Returns the first successful
    result, or ``None`` once every attempt and fallback has failed.  Failures
    are reported through ``on_error`` (or the log) and never raised.

    Example::

        data = await tryto(fetch, retry=True, retries=3, retry_delay=0.5,
                           fallback=[read_cache, lambda: {}])
    """
    opts = resolve_options(options, **overrides)
    engine = engine or AsyncEngine()
    return await engine.run(plan_call(operation, opts, engine.suspends))


def tryto_sync(
    operation: Callable[[], T],
    options: Union[Options, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> Optional[T]:
    """Blocking variant of :func:`tryto`.

    Retries run back-to-back: ``retry_delay``, ``jitter`` and ``timeout``
    have no effect here.
    """
    opts = resolve_options(options, **overrides)
    engine = SyncEngine()
    return engine.run(plan_call(operation, opts, engine.suspends))


tryto.sync = tryto_sync  # type: ignore[attr-defined]

__all__ = ["ERROR_PREFIX", "FALLBACK_ERROR_PREFIX", "plan_call", "tryto", "tryto_sync"]
