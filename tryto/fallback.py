"""Fallback variants consulted once the primary retry budget is spent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence, Tuple, Union

Operation = Callable[[], Any]


@dataclass(frozen=True)
class NoFallback:
    """Nothing to fall back to; the call yields ``None``."""


@dataclass(frozen=True)
class SingleFallback:
    """One operation tried once; its own failure is reported to ``on_error``."""

    operation: Operation


@dataclass(frozen=True)
class FallbackChain:
    """Operations tried in order until one succeeds."""

    operations: Tuple[Operation, ...]


Fallback = Union[NoFallback, SingleFallback, FallbackChain]


def as_fallback(value: Any) -> Fallback:
    """Normalise ``None``, a callable or a sequence of callables."""
    if isinstance(value, (NoFallback, SingleFallback, FallbackChain)):
        return value
    if value is None:
        return NoFallback()
    if callable(value):
        return SingleFallback(value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        ops = tuple(value)
        if not ops:
            return NoFallback()
        for op in ops:
            if not callable(op):
                raise TypeError(f"fallback entries must be callable, got {op!r}")
        return FallbackChain(ops)
    raise TypeError(f"fallback must be a callable or a sequence of callables, got {value!r}")


__all__ = ["Fallback", "FallbackChain", "NoFallback", "Operation", "SingleFallback", "as_fallback"]
