"""Failures produced by the engine itself.

Operation and fallback failures are whatever the caller's callables raise;
the classes below cover the cases the engine has to name on its own.
"""

from __future__ import annotations

from typing import List, Sequence


class OperationTimeout(TimeoutError):
    """The timeout timer elapsed before the operation settled."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(f"operation exceeded {seconds}s")


class FallbackChainError(Exception):
    """Every operation of a fallback chain failed."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors: List[BaseException] = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"all {len(self.errors)} fallbacks failed ({details})")


class ConfigError(Exception):
    """The ``[tool.tryto]`` configuration could not be read."""


__all__ = ["ConfigError", "FallbackChainError", "OperationTimeout"]
