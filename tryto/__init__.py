"""Retry, timeout and fallback for any fallible call."""

from .core import plan_call, tryto, tryto_sync
from .decorators import protect
from .engines import AsyncEngine, ExecutionEngine, SyncEngine
from .errors import ConfigError, FallbackChainError, OperationTimeout
from .fallback import FallbackChain, NoFallback, SingleFallback, as_fallback
from .options import Hook, Options, load_options
from .policies import RetryPolicy, TimeoutPolicy

__all__ = [
    "AsyncEngine",
    "ConfigError",
    "ExecutionEngine",
    "FallbackChain",
    "FallbackChainError",
    "Hook",
    "NoFallback",
    "OperationTimeout",
    "Options",
    "RetryPolicy",
    "SingleFallback",
    "SyncEngine",
    "TimeoutPolicy",
    "as_fallback",
    "load_options",
    "plan_call",
    "protect",
    "tryto",
    "tryto_sync",
]
