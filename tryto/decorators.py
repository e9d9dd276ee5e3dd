"""Decorator form of :func:`tryto.tryto`."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Mapping, TypeVar, Union

from .core import tryto, tryto_sync
from .options import Options, resolve_options

F = TypeVar("F", bound=Callable[..., Any])


def protect(
    options: Union[Options, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> Callable[[F], F]:
    """Run every call of the decorated function through the policy engine.

    Usage::

        @protect(retry=True, retries=3, fallback=lambda: [])
        async def load_items(user_id):
            return await api.items(user_id)

    Coroutine functions and objects with an ``async def __call__`` go
    through :func:`tryto`, plain callables through :func:`tryto_sync`.
    Fallbacks take no arguments.
    """
    opts = resolve_options(options, **overrides)

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(getattr(func, "__call__", None)):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await tryto(functools.partial(func, *args, **kwargs), opts)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return tryto_sync(functools.partial(func, *args, **kwargs), opts)

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["protect"]
