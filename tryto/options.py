"""Call options and project-level defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .fallback import NoFallback, as_fallback
from .policies import Policy, RetryPolicy, TimeoutPolicy
from .utils.logging import get_logger

logger = get_logger()

# fields that may be set from ``[tool.tryto]``; hooks and fallbacks are code
PROJECT_FIELDS = ("retry", "retries", "retry_delay", "jitter", "timeout", "timeout_after")


class Hook:
    """Zero or one registered handler, invoked only when present."""

    __slots__ = ("handler",)

    def __init__(self, handler: Optional[Callable[..., Any]] = None) -> None:
        if handler is not None and not callable(handler):
            raise TypeError(f"hook handler must be callable, got {handler!r}")
        self.handler = handler

    def __bool__(self) -> bool:
        return self.handler is not None

    def __call__(self, *args: Any) -> None:
        if self.handler is not None:
            self.handler(*args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hook):
            return NotImplemented
        return self.handler == other.handler

    def __hash__(self) -> int:
        return hash(self.handler)

    def __repr__(self) -> str:
        return f"Hook({self.handler!r})"


class Options(BaseModel):
    """Retry, timeout and fallback settings for one call.

    Durations are in seconds.  Instances are frozen, so whatever the engine
    received at call entry is what it runs with.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    retry: bool = False
    retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=0.0, ge=0.0)
    jitter: float = Field(default=0.0, ge=0.0)
    fallback: Any = Field(default_factory=NoFallback)
    timeout: bool = False
    timeout_after: float = Field(default=10.0, gt=0.0)
    on_timeout: Hook = Field(default_factory=Hook)
    on_retry: Hook = Field(default_factory=Hook)
    on_success: Hook = Field(default_factory=Hook)
    on_error: Hook = Field(default_factory=Hook)

    @field_validator("fallback", mode="before")
    @classmethod
    def _normalise_fallback(cls, value: Any) -> Any:
        return as_fallback(value)

    @field_validator("on_timeout", "on_retry", "on_success", "on_error", mode="before")
    @classmethod
    def _wrap_hook(cls, value: Any) -> Hook:
        if isinstance(value, Hook):
            return value
        return Hook(value)

    def retry_policy(self, rand: Optional[Callable[[], float]] = None) -> Optional[RetryPolicy]:
        if not self.retry:
            return None
        return RetryPolicy(self.retries, self.retry_delay, self.jitter, rand=rand)

    def call_policies(self, suspends: bool) -> List[Policy]:
        """Policies wrapping each primary attempt for an engine."""
        if not self.timeout:
            return []
        if not suspends:
            logger.warning("timeout is not supported by blocking calls; ignoring timeout_after")
            return []
        return [TimeoutPolicy(self.timeout_after)]

    def project_settings(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in PROJECT_FIELDS}


def resolve_options(options: Union[Options, Mapping[str, Any], None] = None, **overrides: Any) -> Options:
    """Take a snapshot of ``options`` with ``overrides`` applied on top."""
    if isinstance(options, Options):
        if not overrides:
            return options
        base: Dict[str, Any] = dict(options)
    elif options is None:
        base = {}
    elif isinstance(options, Mapping):
        base = dict(options)
    else:
        raise TypeError(f"options must be Options or a mapping, got {type(options).__name__}")
    base.update(overrides)
    return Options(**base)


def load_options(path: Union[str, Path, None] = None) -> Options:
    """Read defaults from the ``[tool.tryto]`` table of ``pyproject.toml``.

    Without ``path`` the file is looked up in the working directory, and a
    missing file or table yields default :class:`Options`.  An explicit
    ``path`` that does not exist raises :class:`ConfigError`.
    """
    pyproject_path = Path(path) if path is not None else Path.cwd() / "pyproject.toml"
    if not pyproject_path.is_file():
        if path is not None:
            raise ConfigError(f"config file not found: {pyproject_path}")
        logger.trace(f"pyproject.toml not found at {pyproject_path}")
        return Options()

    try:
        pyproject_data = toml.load(str(pyproject_path))
    except toml.TomlDecodeError as e:
        raise ConfigError(f"invalid TOML in {pyproject_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {pyproject_path}: {e}") from e

    section = pyproject_data.get("tool", {}).get("tryto")
    if section is None:
        logger.trace(f"[tool.tryto] not found in {pyproject_path}")
        return Options()

    unknown = sorted(set(section) - set(PROJECT_FIELDS))
    if unknown:
        raise ConfigError(f"unsupported [tool.tryto] keys: {', '.join(unknown)}")
    try:
        return Options(**section)
    except ValidationError as e:
        raise ConfigError(f"invalid [tool.tryto] values: {e}") from e


__all__ = ["Hook", "Options", "PROJECT_FIELDS", "load_options", "resolve_options"]
