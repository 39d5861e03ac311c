"""Context-local configuration overrides.

A scope only affects :func:`~ghostwrite.config.resolve_config` calls made
inside it. Objects built from a :class:`FrozenConfig` before or during the
scope keep the values they were given.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from typing import Any

from .types import ResolvedConfig

_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = contextvars.ContextVar(
    "ghostwrite_resolved_config"
)


def get_ambient_resolved_config() -> ResolvedConfig | None:
    """Return the configuration set by the innermost scope, if any."""
    return _ambient_resolved_config.get(None)


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Use ``config`` for every resolution inside the block.

    Example:
        base = resolve_config()
        with config_scope(base.with_overrides(transform_mode="local")):
            runtime = GhostwriteRuntime.from_config(resolve_config().to_frozen())
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)


@contextmanager
def config_override(**overrides: Any) -> Generator[None]:
    """Shortcut for a scope that changes only a few fields."""
    base = get_ambient_resolved_config()
    if base is None:
        from .api import resolve_config

        base = resolve_config()
    with config_scope(base.with_overrides(**overrides)):
        yield
