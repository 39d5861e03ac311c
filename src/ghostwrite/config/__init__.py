"""Layered configuration for GhostWrite.

Values are resolved once from programmatic overrides, ``GHOSTWRITE_*``
environment variables, ``[tool.ghostwrite]`` in ``pyproject.toml``,
``~/.config/ghostwrite.toml`` and schema defaults, then frozen:

- ResolvedConfig: merged values plus the origin of each field
- FrozenConfig: immutable values consumed by the runtime
- SourceMap: field name to origin mapping used for audits
"""

from ghostwrite.core.exceptions import ConfigFileError

from .api import (
    check_environment,
    get_effective_profile,
    list_available_profiles,
    resolve_config,
    validate_profile,
)
from .audit import SourceTracker, generate_redacted_audit, generate_telemetry_summary
from .file_loader import FileConfigLoader
from .resolver import ConfigResolver
from .schema import SECRET_FIELDS, GhostwriteSettings
from .scope import config_override, config_scope, get_ambient_resolved_config
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    # Main API
    "resolve_config",
    "list_available_profiles",
    "get_effective_profile",
    "validate_profile",
    "check_environment",
    # Scoping
    "config_scope",
    "config_override",
    "get_ambient_resolved_config",
    # Core types
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    # Advanced usage
    "GhostwriteSettings",
    "SECRET_FIELDS",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
    "SourceTracker",
    "generate_redacted_audit",
    "generate_telemetry_summary",
]
