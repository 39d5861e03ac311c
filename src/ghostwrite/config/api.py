"""Public entry points for configuration resolution and profiles."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .scope import get_ambient_resolved_config
from .types import ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources.

    Inside a :func:`~ghostwrite.config.config_scope` the scoped configuration
    is the base and only ``programmatic`` overrides are applied to it.

    Args:
        programmatic: Field overrides with the highest precedence. Unknown
            fields are ignored.
        profile: Profile to read from config files; defaults to
            ``GHOSTWRITE_PROFILE``.
        use_env_file: Optional ``.env`` file to load first.
        project_root: Where to start searching for ``pyproject.toml``.

    Raises:
        ValueError: Validation failed or the environment is malformed.
        ConfigFileError: A configuration file is malformed.

    Example:
        config = resolve_config({"transform_mode": "local"})
        print(config.audit())
    """
    ambient = get_ambient_resolved_config()
    if ambient is not None:
        return ambient.with_overrides(**programmatic) if programmatic else ambient

    return _resolver.resolve(
        programmatic=programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    return _resolver.list_available_profiles(project_root)


def get_effective_profile() -> str | None:
    return _resolver.get_effective_profile()


def validate_profile(profile: str, project_root: Path | None = None) -> dict[str, bool]:
    """Report where ``profile`` is defined.

    Raises:
        ValueError: The profile exists in neither file.
    """
    in_project, in_home = _resolver.validate_profile_exists(profile, project_root)
    if not in_project and not in_home:
        available = list_available_profiles(project_root)
        raise ValueError(
            f"Profile '{profile}' not found. Available profiles: "
            f"{available['project'] + available['home']}"
        )
    return {"project": in_project, "home": in_home}


def check_environment() -> dict[str, str]:
    """Return set ``GHOSTWRITE_*`` field variables with secrets redacted."""
    return _resolver.env_loader.get_env_summary()
