"""Configuration resolution with precedence handling.

Precedence, highest first:
Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

import pydantic

from ghostwrite.core.exceptions import ConfigFileError

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import GhostwriteSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges every configuration source into a :class:`ResolvedConfig`."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Raises:
            ValueError: Validation failed or the environment is malformed.
            ConfigFileError: The project file is malformed.
        """
        tracker = SourceTracker()
        merged: dict[str, Any] = {}

        if profile is None:
            profile = self.get_effective_profile()

        def apply(values: dict[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:
                    merged[field] = value
                    tracker.set_origin(field, origin)
                else:
                    log.debug("Ignoring unknown config field %r from %s", field, origin)

        defaults = GhostwriteSettings.defaults()
        merged.update(defaults)
        tracker.set_multiple(defaults, "default")

        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            log.warning("Skipping home configuration: %s", e)

        try:
            apply(
                self.file_loader.load_project_config(project_root=project_root, profile=profile),
                "file",
            )
        except ConfigFileError:
            if profile is None:
                raise
            log.debug("Profile %r not usable in project configuration", profile)

        try:
            apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e

        if programmatic:
            apply(programmatic, "programmatic")

        try:
            settings = GhostwriteSettings.model_validate(merged)
        except pydantic.ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(
            values=FrozenConfig(**settings.to_dict()),
            origin=tracker.get_source_map(),
        )

    def validate_profile_exists(
        self, profile: str, project_root: Path | None = None
    ) -> tuple[bool, bool]:
        available = self.file_loader.list_available_profiles(project_root)
        return profile in available["project"], profile in available["home"]

    def get_effective_profile(self) -> str | None:
        return os.getenv("GHOSTWRITE_PROFILE") or None

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        return self.file_loader.list_available_profiles(project_root)
