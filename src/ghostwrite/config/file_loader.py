"""TOML configuration files with profile support.

Two files are read: ``[tool.ghostwrite]`` in the nearest ``pyproject.toml``
and the home file ``~/.config/ghostwrite.toml``. Either may define named
profiles (``[tool.ghostwrite.profiles.<name>]`` / ``[profiles.<name>]``).
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from ghostwrite.core.exceptions import ConfigFileError

HOME_CONFIG_NAME = "ghostwrite.toml"


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open(mode="rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e


def _select(section: dict[str, Any], path: Path, profile: str | None) -> dict[str, Any]:
    """Return the base section, or the named profile when one is given."""
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            raise ConfigFileError(
                path,
                f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
            )
        return dict(profiles[profile])
    config = dict(section)
    config.pop("profiles", None)
    return config


class FileConfigLoader:
    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.ghostwrite]`` from the nearest ``pyproject.toml``.

        Returns an empty dict when there is no file or no section.

        Raises:
            ConfigFileError: The file is malformed or the profile is missing.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}
        section = _read_toml(pyproject_path).get("tool", {}).get("ghostwrite", {})
        if not section:
            return {}
        return _select(section, pyproject_path, profile)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load the home configuration file, if present.

        Raises:
            ConfigFileError: The file is malformed or the profile is missing.
        """
        path = self._get_home_config_path()
        if not path.exists():
            return {}
        return _select(_read_toml(path), path, profile)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        profiles: dict[str, list[str]] = {"project": [], "home": []}

        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path:
            try:
                data = _read_toml(pyproject_path)
                section = data.get("tool", {}).get("ghostwrite", {})
                profiles["project"] = list(section.get("profiles", {}))
            except ConfigFileError:
                pass

        home_path = self._get_home_config_path()
        if home_path.exists():
            try:
                profiles["home"] = list(_read_toml(home_path).get("profiles", {}))
            except ConfigFileError:
                pass

        return profiles

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        current = Path(start_dir or Path.cwd()).resolve()
        while current != current.parent:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            current = current.parent
        return None

    def _get_home_config_path(self) -> Path:
        """``$GHOSTWRITE_CONFIG_HOME/ghostwrite.toml`` or ``~/.config/ghostwrite.toml``."""
        base = os.getenv("GHOSTWRITE_CONFIG_HOME")
        directory = Path(base).expanduser() if base else Path.home() / ".config"
        return directory / HOME_CONFIG_NAME
