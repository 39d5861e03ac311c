"""Environment variable configuration loading.

Reads ``GHOSTWRITE_<FIELD>`` variables, optionally after loading a ``.env``
file, and coerces them through the settings schema.
"""

import os
from pathlib import Path
from typing import Any

import pydantic

from .audit import ENV_PREFIX
from .schema import SECRET_FIELDS, GhostwriteSettings


def _env_var(field_name: str) -> str:
    return f"{ENV_PREFIX}{field_name.upper()}"


class EnvironmentConfigLoader:
    """Loads configuration values that are explicitly set in the environment."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Return the coerced values of every ``GHOSTWRITE_*`` field variable.

        Args:
            env_file: Optional ``.env`` file loaded into the environment first.
                Existing variables are never overwritten.

        Raises:
            ValueError: A variable holds a value the schema rejects.
            FileNotFoundError: ``env_file`` does not exist.
        """
        if env_file:
            self._load_env_file(env_file)

        raw = {
            name: os.environ[_env_var(name)]
            for name in GhostwriteSettings.model_fields
            if _env_var(name) in os.environ
        }
        if not raw:
            return {}

        try:
            settings = GhostwriteSettings.model_validate({**GhostwriteSettings.defaults(), **raw})
        except pydantic.ValidationError as e:
            shown = ", ".join(
                f"{_env_var(n)}=<redacted>" if n in SECRET_FIELDS else f"{_env_var(n)}={v}"
                for n, v in raw.items()
            )
            raise ValueError(f"Invalid environment variable values: {shown}. Error: {e}") from e

        return {name: getattr(settings, name) for name in raw}

    def _load_env_file(self, env_file: str | Path) -> None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")

        try:
            lines = env_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ValueError(f"Failed to read environment file {env_path}: {e}") from e

        for line_num, line in enumerate(lines, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                raise ValueError(
                    f"Invalid format at line {line_num}: {line}. Expected KEY=VALUE format."
                )
            key, value = (part.strip() for part in line.split("=", 1))
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            os.environ.setdefault(key, value)

    def get_env_summary(self) -> dict[str, str]:
        """Return set ``GHOSTWRITE_*`` field variables with secrets redacted."""
        summary = {}
        for name in GhostwriteSettings.model_fields:
            var = _env_var(name)
            if var in os.environ:
                summary[var] = "<redacted>" if name in SECRET_FIELDS else os.environ[var]
        return summary
