"""Source tracking and redacted audit output for configuration."""

from typing import Any

from .schema import SECRET_FIELDS
from .types import ConfigOrigin, SourceMap

ENV_PREFIX = "GHOSTWRITE_"


class SourceTracker:
    """Records where each configuration field was last set during resolution."""

    def __init__(self) -> None:
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        self._origins[field] = origin

    def set_multiple(self, fields: dict[str, Any], origin: ConfigOrigin) -> None:
        for field in fields:
            self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        return dict(self._origins)


def generate_telemetry_summary(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin (e.g. ``{"env": 3, "default": 12}``)."""
    counts: dict[str, int] = {}
    for origin in source_map.values():
        counts[origin] = counts.get(origin, 0) + 1
    return counts


def generate_redacted_audit(config_dict: dict[str, Any], source_map: SourceMap) -> str:
    """Render one ``field: origin:value`` line per field, hiding secrets.

    Args:
        config_dict: Unredacted configuration values.
        source_map: Origin of each field.
    """
    lines = []
    for field, origin in source_map.items():
        value = config_dict.get(field, "<missing>")
        if field in SECRET_FIELDS:
            if value is None:
                display = f"{origin}:None"
            elif origin == "env":
                display = f"env:{ENV_PREFIX}{field.upper()}"
            else:
                display = f"{origin}:<redacted>"
        elif origin == "env":
            display = f"env:{ENV_PREFIX}{field.upper()}={value}"
        else:
            display = f"{origin}:{value}"
        lines.append(f"{field}: {display}")
    return "\n".join(lines)
