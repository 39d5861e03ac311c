"""Configuration data types.

Configuration is resolved once into a :class:`ResolvedConfig` that remembers
where every value came from, then frozen into the :class:`FrozenConfig` that
the runtime consumes.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Literal

from ghostwrite.constants import (
    CONNECTIVITY_HOST,
    CONNECTIVITY_PORT,
    DEFAULT_API_ENDPOINT,
    DEFAULT_CREDENTIAL_FILE,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GRAMMAR_MODULE,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_TEMPERATURE,
    LOW_CREDIT_THRESHOLD,
    NETWORK_TIMEOUT,
    RECHECK_INTERVAL,
    UPGRADE_URL,
)

from .schema import SECRET_FIELDS

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]


def _redacted(name: str, value: Any) -> Any:
    if name in SECRET_FIELDS and value:
        return "[REDACTED]"
    return value


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to the runtime.

    Secrets are redacted in ``str``/``repr`` so a config can be logged.
    """

    api_endpoint: str = DEFAULT_API_ENDPOINT
    request_timeout_seconds: float = NETWORK_TIMEOUT
    recheck_interval_seconds: int = RECHECK_INTERVAL
    low_credit_threshold: int = LOW_CREDIT_THRESHOLD
    credential_path: str = DEFAULT_CREDENTIAL_FILE
    transform_mode: Literal["remote", "local"] = "remote"
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    grammar_module: str | None = DEFAULT_GRAMMAR_MODULE
    grammar_plugin_path: str | None = None
    upgrade_url: str = UPGRADE_URL
    connectivity_host: str = CONNECTIVITY_HOST
    connectivity_port: int = CONNECTIVITY_PORT
    telemetry_enabled: bool = False

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def to_dict(self, *, redact: bool = True) -> dict[str, Any]:
        values = asdict(self)
        if redact:
            return {k: _redacted(k, v) for k, v in values.items()}
        return values

    def __str__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"FrozenConfig({body})"

    def __repr__(self) -> str:
        return self.__str__()


@dataclass(frozen=True)
class ResolvedConfig:
    """Configuration after merging all sources, with per-field origins."""

    values: FrozenConfig
    origin: SourceMap

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on ResolvedConfig itself
        if name in FrozenConfig.field_names():
            return getattr(self.values, name)
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    def __str__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.values.to_dict().items())
        return f"ResolvedConfig({body}, origin={dict(self.origin)!r})"

    def __repr__(self) -> str:
        return self.__str__()

    def to_frozen(self) -> FrozenConfig:
        return self.values

    def with_overrides(self, **overrides: Any) -> "ResolvedConfig":
        """Return a copy with ``overrides`` applied and marked programmatic.

        Unknown fields are ignored.
        """
        known = {k: v for k, v in overrides.items() if k in FrozenConfig.field_names()}
        origin = dict(self.origin)
        origin.update(dict.fromkeys(known, "programmatic"))
        return ResolvedConfig(values=replace(self.values, **known), origin=origin)

    def audit(self) -> str:
        """Render a redacted report of each field's value and origin."""
        from .audit import generate_redacted_audit

        return generate_redacted_audit(self.values.to_dict(redact=False), self.origin)
