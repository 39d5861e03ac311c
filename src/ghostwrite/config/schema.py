"""Configuration schema and validation using Pydantic.

The settings model validates and coerces values gathered from every source
(environment, files, programmatic) and supplies the defaults.
"""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

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

SECRET_FIELDS = frozenset({"gemini_api_key", "openai_api_key"})


class GhostwriteSettings(BaseSettings):
    """Pydantic settings schema for GhostWrite.

    Reads ``GHOSTWRITE_*`` environment variables when instantiated directly;
    the resolver passes merged values explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="GHOSTWRITE_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Remote service ---

    api_endpoint: str = Field(
        default=DEFAULT_API_ENDPOINT,
        description="Base URL of the GhostWrite service",
        min_length=1,
    )
    request_timeout_seconds: float = Field(default=NETWORK_TIMEOUT, gt=0)
    recheck_interval_seconds: int = Field(
        default=RECHECK_INTERVAL,
        description="Seconds between remote status rechecks",
        ge=1,
    )
    low_credit_threshold: int = Field(default=LOW_CREDIT_THRESHOLD, ge=0)
    credential_path: str = Field(
        default=DEFAULT_CREDENTIAL_FILE,
        description="File holding the saved API key",
        min_length=1,
    )
    transform_mode: Literal["remote", "local"] = Field(
        default="remote",
        description="'remote' uses the metered service, 'local' calls providers directly",
    )

    # --- Providers (local mode and service side) ---

    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL, min_length=1)
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    openai_model: str = Field(default=DEFAULT_OPENAI_MODEL, min_length=1)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, ge=1)

    # --- Grammar engine ---

    grammar_module: str | None = Field(
        default=DEFAULT_GRAMMAR_MODULE,
        description="Engine factory as 'package.module:factory'",
    )
    grammar_plugin_path: str | None = Field(
        default=None,
        description="Plugin file exposing create_engine(), used if the module fails",
    )

    # --- Surfaces ---

    upgrade_url: str = Field(default=UPGRADE_URL, min_length=1)
    connectivity_host: str = Field(default=CONNECTIVITY_HOST, min_length=1)
    connectivity_port: int = Field(default=CONNECTIVITY_PORT, ge=1, le=65535)
    telemetry_enabled: bool = False

    @field_validator("transform_mode", mode="before")
    @classmethod
    def parse_transform_mode(cls, v: Any) -> Any:
        """Accept the mode case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("gemini_api_key", "openai_api_key", "grammar_plugin_path", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Return schema defaults without reading the environment."""
        return {
            name: field.get_default(call_default_factory=True)
            for name, field in cls.model_fields.items()
        }

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
