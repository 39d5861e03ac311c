"""Text-generation providers and the fallback chain that combines them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import GenerationOptions, ProviderResult, TextProvider
from .fallback import FallbackProvider
from .gemini import GeminiProvider, estimate_cost
from .openai_chat import OpenAIProvider

if TYPE_CHECKING:
    from ghostwrite.config import FrozenConfig
    from ghostwrite.telemetry import TelemetryContextProtocol


def build_provider_chain(
    config: FrozenConfig,
    *,
    telemetry: TelemetryContextProtocol | None = None,
) -> FallbackProvider:
    """Build the default Gemini-then-OpenAI chain from configuration."""
    options = GenerationOptions(
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
    )
    return FallbackProvider(
        GeminiProvider(config.gemini_api_key, model=config.gemini_model, options=options),
        OpenAIProvider(config.openai_api_key, model=config.openai_model, options=options),
        telemetry=telemetry,
    )


__all__ = [
    "FallbackProvider",
    "GeminiProvider",
    "GenerationOptions",
    "OpenAIProvider",
    "ProviderResult",
    "TextProvider",
    "build_provider_chain",
    "estimate_cost",
]
