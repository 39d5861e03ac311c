"""Gemini text provider (primary)."""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from ghostwrite.constants import (
    DEFAULT_GEMINI_MODEL,
    GEMINI_INPUT_COST_PER_1K_CHARS,
    GEMINI_OUTPUT_COST_PER_1K_CHARS,
    GEMINI_TOP_K,
    GEMINI_TOP_P,
)
from ghostwrite.core.exceptions import ProviderError
from ghostwrite.prompts import get_system_prompt

from .base import GenerationOptions

log = logging.getLogger(__name__)


class GeminiProvider:
    """Calls Gemini through the ``google-genai`` async client."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_GEMINI_MODEL,
        options: GenerationOptions | None = None,
        client: genai.Client | None = None,
    ):
        """Create the provider.

        A missing ``api_key`` is not an error here: the provider reports it
        on first use so a fallback chain can move on to the next provider.
        """
        self.model = model
        self.options = options or GenerationOptions()
        if client is None and api_key:
            client = genai.Client(api_key=api_key)
        self._client = client

    async def process(self, text: str, action: str) -> str:
        if self._client is None:
            raise ProviderError("GEMINI_API_KEY is not configured", provider=self.name)

        system_prompt = get_system_prompt(
            action, tone=self.options.tone, context=self.options.context
        )
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self.options.temperature,
            max_output_tokens=self.options.max_output_tokens,
            top_p=GEMINI_TOP_P,
            top_k=GEMINI_TOP_K,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=text,
                config=config,
            )
        except Exception as e:
            log.debug("Gemini request failed: %s", e, exc_info=True)
            raise ProviderError(f"Gemini API error: {e}", provider=self.name) from e

        result = (response.text or "").strip()
        if not result:
            raise ProviderError("Gemini API returned empty response", provider=self.name)
        return result


def estimate_cost(text: str) -> float:
    """Estimate the USD cost of one request, assuming output as long as input."""
    thousands = len(text) / 1000
    return thousands * (GEMINI_INPUT_COST_PER_1K_CHARS + GEMINI_OUTPUT_COST_PER_1K_CHARS)
