"""OpenAI chat-completions text provider (fallback)."""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from ghostwrite.constants import DEFAULT_OPENAI_MODEL
from ghostwrite.core.exceptions import ProviderError
from ghostwrite.prompts import get_system_prompt

from .base import GenerationOptions

log = logging.getLogger(__name__)


class OpenAIProvider:
    """Calls an OpenAI-compatible chat completions endpoint."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_OPENAI_MODEL,
        options: GenerationOptions | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self.options = options or GenerationOptions()
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key)
        self._client = client

    async def process(self, text: str, action: str) -> str:
        if self._client is None:
            raise ProviderError("OPENAI_API_KEY is not configured", provider=self.name)

        system_prompt = get_system_prompt(
            action, tone=self.options.tone, context=self.options.context
        )
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": text},
                ],
                temperature=self.options.temperature,
                max_tokens=self.options.max_output_tokens,
                top_p=1.0,
            )
        except Exception as e:
            log.debug("OpenAI request failed: %s", e, exc_info=True)
            raise ProviderError(f"OpenAI API error: {e}", provider=self.name) from e

        content = completion.choices[0].message.content if completion.choices else None
        result = (content or "").strip()
        if not result:
            raise ProviderError("OpenAI API returned empty response", provider=self.name)
        return result

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
