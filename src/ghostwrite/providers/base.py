"""Provider protocol shared by every text-generation backend."""

from __future__ import annotations

import dataclasses
from typing import Protocol, runtime_checkable

from ghostwrite.constants import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE


@runtime_checkable
class TextProvider(Protocol):
    """A remote or local service that rewrites text for a given action.

    Implementations raise :class:`~ghostwrite.core.exceptions.ProviderError`
    on any failure, including an empty completion.
    """

    name: str

    async def process(self, text: str, action: str) -> str:
        """Return ``text`` transformed according to ``action``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Sampling and prompt options passed to a provider."""

    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    tone: str | None = None
    context: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ProviderResult:
    """Transformed text tagged with the provider that produced it."""

    text: str
    provider: str
