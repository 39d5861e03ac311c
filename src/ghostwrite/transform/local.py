"""Unmetered transform capability running a provider chain in-process."""

from __future__ import annotations

from ghostwrite.core.types import Tier
from ghostwrite.providers import FallbackProvider, TextProvider

from .base import AccountSnapshot, TransformOutcome


class LocalTransform:
    """Runs a provider chain directly; no credential and no credits involved."""

    metered = False
    requires_credential = False

    def __init__(self, provider: FallbackProvider | TextProvider):
        self._provider = provider

    async def fetch_status(self, credential: str | None) -> AccountSnapshot:  # noqa: ARG002
        return AccountSnapshot(credits=0, tier=Tier.FREE)

    async def transform(
        self,
        text: str,
        action: str,
        credential: str | None,  # noqa: ARG002
        *,
        idempotency_key: str | None = None,  # noqa: ARG002
    ) -> TransformOutcome:
        if isinstance(self._provider, FallbackProvider):
            result = await self._provider.process_with_provider(text, action)
            output, provider = result.text, result.provider
        else:
            output = await self._provider.process(text, action)
            provider = self._provider.name
        return TransformOutcome(
            text=output,
            provider=provider,
            credits_remaining=None,
            should_check_grammar=True,
        )

    async def aclose(self) -> None:
        closer = getattr(self._provider, "aclose", None)
        if closer is not None:
            await closer()
