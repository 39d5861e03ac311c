"""Primary/secondary provider chain.

The chain hides provider failures from its caller: each provider is tried in
order and the first success wins. Only when every provider has failed does the
caller see an error, and that error is always a
:class:`~ghostwrite.core.exceptions.ServiceUnavailableError`.
"""

from __future__ import annotations

import logging

from ghostwrite.core.exceptions import ServiceUnavailableError
from ghostwrite.telemetry import TelemetryContext, TelemetryContextProtocol

from .base import ProviderResult, TextProvider

log = logging.getLogger(__name__)


class FallbackProvider:
    """Tries providers in order, tagging the result with the one that served it."""

    def __init__(
        self,
        *providers: TextProvider,
        telemetry: TelemetryContextProtocol | None = None,
    ):
        if not providers:
            raise ValueError("FallbackProvider needs at least one provider")
        self._providers = providers
        self._tele = telemetry or TelemetryContext()

    @property
    def name(self) -> str:
        return self._providers[0].name

    @property
    def providers(self) -> tuple[TextProvider, ...]:
        return self._providers

    async def process_with_provider(self, text: str, action: str) -> ProviderResult:
        failures: list[str] = []
        for provider in self._providers:
            try:
                with self._tele("provider.call", provider=provider.name, action=action):
                    output = await provider.process(text, action)
            except Exception as e:
                failures.append(f"{provider.name}: {e}")
                self._tele.count("provider.failure", provider=provider.name)
                log.warning(
                    "Provider %s failed for %s, trying next provider: %s",
                    provider.name,
                    action,
                    e,
                )
                continue
            if failures:
                log.info("Request served by fallback provider %s", provider.name)
            return ProviderResult(text=output, provider=provider.name)

        log.error("All providers failed for %s: %s", action, "; ".join(failures))
        raise ServiceUnavailableError(
            details="Both primary and fallback services failed"
            if len(failures) > 1
            else failures[0]
        )

    async def process(self, text: str, action: str) -> str:
        return (await self.process_with_provider(text, action)).text

    async def aclose(self) -> None:
        for provider in self._providers:
            closer = getattr(provider, "aclose", None)
            if closer is not None:
                await closer()
