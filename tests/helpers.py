"""Fakes and builders shared by the GhostWrite test suite."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ghostwrite.core.exceptions import CapabilityUnavailableError
from ghostwrite.core.types import Finding, Tier
from ghostwrite.credentials import MemoryCredentialStore
from ghostwrite.manager import CapabilityManager
from ghostwrite.transform import AccountSnapshot, TransformOutcome


class FakeTransform:
    """Scriptable transform capability that records every call."""

    def __init__(
        self,
        *,
        credits: int = 5,
        tier: Tier = Tier.TRIAL,
        metered: bool = True,
        requires_credential: bool = True,
        status_error: Exception | None = None,
        outcome: TransformOutcome | None = None,
        transform_error: Exception | None = None,
    ):
        self.metered = metered
        self.requires_credential = requires_credential
        self.credits = credits
        self.tier = tier
        self.status_error = status_error
        self.outcome = outcome or TransformOutcome(
            text="Here is a clearer version.",
            provider="gemini",
            credits_remaining=None,
            should_check_grammar=True,
        )
        self.transform_error = transform_error
        self.status_calls: list[str | None] = []
        self.transform_calls: list[dict[str, Any]] = []
        self.closed = False

    async def fetch_status(self, credential: str | None) -> AccountSnapshot:
        self.status_calls.append(credential)
        if self.status_error is not None:
            raise self.status_error
        return AccountSnapshot(credits=self.credits, tier=self.tier)

    async def transform(self, text, action, credential, *, idempotency_key=None):
        self.transform_calls.append(
            {
                "text": text,
                "action": action,
                "credential": credential,
                "idempotency_key": idempotency_key,
            }
        )
        if self.transform_error is not None:
            raise self.transform_error
        return self.outcome

    async def aclose(self) -> None:
        self.closed = True


class FakeGrammarEngine:
    name = "fake"

    def __init__(
        self,
        findings: Sequence[Finding] = (),
        *,
        error: Exception | None = None,
    ):
        self.findings = list(findings)
        self.error = error
        self.calls: list[str] = []

    async def lint(self, text: str) -> list[Finding]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.findings


class RawGrammarEngine:
    """Engine whose lint() returns whatever it was given, unchecked."""

    name = "raw"

    def __init__(self, result: Any):
        self.result = result

    async def lint(self, text: str) -> Any:
        return self.result


class StaticGrammarLoader:
    """Loader stand-in returning a fixed engine, or failing."""

    def __init__(self, engine: Any = None, *, fail: bool = False):
        self.engine = engine or FakeGrammarEngine()
        self.fail = fail
        self.loads = 0

    async def load(self):
        self.loads += 1
        if self.fail:
            raise CapabilityUnavailableError("Grammar engine failed to load: module missing")
        return self.engine


class RecordingIndicator:
    def __init__(self) -> None:
        self.badges: list[Any] = []

    async def set_badge(self, badge) -> None:
        self.badges.append(badge)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[tuple[str, str, int]] = []

    async def notify(self, title: str, message: str, *, priority: int = 1) -> None:
        self.notifications.append((title, message, priority))


class RecordingBroadcaster:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def broadcast(self, message) -> None:
        self.messages.append(dict(message))


class FakeProvider:
    def __init__(self, name: str, result: str | None = None, *, error: Exception | None = None):
        self.name = name
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def process(self, text: str, action: str) -> str:
        self.calls.append((text, action))
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def make_finding(start: int = 0, end: int = 4, message: str = "Repeated word") -> Finding:
    return Finding(span_start=start, span_end=end, message=message, suggestion=None)


def make_manager(
    *,
    transform: FakeTransform | None = None,
    loader: StaticGrammarLoader | None = None,
    credential: str | None = "gw_key",
    **kwargs: Any,
) -> CapabilityManager:
    """Build a manager from fakes; extra kwargs go to the constructor."""
    return CapabilityManager(
        transform=transform or FakeTransform(),
        grammar_loader=loader or StaticGrammarLoader(),
        credentials=MemoryCredentialStore(credential),
        **kwargs,
    )
