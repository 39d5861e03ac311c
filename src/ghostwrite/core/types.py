"""Core data types shared by the capability manager and its surfaces.

State objects are immutable snapshots. The capability manager replaces them
wholesale on every mutation, so any snapshot handed to a listener or a caller
stays valid and can never be altered behind the manager's back.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum
import typing

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _is_non_negative_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


# --- Result type for settled concurrent work ---

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=BaseException)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A settled task that produced a value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A settled task that raised, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Enumerations ---


class Mode(StrEnum):
    """Overall extension mode, always derived from capability state."""

    INITIALIZING = "INITIALIZING"
    AI_READY = "AI_READY"
    BASIC_ONLY = "BASIC_ONLY"
    ERROR = "ERROR"


class ServiceStatus(StrEnum):
    CONNECTED = "connected"
    OFFLINE = "offline"
    ERROR = "error"
    UNKNOWN = "unknown"


class Tier(StrEnum):
    FREE = "free"
    TRIAL = "trial"
    PAID = "paid"


class Action(StrEnum):
    """Text transformations a provider knows how to perform."""

    HUMANIZE = "humanize"
    REWRITE = "rewrite"
    IMPROVE = "improve"


# --- Capability state ---


@dataclasses.dataclass(frozen=True, slots=True)
class GrammarEngineState:
    """Outcome of the most recent grammar engine probe."""

    loaded: bool = False
    error: str | None = None
    load_latency_ms: int | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class RemoteServiceState:
    """Reachability and credit balance of the transform service.

    ``metered`` is False for transform capabilities that do not consume
    credits (on-device generation); such a service is AI-capable whenever it
    is connected.
    """

    connected: bool = False
    status: ServiceStatus = ServiceStatus.UNKNOWN
    credits: int = 0
    tier: Tier = Tier.FREE
    error: str | None = None
    checked_at: float | None = None
    check_latency_ms: int | None = None
    metered: bool = True

    def __post_init__(self) -> None:
        _require(
            condition=_is_non_negative_int(self.credits),
            message=f"must be an int >= 0, got {self.credits!r}",
            field_name="credits",
        )

    def with_credits(self, credits: int) -> RemoteServiceState:
        return dataclasses.replace(self, credits=credits)


@dataclasses.dataclass(frozen=True, slots=True)
class CapabilityState:
    """Process-wide capability snapshot owned by the capability manager.

    ``mode`` is a cached derived value; it is recomputed by the manager after
    every mutation of ``grammar`` or ``remote`` and is never set independently.
    """

    grammar: GrammarEngineState = dataclasses.field(default_factory=GrammarEngineState)
    remote: RemoteServiceState = dataclasses.field(default_factory=RemoteServiceState)
    mode: Mode = Mode.INITIALIZING

    @property
    def ai_available(self) -> bool:
        """True when a transform request would pass the credit precondition."""
        if not self.remote.connected:
            return False
        return self.remote.credits >= 1 or not self.remote.metered


# --- Grammar findings and pipeline results ---


@dataclasses.dataclass(frozen=True, slots=True)
class Finding:
    """A single grammar or style issue.

    The span is a half-open character range into the text that was checked.
    Inside the two-stage pipeline that text is the transformed output, never
    the user's original selection.
    """

    span_start: int
    span_end: int
    message: str
    suggestion: str | None = None
    category: str = "grammar"

    def __post_init__(self) -> None:
        # Wrong types raise TypeError; out-of-range values raise ValueError
        for name in ("span_start", "span_end"):
            value = getattr(self, name)
            _require(
                condition=isinstance(value, int) and not isinstance(value, bool),
                message=f"must be an int, got {type(value).__name__}",
                field_name=name,
                exc=TypeError,
            )
        _require(
            condition=self.span_start >= 0,
            message="must be >= 0",
            field_name="span_start",
        )
        _require(
            condition=self.span_end >= self.span_start,
            message="must be >= span_start",
            field_name="span_end",
        )
        _require(
            condition=isinstance(self.message, str),
            message="must be a str",
            field_name="message",
            exc=TypeError,
        )
        _require(
            condition=self.message.strip() != "",
            message="must not be empty",
            field_name="message",
        )

    def fits(self, text: str) -> bool:
        """Return True when the span lies inside ``text``."""
        return self.span_end <= len(text)

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "span": [self.span_start, self.span_end],
            "message": self.message,
            "suggestion": self.suggestion,
            "type": self.category,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineResult:
    """Combined outcome of the AI transform and the follow-up grammar check."""

    original_text: str
    transformed_text: str
    grammar_findings: tuple[Finding, ...]
    provider: str
    credits_remaining: int
    pipeline_complete: bool = True

    def to_response(self) -> dict[str, typing.Any]:
        """Render the `HUMANIZE_TEXT` / `REWRITE_TEXT` response shape."""
        return {
            "success": True,
            "text": self.transformed_text,
            "grammarErrors": [f.to_dict() for f in self.grammar_findings],
            "provider": self.provider,
            "creditsRemaining": self.credits_remaining,
            "pipelineComplete": self.pipeline_complete,
        }


# --- Read-only status projection for surfaces ---


@dataclasses.dataclass(frozen=True, slots=True)
class FeatureStatus:
    enabled: bool
    label: str
    detail: str | None

    def to_dict(self) -> dict[str, typing.Any]:
        return {"enabled": self.enabled, "label": self.label, "detail": self.detail}


@dataclasses.dataclass(frozen=True, slots=True)
class UpgradePrompt:
    title: str
    message: str
    action: typing.Literal["BUY_CREDITS", "SIGN_UP"]

    def to_dict(self) -> dict[str, typing.Any]:
        return {"title": self.title, "message": self.message, "action": self.action}


@dataclasses.dataclass(frozen=True, slots=True)
class StatusProjection:
    """What the popup, content script and CLI are allowed to see."""

    mode: Mode
    grammar: FeatureStatus
    humanize: FeatureStatus
    rewrite: FeatureStatus
    credits_remaining: int
    tier: Tier
    upgrade_prompt: UpgradePrompt | None

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "mode": self.mode.value,
            "features": {
                "grammar": self.grammar.to_dict(),
                "humanize": self.humanize.to_dict(),
                "rewrite": self.rewrite.to_dict(),
            },
            "credits": {"remaining": self.credits_remaining, "tier": self.tier.value},
            "upgradePrompt": (
                self.upgrade_prompt.to_dict() if self.upgrade_prompt else None
            ),
        }


def project_status(state: CapabilityState) -> StatusProjection:
    """Build the surface-facing projection of a capability snapshot."""
    grammar = state.grammar
    remote = state.remote
    ai_enabled = state.ai_available

    if grammar.loaded:
        grammar_detail = f"Ready (loaded in {grammar.load_latency_ms}ms)"
    else:
        grammar_detail = f"Error: {grammar.error}"

    if remote.connected and remote.metered:
        ai_detail: str | None = f"Ready ({remote.credits} credits)"
    elif remote.connected:
        ai_detail = "Ready (on-device)"
    else:
        ai_detail = remote.error

    upgrade: UpgradePrompt | None = None
    if remote.metered and (not remote.connected or remote.credits == 0):
        if remote.credits == 0 and remote.connected:
            upgrade = UpgradePrompt(
                title="Credits Depleted",
                message="Buy more credits to continue using AI features",
                action="BUY_CREDITS",
            )
        else:
            upgrade = UpgradePrompt(
                title="Enable AI Features",
                message=remote.error or "Sign up to get 100 free credits",
                action="SIGN_UP",
            )

    return StatusProjection(
        mode=state.mode,
        grammar=FeatureStatus(grammar.loaded, "Grammar Checking", grammar_detail),
        humanize=FeatureStatus(ai_enabled, "AI Humanization", ai_detail),
        rewrite=FeatureStatus(ai_enabled, "AI Rewrite", ai_detail),
        credits_remaining=remote.credits,
        tier=remote.tier,
        upgrade_prompt=upgrade,
    )
