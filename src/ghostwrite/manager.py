"""Capability manager and two-stage pipeline orchestrator.

The manager is the only owner of :class:`~ghostwrite.core.types.CapabilityState`.
Every mutation replaces the snapshot wholesale and re-derives the mode, so the
state that listeners and callers observe is always internally consistent.

Two probes decide what the user can do:

- the grammar probe, which loads the local grammar engine, and
- the remote probe, which asks the transform capability for its balance.

Both run concurrently during :meth:`CapabilityManager.initialize` and each
one's failure is captured in its own state rather than raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import dataclasses
import logging
import time
from typing import Any
import uuid

from ghostwrite.connectivity import ConnectivityProbe, StaticConnectivity
from ghostwrite.constants import CREDITS_PER_TRANSFORM
from ghostwrite.core.exceptions import (
    CapabilityUnavailableError,
    InsufficientCreditsError,
    ValidationError,
)
from ghostwrite.core.modes import derive_mode_for
from ghostwrite.core.types import (
    CapabilityState,
    Failure,
    Finding,
    GrammarEngineState,
    Mode,
    PipelineResult,
    RemoteServiceState,
    Result,
    ServiceStatus,
    StatusProjection,
    Success,
    Tier,
    project_status,
)
from ghostwrite.credentials import CredentialStore
from ghostwrite.grammar import GrammarEngine, GrammarEngineLoader
from ghostwrite.prompts import is_valid_action
from ghostwrite.surface import Indicator, Notifier, Priority, badge_for
from ghostwrite.telemetry import TelemetryContext, TelemetryContextProtocol
from ghostwrite.transform import TransformCapability

log = logging.getLogger(__name__)

type StatusListener = Callable[[StatusProjection], Any]


async def _settle_all(*aws: Awaitable[Any]) -> list[Result[Any, BaseException]]:
    """Await every awaitable concurrently; never raise for an individual failure."""
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    settled: list[Result[Any, BaseException]] = []
    for outcome in outcomes:
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            settled.append(Failure(outcome))
        else:
            settled.append(Success(outcome))
    return settled


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class CapabilityManager:
    """Owns capability state and runs the AI-then-grammar pipeline.

    Args:
        transform: Where AI transforms run (remote metered or local free).
        grammar_loader: Produces the local grammar engine.
        credentials: Durable storage for the API key.
        connectivity: Distinguishes ``offline`` from ``error`` on failed checks.
        indicator: Receives a badge after every state change.
        notifier: Shows user-facing alerts (upgrade available, credits gone).
        telemetry: Optional telemetry context for probe and stage timings.
        clock: Wall-clock source for ``checked_at``.
    """

    def __init__(
        self,
        *,
        transform: TransformCapability,
        grammar_loader: GrammarEngineLoader,
        credentials: CredentialStore,
        connectivity: ConnectivityProbe | None = None,
        indicator: Indicator | None = None,
        notifier: Notifier | None = None,
        telemetry: TelemetryContextProtocol | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._transform = transform
        self._grammar_loader = grammar_loader
        self._credentials = credentials
        self._connectivity = connectivity or StaticConnectivity(online=True)
        self._indicator = indicator
        self._notifier = notifier
        self._tele = telemetry or TelemetryContext()
        self._clock = clock

        self._state = CapabilityState(
            remote=RemoteServiceState(metered=transform.metered)
        )
        self._credential: str | None = None
        self._engine: GrammarEngine | None = None
        # dict keys give idempotent registration with stable iteration order
        self._listeners: dict[StatusListener, None] = {}

    # --- Read-only views ---

    @property
    def state(self) -> CapabilityState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def has_credential(self) -> bool:
        return bool(self._credential)

    def status(self) -> StatusProjection:
        return project_status(self._state)

    # --- Lifecycle ---

    async def initialize(self) -> CapabilityState:
        """Load the credential, probe both capabilities and publish the result.

        Safe to call repeatedly; state is always re-derived from fresh probes.
        """
        try:
            self._credential = await self._credentials.load()
        except Exception as e:
            log.warning("Could not load stored API key: %s", e)
            self._credential = None

        grammar_result, remote_result = await _settle_all(
            self.check_grammar_engine(), self.check_remote_service()
        )

        match grammar_result:
            case Success(value=grammar):
                pass
            case Failure(error=error):
                self._engine = None
                grammar = GrammarEngineState(loaded=False, error=str(error))

        match remote_result:
            case Success(value=remote):
                pass
            case Failure(error=error):
                remote = RemoteServiceState(
                    status=ServiceStatus.ERROR,
                    error=str(error),
                    checked_at=self._clock(),
                    metered=self._transform.metered,
                )

        self._replace(grammar=grammar, remote=remote)
        log.info(
            "Capabilities initialized: mode=%s grammar=%s remote=%s credits=%d",
            self._state.mode,
            grammar.loaded,
            remote.status,
            remote.credits,
        )
        await self._publish()
        return self._state

    async def aclose(self) -> None:
        await self._transform.aclose()

    # --- Probes ---

    async def check_grammar_engine(self) -> GrammarEngineState:
        """Load the grammar engine. Failure is returned, never raised."""
        start = time.perf_counter()
        try:
            with self._tele("capability.grammar_probe"):
                engine = await self._grammar_loader.load()
        except Exception as e:
            log.warning("Grammar engine unavailable: %s", e)
            self._engine = None
            return GrammarEngineState(loaded=False, error=str(e))

        self._engine = engine
        return GrammarEngineState(loaded=True, load_latency_ms=_elapsed_ms(start))

    async def check_remote_service(self) -> RemoteServiceState:
        """Ask the transform capability for reachability and balance.

        Without a credential (when one is required) no request is made and the
        service is reported ``offline`` on the free tier. Failures are
        classified ``offline`` when the network is down and ``error`` otherwise.
        """
        metered = self._transform.metered
        if self._transform.requires_credential and not self._credential:
            return RemoteServiceState(
                connected=False,
                status=ServiceStatus.OFFLINE,
                credits=0,
                tier=Tier.FREE,
                error="No API key configured",
                checked_at=self._clock(),
                metered=metered,
            )

        start = time.perf_counter()
        try:
            with self._tele("capability.remote_probe"):
                snapshot = await self._transform.fetch_status(self._credential)
        except Exception as e:
            latency = _elapsed_ms(start)
            if await self._is_online():
                log.warning("Remote status check failed: %s", e)
                status, error = ServiceStatus.ERROR, str(e)
            else:
                log.info("Remote status check skipped: network is offline")
                status, error = ServiceStatus.OFFLINE, "No internet connection"
            return RemoteServiceState(
                connected=False,
                status=status,
                error=error,
                checked_at=self._clock(),
                check_latency_ms=latency,
                metered=metered,
            )

        return RemoteServiceState(
            connected=True,
            status=ServiceStatus.CONNECTED,
            credits=snapshot.credits,
            tier=snapshot.tier,
            checked_at=self._clock(),
            check_latency_ms=_elapsed_ms(start),
            metered=metered,
        )

    async def reload_grammar_engine(self) -> CapabilityState:
        """Re-probe the grammar engine and publish the new state."""
        grammar = await self.check_grammar_engine()
        self._replace(grammar=grammar)
        await self._publish()
        return self._state

    async def recheck_remote_service(self) -> CapabilityState:
        """Re-probe the remote service.

        Listeners are notified once per call. The user is alerted only when
        the mode moves from ``BASIC_ONLY`` to ``AI_READY``.
        """
        previous = self._state.mode
        remote = await self.check_remote_service()
        self._replace(remote=remote)
        await self._publish()

        if previous is Mode.BASIC_ONLY and self._state.mode is Mode.AI_READY:
            await self._alert(
                "AI Features Available!",
                f"You have {remote.credits} credits. AI humanization is now enabled.",
            )
        return self._state

    # --- Credential ---

    async def save_credential(self, credential: str) -> CapabilityState:
        """Persist a new API key and re-check the service with it.

        Raises:
            ValidationError: The key is empty or not a string.
        """
        if not isinstance(credential, str) or not credential.strip():
            raise ValidationError("Invalid input: apiKey is required")

        credential = credential.strip()
        await self._credentials.save(credential)
        self._credential = credential

        remote = await self.check_remote_service()
        self._replace(remote=remote)
        await self._publish()
        return self._state

    # --- Pipeline ---

    async def run_pipeline(self, text: str, action: str) -> PipelineResult:
        """Transform ``text`` with AI, then grammar-check the output.

        Raises:
            ValidationError: ``text`` is empty or ``action`` is unknown.
            InsufficientCreditsError: No credits (checked before any request)
                or the service reported the balance exhausted.
            UnauthenticatedError: The service rejected the API key.
            ServiceUnavailableError: Every provider failed, or the service
                answered with a malformed payload.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError()
        if not is_valid_action(action):
            raise ValidationError(f"Unknown action: {action}")
        if not self._state.ai_available:
            raise InsufficientCreditsError()

        idempotency_key = str(uuid.uuid4())
        try:
            with self._tele("pipeline.transform", action=action):
                outcome = await self._transform.transform(
                    text,
                    action,
                    self._credential,
                    idempotency_key=idempotency_key,
                )
        except InsufficientCreditsError:
            self._replace(remote=self._state.remote.with_credits(0))
            await self._publish()
            await self._alert(
                "Credits Depleted", "Buy more credits to continue using AI features"
            )
            raise

        remote = self._state.remote
        if outcome.credits_remaining is not None:
            credits = outcome.credits_remaining
        elif remote.metered:
            credits = max(remote.credits - CREDITS_PER_TRANSFORM, 0)
        else:
            credits = remote.credits
        self._replace(remote=remote.with_credits(credits))
        await self._publish()

        findings: tuple[Finding, ...] = ()
        if outcome.should_check_grammar and self._state.grammar.loaded:
            with self._tele("pipeline.grammar", action=action):
                findings = await self._lint(outcome.text)

        return PipelineResult(
            original_text=text,
            transformed_text=outcome.text,
            grammar_findings=findings,
            provider=outcome.provider,
            credits_remaining=self._state.remote.credits,
        )

    async def check_grammar_only(self, text: str) -> tuple[Finding, ...]:
        """Grammar-check ``text`` without any AI transform.

        Raises:
            ValidationError: ``text`` is empty or not a string.
            CapabilityUnavailableError: The grammar engine never loaded.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError()
        if not self._state.grammar.loaded or self._engine is None:
            raise CapabilityUnavailableError()
        return await self._lint(text)

    # --- Listeners ---

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners[listener] = None

    def unsubscribe(self, listener: StatusListener) -> None:
        self._listeners.pop(listener, None)

    def notify(self) -> None:
        """Call every listener with the current status projection."""
        projection = self.status()
        for listener in list(self._listeners):
            try:
                listener(projection)
            except Exception as e:
                log.error(
                    "Status listener %r failed: %s", listener, e, exc_info=True
                )

    # --- Internals ---

    def _replace(
        self,
        *,
        grammar: GrammarEngineState | None = None,
        remote: RemoteServiceState | None = None,
    ) -> None:
        state = dataclasses.replace(
            self._state,
            grammar=grammar or self._state.grammar,
            remote=remote or self._state.remote,
        )
        self._state = dataclasses.replace(state, mode=derive_mode_for(state))

    async def _publish(self) -> None:
        await self._refresh_indicator()
        self.notify()

    async def _refresh_indicator(self) -> None:
        if self._indicator is None:
            return
        badge = badge_for(self._state.mode, self._state.remote.credits)
        try:
            await self._indicator.set_badge(badge)
        except Exception as e:
            log.warning("Could not update indicator: %s", e)

    async def _alert(self, title: str, message: str, priority: Priority = 2) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.notify(title, message, priority=priority)
        except Exception as e:
            log.warning("Could not show notification %r: %s", title, e)

    async def _lint(self, text: str) -> tuple[Finding, ...]:
        """Run the grammar engine, absorbing any failure into an empty result."""
        engine = self._engine
        if engine is None:
            return ()
        try:
            findings = list(await engine.lint(text))
            if not all(isinstance(f, Finding) for f in findings):
                raise TypeError(f"{type(engine).__name__}.lint() returned non-Finding items")
        except Exception as e:
            log.warning("Grammar check failed, returning no findings: %s", e)
            return ()

        kept = tuple(f for f in findings if f.fits(text))
        if len(kept) != len(findings):
            log.debug("Dropped %d findings outside the checked text", len(findings) - len(kept))
        return kept

    async def _is_online(self) -> bool:
        try:
            return await self._connectivity.is_online()
        except Exception as e:
            log.debug("Connectivity probe failed: %s", e)
            return True
