"""Initialization, probes, rechecks, credentials and listeners."""

import pytest

from ghostwrite.connectivity import StaticConnectivity
from ghostwrite.core import (
    CapabilityUnavailableError,
    Mode,
    ServiceStatus,
    Tier,
    TransientNetworkError,
    UnauthenticatedError,
    ValidationError,
)
from ghostwrite.credentials import MemoryCredentialStore
from ghostwrite.manager import CapabilityManager
from ghostwrite.telemetry import SimpleReporter, TelemetryContext
from tests.helpers import (
    FakeGrammarEngine,
    FakeTransform,
    RecordingIndicator,
    RecordingNotifier,
    StaticGrammarLoader,
    make_finding,
    make_manager,
)

# --- initialize() ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_without_credential_no_remote_call_and_basic_only():
    transform = FakeTransform(credits=5)
    manager = make_manager(transform=transform, credential=None)

    state = await manager.initialize()

    assert transform.status_calls == []
    assert state.mode is Mode.BASIC_ONLY
    assert state.remote.status is ServiceStatus.OFFLINE
    assert state.remote.tier is Tier.FREE
    assert state.remote.error == "No API key configured"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_without_credential_and_grammar_failure_is_error_mode():
    transform = FakeTransform(credits=5)
    manager = make_manager(
        transform=transform,
        loader=StaticGrammarLoader(fail=True),
        credential=None,
    )

    state = await manager.initialize()

    assert transform.status_calls == []
    assert state.mode is Mode.ERROR
    assert "module missing" in (state.grammar.error or "")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connected_with_zero_credits_is_basic_only():
    manager = make_manager(transform=FakeTransform(credits=0))

    state = await manager.initialize()

    assert state.remote.connected is True
    assert state.mode is Mode.BASIC_ONLY


@pytest.mark.unit
@pytest.mark.asyncio
async def test_probe_failures_are_isolated():
    manager = make_manager(
        transform=FakeTransform(credits=8),
        loader=StaticGrammarLoader(fail=True),
    )

    state = await manager.initialize()

    assert state.grammar.loaded is False
    assert state.remote.connected is True
    assert state.remote.credits == 8
    assert state.mode is Mode.ERROR


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initialize_notifies_exactly_once_and_sets_badge():
    indicator = RecordingIndicator()
    received = []
    manager = make_manager(transform=FakeTransform(credits=8), indicator=indicator)
    manager.subscribe(received.append)

    await manager.initialize()

    assert len(received) == 1
    assert received[0].mode is Mode.AI_READY
    assert indicator.badges[-1].text == "✨"
    assert "8 credits" in indicator.badges[-1].title


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initialize_rederives_state_each_call():
    transform = FakeTransform(credits=5)
    manager = make_manager(transform=transform)
    await manager.initialize()

    transform.credits = 0
    state = await manager.initialize()

    assert state.mode is Mode.BASIC_ONLY
    assert len(transform.status_calls) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_credential_load_failure_is_treated_as_absent():
    class BrokenStore(MemoryCredentialStore):
        async def load(self):
            raise OSError("disk unavailable")

    transform = FakeTransform()
    manager = CapabilityManager(
        transform=transform,
        grammar_loader=StaticGrammarLoader(),
        credentials=BrokenStore(),
    )

    state = await manager.initialize()

    assert transform.status_calls == []
    assert state.mode is Mode.BASIC_ONLY


# --- check_remote_service() ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remote_failure_while_online_is_error():
    manager = make_manager(
        transform=FakeTransform(status_error=UnauthenticatedError("Invalid API key")),
        connectivity=StaticConnectivity(online=True),
    )
    await manager.initialize()

    remote = await manager.check_remote_service()

    assert remote.status is ServiceStatus.ERROR
    assert remote.error == "Invalid API key"
    assert remote.connected is False
    assert remote.check_latency_ms is not None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remote_failure_while_offline_is_offline():
    manager = make_manager(
        transform=FakeTransform(status_error=TransientNetworkError()),
        connectivity=StaticConnectivity(online=False),
    )
    await manager.initialize()

    remote = await manager.check_remote_service()

    assert remote.status is ServiceStatus.OFFLINE
    assert remote.error == "No internet connection"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_probe_timings_are_recorded():
    reporter = SimpleReporter()
    manager = make_manager(telemetry=TelemetryContext(reporter, enabled=True))

    await manager.initialize()

    assert "capability.remote_probe" in reporter.timings
    assert "capability.grammar_probe" in reporter.timings


# --- recheck_remote_service() ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_repeated_recheck_notifies_once_per_call_without_alerts():
    notifier = RecordingNotifier()
    received = []
    manager = make_manager(transform=FakeTransform(credits=5), notifier=notifier)
    await manager.initialize()
    manager.subscribe(received.append)

    await manager.recheck_remote_service()
    await manager.recheck_remote_service()

    assert len(received) == 2
    assert notifier.notifications == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recheck_alerts_once_when_credits_arrive():
    notifier = RecordingNotifier()
    transform = FakeTransform(credits=0)
    manager = make_manager(transform=transform, notifier=notifier)
    await manager.initialize()
    assert manager.mode is Mode.BASIC_ONLY

    transform.credits = 50
    await manager.recheck_remote_service()
    await manager.recheck_remote_service()

    assert manager.mode is Mode.AI_READY
    assert len(notifier.notifications) == 1
    title, message, _ = notifier.notifications[0]
    assert title == "AI Features Available!"
    assert "50 credits" in message


@pytest.mark.unit
@pytest.mark.asyncio
async def test_losing_service_moves_to_basic_only_silently():
    notifier = RecordingNotifier()
    transform = FakeTransform(credits=5)
    manager = make_manager(transform=transform, notifier=notifier)
    await manager.initialize()

    transform.status_error = TransientNetworkError()
    await manager.recheck_remote_service()

    assert manager.mode is Mode.BASIC_ONLY
    assert notifier.notifications == []


# --- grammar ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_grammar_only_requires_loaded_engine():
    manager = make_manager(loader=StaticGrammarLoader(fail=True))
    await manager.initialize()

    with pytest.raises(CapabilityUnavailableError):
        await manager.check_grammar_only("Some text.")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_grammar_only_absorbs_engine_errors():
    engine = FakeGrammarEngine(error=RuntimeError("boom"))
    manager = make_manager(loader=StaticGrammarLoader(engine))
    await manager.initialize()

    assert await manager.check_grammar_only("Some text.") == ()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_grammar_only_does_not_touch_remote_or_credits():
    engine = FakeGrammarEngine([make_finding(0, 4)])
    transform = FakeTransform(credits=0)
    manager = make_manager(transform=transform, loader=StaticGrammarLoader(engine))
    await manager.initialize()

    findings = await manager.check_grammar_only("Some text.")

    assert len(findings) == 1
    assert transform.transform_calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_grammar_engine_loading_later_leaves_error_mode():
    loader = StaticGrammarLoader(fail=True)
    manager = make_manager(transform=FakeTransform(credits=3), loader=loader)
    await manager.initialize()
    assert manager.mode is Mode.ERROR

    loader.fail = False
    await manager.reload_grammar_engine()

    assert manager.mode is Mode.AI_READY


# --- save_credential() ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_save_credential_persists_and_rechecks():
    store = MemoryCredentialStore()
    transform = FakeTransform(credits=100)
    received = []
    manager = CapabilityManager(
        transform=transform,
        grammar_loader=StaticGrammarLoader(),
        credentials=store,
    )
    await manager.initialize()
    manager.subscribe(received.append)

    state = await manager.save_credential("  gw_new_key  ")

    assert await store.load() == "gw_new_key"
    assert transform.status_calls == ["gw_new_key"]
    assert state.mode is Mode.AI_READY
    assert len(received) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_save_credential_rejects_blank_key():
    manager = make_manager()

    with pytest.raises(ValidationError):
        await manager.save_credential("   ")


# --- listeners ---


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicate_subscription_is_idempotent():
    received = []
    manager = make_manager()
    manager.subscribe(received.append)
    manager.subscribe(received.append)

    await manager.initialize()

    assert len(received) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    received = []

    def broken(_status):
        raise RuntimeError("listener bug")

    manager = make_manager()
    manager.subscribe(broken)
    manager.subscribe(received.append)

    await manager.initialize()

    assert len(received) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unsubscribed_listener_is_not_called():
    received = []
    manager = make_manager()
    manager.subscribe(received.append)
    manager.unsubscribe(received.append)
    manager.unsubscribe(received.append)

    await manager.initialize()

    assert received == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_indicator_failure_is_ignored():
    class BrokenIndicator:
        async def set_badge(self, badge):
            raise RuntimeError("no display")

    manager = make_manager(indicator=BrokenIndicator())

    state = await manager.initialize()

    assert state.mode is Mode.AI_READY
