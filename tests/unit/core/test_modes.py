"""Mode derivation and status projection."""

import pytest

from ghostwrite.core import (
    CapabilityState,
    GrammarEngineState,
    Mode,
    RemoteServiceState,
    ServiceStatus,
    derive_mode,
    derive_mode_for,
    project_status,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("grammar_loaded", "connected", "credits", "expected"),
    [
        (False, False, 0, Mode.ERROR),
        (False, False, 5, Mode.ERROR),
        (False, True, 0, Mode.ERROR),
        (False, True, 5, Mode.ERROR),
        (True, False, 0, Mode.BASIC_ONLY),
        (True, False, 5, Mode.BASIC_ONLY),
        (True, True, 0, Mode.BASIC_ONLY),
        (True, True, 5, Mode.AI_READY),
    ],
)
def test_derive_mode_matches_table(grammar_loaded, connected, credits, expected):
    assert (
        derive_mode(grammar_loaded=grammar_loaded, connected=connected, credits=credits)
        is expected
    )


def test_unmetered_service_is_ready_without_credits():
    assert derive_mode(grammar_loaded=True, connected=True, credits=0, metered=False) is (
        Mode.AI_READY
    )
    assert derive_mode(grammar_loaded=False, connected=True, credits=0, metered=False) is (
        Mode.ERROR
    )


def test_derive_mode_for_reads_full_snapshot():
    state = CapabilityState(
        grammar=GrammarEngineState(loaded=True, load_latency_ms=3),
        remote=RemoteServiceState(connected=True, status=ServiceStatus.CONNECTED, credits=1),
    )
    assert derive_mode_for(state) is Mode.AI_READY


def _state(*, connected: bool, credits: int, error: str | None = None, metered=True):
    remote = RemoteServiceState(
        connected=connected,
        status=ServiceStatus.CONNECTED if connected else ServiceStatus.OFFLINE,
        credits=credits,
        error=error,
        metered=metered,
    )
    grammar = GrammarEngineState(loaded=True, load_latency_ms=12)
    state = CapabilityState(grammar=grammar, remote=remote)
    return CapabilityState(grammar=grammar, remote=remote, mode=derive_mode_for(state))


def test_projection_offers_credit_purchase_when_depleted():
    projection = project_status(_state(connected=True, credits=0))

    assert projection.mode is Mode.BASIC_ONLY
    assert projection.humanize.enabled is False
    assert projection.upgrade_prompt is not None
    assert projection.upgrade_prompt.title == "Credits Depleted"
    assert projection.upgrade_prompt.action == "BUY_CREDITS"


def test_projection_offers_signup_when_not_connected():
    projection = project_status(
        _state(connected=False, credits=0, error="No API key configured")
    )

    assert projection.upgrade_prompt is not None
    assert projection.upgrade_prompt.action == "SIGN_UP"
    assert projection.upgrade_prompt.message == "No API key configured"


def test_projection_has_no_prompt_when_ready():
    projection = project_status(_state(connected=True, credits=42))

    assert projection.upgrade_prompt is None
    assert projection.rewrite.detail == "Ready (42 credits)"


def test_projection_serializes_camel_case_boundary_shape():
    data = project_status(_state(connected=True, credits=0)).to_dict()

    assert data["mode"] == "BASIC_ONLY"
    assert set(data["features"]) == {"grammar", "humanize", "rewrite"}
    assert data["credits"] == {"remaining": 0, "tier": "free"}
    assert data["upgradePrompt"]["action"] == "BUY_CREDITS"


def test_unmetered_projection_never_prompts_for_upgrade():
    projection = project_status(_state(connected=True, credits=0, metered=False))

    assert projection.upgrade_prompt is None
    assert projection.humanize.enabled is True
    assert projection.humanize.detail == "Ready (on-device)"
