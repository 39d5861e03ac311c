"""Invariants of the immutable state and result types."""

import dataclasses

import pytest

from ghostwrite.core import (
    CapabilityUnavailableError,
    ErrorKind,
    Finding,
    InsufficientCreditsError,
    PipelineResult,
    RemoteServiceState,
    ResponseParseError,
    ServiceUnavailableError,
)

pytestmark = pytest.mark.unit


def test_remote_state_rejects_negative_credits():
    with pytest.raises(ValueError, match="credits"):
        RemoteServiceState(credits=-1)


def test_remote_state_rejects_bool_credits():
    with pytest.raises(ValueError, match="credits"):
        RemoteServiceState(credits=True)


def test_with_credits_returns_new_snapshot():
    original = RemoteServiceState(connected=True, credits=3)
    updated = original.with_credits(2)

    assert original.credits == 3
    assert updated.credits == 2
    assert updated.connected is True


def test_state_snapshots_are_frozen():
    state = RemoteServiceState()
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.credits = 10  # type: ignore[misc]


def test_finding_requires_ordered_span():
    with pytest.raises(ValueError, match="span_end"):
        Finding(span_start=5, span_end=2, message="bad")


def test_finding_requires_message():
    with pytest.raises(ValueError, match="message"):
        Finding(span_start=0, span_end=1, message="  ")


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"span_start": "0", "span_end": 1, "message": "x"}, "span_start"),
        ({"span_start": 0, "span_end": 1.5, "message": "x"}, "span_end"),
        ({"span_start": True, "span_end": 1, "message": "x"}, "span_start"),
        ({"span_start": 0, "span_end": 1, "message": None}, "message"),
    ],
    ids=["str-start", "float-end", "bool-start", "none-message"],
)
def test_finding_wrong_types_raise_type_error(kwargs, field):
    with pytest.raises(TypeError, match=field):
        Finding(**kwargs)


def test_finding_rejects_negative_start():
    with pytest.raises(ValueError, match="span_start"):
        Finding(span_start=-1, span_end=2, message="bad")


def test_finding_fits_only_inside_text():
    finding = Finding(span_start=2, span_end=6, message="x")

    assert finding.fits("abcdef") is True
    assert finding.fits("abc") is False


def test_finding_serializes_type_key():
    finding = Finding(span_start=0, span_end=7, message="Repeated word", suggestion="the")

    assert finding.to_dict() == {
        "span": [0, 7],
        "message": "Repeated word",
        "suggestion": "the",
        "type": "grammar",
    }


def test_pipeline_result_response_shape():
    result = PipelineResult(
        original_text="a",
        transformed_text="b",
        grammar_findings=(Finding(span_start=0, span_end=1, message="m"),),
        provider="openai",
        credits_remaining=4,
    )

    response = result.to_response()

    assert response["success"] is True
    assert response["text"] == "b"
    assert response["provider"] == "openai"
    assert response["creditsRemaining"] == 4
    assert response["pipelineComplete"] is True
    assert len(response["grammarErrors"]) == 1


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (InsufficientCreditsError(), ErrorKind.INSUFFICIENT_CREDITS),
        (CapabilityUnavailableError(), ErrorKind.CAPABILITY_UNAVAILABLE),
        (ResponseParseError(), ErrorKind.SERVICE_UNAVAILABLE),
    ],
)
def test_errors_carry_kind_in_payload(error, kind):
    payload = error.to_payload()

    assert payload["success"] is False
    assert payload["kind"] == kind.value
    assert payload["error"] == error.default_message


def test_service_unavailable_payload_includes_details():
    payload = ServiceUnavailableError(details="Both primary and fallback services failed").to_payload()

    assert payload["details"] == "Both primary and fallback services failed"
    assert payload["error"] == "AI service temporarily unavailable"
