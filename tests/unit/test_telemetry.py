"""Telemetry context behaviour."""

import pytest

from ghostwrite.telemetry import SimpleReporter, TelemetryContext

pytestmark = pytest.mark.unit


def test_disabled_context_is_shared_noop(monkeypatch):
    monkeypatch.delenv("GHOSTWRITE_TELEMETRY", raising=False)
    reporter = SimpleReporter()

    first = TelemetryContext(reporter)
    second = TelemetryContext()

    assert first is second
    with first("anything"):
        first.count("calls")
    assert reporter.timings == {}


def test_env_toggle_enables_context(monkeypatch):
    monkeypatch.setenv("GHOSTWRITE_TELEMETRY", "1")
    reporter = SimpleReporter()

    ctx = TelemetryContext(reporter)
    with ctx("pipeline"), ctx("transform"):
        ctx.gauge("chars", 120)

    assert "pipeline.transform" in reporter.timings
    assert "pipeline" in reporter.timings
    value, metadata = reporter.metrics["pipeline.transform.chars"][0]
    assert value == 120
    assert metadata["metric_type"] == "gauge"


def test_failing_reporter_does_not_break_scope():
    class Broken:
        def record_timing(self, *args, **kwargs):
            raise RuntimeError("sink down")

        def record_metric(self, *args, **kwargs):
            raise RuntimeError("sink down")

    good = SimpleReporter()
    ctx = TelemetryContext(Broken(), good, enabled=True)

    with ctx("scope"):
        ctx.count("hits")

    assert "scope" in good.timings
    assert "scope.hits" in good.metrics


def test_report_lists_scopes():
    reporter = SimpleReporter()
    ctx = TelemetryContext(reporter, enabled=True)
    with ctx("capability.remote_probe"):
        pass

    report = reporter.get_report()

    assert "capability.remote_probe" in report
    assert "Calls: 1" in report
