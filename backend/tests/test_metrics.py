"""Tests for metrics and tracing helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from study_planner.core.context import user_id_ctx_var
from study_planner.observability import client as client_module
from study_planner.observability import metrics
from study_planner.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False
        self.updates: list[Dict[str, Any]] = []

    def update(self, **kwargs: Any) -> None:
        self.updates.append(kwargs)

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


@pytest.fixture()
def dummy_client(monkeypatch) -> _DummyClient:
    dummy = _DummyClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy)
    return dummy


def test_log_metric_closes_trace(dummy_client) -> None:
    metrics.log_metric("demo_metric", 42, metadata={"foo": "bar"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:demo_metric"
    assert dummy_client.traces[0].metadata["value"] == 42
    assert dummy_client.traces[0].metadata["foo"] == "bar"
    assert dummy_client.traces[0].ended is True


def test_trace_picks_up_bound_user_id(dummy_client) -> None:
    token = user_id_ctx_var.set(17)
    try:
        with tracing.trace("demo", metadata={"route": "/x"}, request_id="req-1"):
            pass
    finally:
        user_id_ctx_var.reset(token)

    [recorded] = dummy_client.traces
    assert recorded.metadata == {"route": "/x", "user_id": "17", "request_id": "req-1"}
    assert recorded.ended is True


def test_trace_records_errors_and_reraises(dummy_client) -> None:
    with pytest.raises(ValueError):
        with tracing.trace("failing"):
            raise ValueError("boom")

    [recorded] = dummy_client.traces
    assert recorded.updates == [{"error_info": {"message": "boom", "type": "ValueError"}}]
    assert recorded.ended is True


def test_helpers_are_no_ops_when_tracing_disabled(monkeypatch) -> None:
    monkeypatch.setattr(client_module.settings, "opik_enabled", False)
    client_module.reset_opik_client()

    assert client_module.get_opik_client() is None
    metrics.log_metric("ignored", 1)
    with tracing.trace("ignored") as handle:
        assert handle is None
