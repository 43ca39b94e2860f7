from __future__ import annotations

import pytest

from contextfy.observability.obs import api as obs
from contextfy.observability.trace.context import TraceContext


def _kinds(env) -> list[str]:
    kinds: list[str] = []
    for s in env.spans:
        kinds.extend([e.kind for e in s.events])
    return kinds


def test_with_stage_emits_start_and_end() -> None:
    ctx = TraceContext.new("t-stage-1", trace_type="ingestion")
    with TraceContext.activate(ctx):
        with obs.with_stage("loader"):
            obs.event("ingest.staged", {"records": 0})
        env = ctx.finish()

    assert [s.name for s in env.spans] == ["stage.loader"]
    kinds = _kinds(env)
    assert kinds[0] == "stage.start"
    assert kinds[-1] == "stage.end"
    assert "ingest.staged" in kinds
    env.validate(strict=True)


def test_with_stage_emits_error_on_exception() -> None:
    ctx = TraceContext.new("t-stage-2", trace_type="ingestion")
    with TraceContext.activate(ctx):
        with pytest.raises(ValueError):
            with obs.with_stage("stage.boom"):
                raise ValueError("bad")
        env = ctx.finish()

    span = env.spans[0]
    assert span.name == "stage.boom"
    assert span.status == "error"
    assert env.status == "error"
    assert "stage.error" in _kinds(env)


def test_obs_calls_without_trace_are_noops() -> None:
    with obs.span("stage.free") as s:
        obs.event("store.recovered", {"removed": []})
        obs.metric("records", 1)
    assert s is None
    assert TraceContext.current() is None


def test_strict_validation_rejects_unknown_kinds() -> None:
    ctx = TraceContext.new("t-strict")
    with TraceContext.activate(ctx):
        obs.event("made.up")
        env = ctx.finish()

    with pytest.raises(ValueError):
        env.validate(strict=True)
    env.validate(strict=False)
