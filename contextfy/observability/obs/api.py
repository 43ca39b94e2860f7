from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from ..trace.context import TraceContext
from ..trace.envelope import SpanRecord, TraceEnvelope


class ObsSink(Protocol):
    def on_event(self, record: dict[str, Any]) -> None: ...

    def on_span_end(self, record: dict[str, Any]) -> None: ...

    def on_trace_end(self, envelope: TraceEnvelope) -> None: ...


_SINK: ObsSink | None = None


def set_sink(sink: ObsSink | None) -> None:
    global _SINK
    _SINK = sink


def get_sink() -> ObsSink | None:
    return _SINK


@contextmanager
def span(name: str, attrs: dict[str, Any] | None = None) -> Iterator[SpanRecord | None]:
    """
    Create a span if a TraceContext is active; otherwise degrade to no-op.
    """
    ctx = TraceContext.current()
    if ctx is None:
        yield None
        return

    with ctx.start_span(name, attrs) as s:
        try:
            yield s
        finally:
            if _SINK is not None:
                _SINK.on_span_end(
                    {
                        "trace_id": ctx.trace_id,
                        "span_id": s.span_id,
                        "name": s.name,
                        "status": s.status,
                        "attrs": s.attrs,
                    }
                )


def event(kind: str, attrs: dict[str, Any] | None = None) -> None:
    """
    Emit a structured event bound to the current span if present.
    """
    ctx = TraceContext.current()
    if ctx is None:
        return

    ev = ctx.add_event(kind, attrs)
    if _SINK is not None:
        cur = ctx.current_span()
        _SINK.on_event(
            {
                "trace_id": ctx.trace_id,
                "span_id": cur.span_id if cur else None,
                "ts": ev.ts,
                "kind": ev.kind,
                "attrs": ev.attrs,
            }
        )


def metric(name: str, value: float | int, attrs: dict[str, Any] | None = None) -> None:
    payload: dict[str, Any] = {"name": name, "value": value}
    if attrs:
        payload.update(attrs)
    event("metric", payload)


@contextmanager
def with_stage(stage_name: str, attrs: dict[str, Any] | None = None) -> Iterator[SpanRecord | None]:
    """
    Wrap a pipeline stage with a stable span + stage.start/end/error events.
    """
    stage_key = stage_name.strip()
    if stage_key.startswith("stage."):
        stage_key = stage_key[len("stage.") :]

    with span(f"stage.{stage_key}", {"stage": stage_key, **(attrs or {})}) as s:
        event("stage.start", {"stage": stage_key})
        try:
            yield s
        except Exception as e:
            event("stage.error", {"stage": stage_key, "message": str(e), "exc_type": type(e).__name__})
            raise
        finally:
            event("stage.end", {"stage": stage_key})
