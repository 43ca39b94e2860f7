from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable


JsonDict = dict[str, Any]

TRACE_SCHEMA_VERSION = "trace.v1"
STAGE_PREFIX = "stage."

# Known event kinds; unknown kinds are kept as-is unless validated strictly.
ALLOWED_EVENT_KINDS: set[str] = {
    "stage.start",
    "stage.end",
    "stage.error",
    "store.recovered",
    "store.record_skipped",
    "ingest.staged",
    "ingest.committed",
    "ingest.rolled_back",
    "build.document",
    "metric",
    "error",
    "warn.span_leak",
}


def _normalize_event_kind(kind: str, *, strict: bool) -> str:
    k = (kind or "").strip()
    if strict and k not in ALLOWED_EVENT_KINDS:
        raise ValueError(f"invalid event.kind: {kind!r}")
    return k


def new_event(kind: str, attrs: JsonDict | None = None, *, ts: float = 0.0) -> "EventRecord":
    return EventRecord(ts=ts, kind=_normalize_event_kind(kind, strict=False), attrs=dict(attrs or {}))


@dataclass(frozen=True)
class EventRecord:
    ts: float
    kind: str
    attrs: JsonDict = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        return {"ts": self.ts, "kind": self.kind, "attrs": self.attrs}


@dataclass
class SpanRecord:
    span_id: str
    name: str
    parent_span_id: str | None
    start_ts: float
    end_ts: float | None = None
    status: str = "ok"  # ok|error
    attrs: JsonDict = field(default_factory=dict)
    events: list[EventRecord] = field(default_factory=list)

    def to_dict(self) -> JsonDict:
        return {
            "span_id": self.span_id,
            "name": self.name,
            "parent_span_id": self.parent_span_id,
            "start_ts": self.start_ts,
            "end_ts": self.end_ts,
            "status": self.status,
            "attrs": self.attrs,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass
class TraceEnvelope:
    trace_id: str
    start_ts: float
    end_ts: float
    trace_type: str = "unknown"  # ingestion|build|query|unknown
    status: str = "ok"
    spans: list[SpanRecord] = field(default_factory=list)
    events: list[EventRecord] = field(default_factory=list)  # trace-level events
    schema_version: str = TRACE_SCHEMA_VERSION

    def to_dict(self) -> JsonDict:
        return {
            "schema_version": self.schema_version,
            "trace_id": self.trace_id,
            "trace_type": self.trace_type,
            "status": self.status,
            "start_ts": self.start_ts,
            "end_ts": self.end_ts,
            "spans": [s.to_dict() for s in self.spans],
            "events": [e.to_dict() for e in self.events],
        }

    def validate(self, *, strict: bool = True) -> None:
        if not self.trace_id:
            raise ValueError("trace_id missing")
        if not strict:
            return
        for span in self.spans:
            if not span.name.startswith(STAGE_PREFIX):
                raise ValueError(f"invalid span.name (must start with {STAGE_PREFIX!r}): {span.name!r}")
        for kind in self.iter_event_kinds():
            _normalize_event_kind(kind, strict=True)

    def iter_event_kinds(self) -> Iterable[str]:
        for s in self.spans:
            for ev in s.events:
                yield ev.kind
        for ev in self.events:
            yield ev.kind

    def find_events(self, kind: str) -> list[EventRecord]:
        out = [ev for s in self.spans for ev in s.events if ev.kind == kind]
        out.extend(ev for ev in self.events if ev.kind == kind)
        return out
