from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from ..errors import IngestionError
from ...observability.trace.envelope import TraceEnvelope


@dataclass(frozen=True)
class Section:
    """One H2-bounded fragment of a document. `content` is never empty."""

    title: str
    content: str
    parent_title: str
    summary: str


@dataclass(frozen=True)
class Document:
    path: str
    title: str
    content: str
    summary: str
    sections: list[Section] = field(default_factory=list)


@dataclass
class StageContext:
    trace_id: str
    stage: str


ProgressCallback = Callable[[str, float, str, dict[str, Any] | None], None]


@dataclass
class IngestResult:
    trace_id: str
    status: str
    output: Any | None = None
    error: IngestionError | None = None
    trace: TraceEnvelope | None = None
