from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...ingestion import DEFAULT_STAGE_ORDER, IngestionPipeline, StageSpec
from ...ingestion.errors import DocumentNotFoundError, IngestionError
from ...ingestion.models import Document, StageContext
from ...ingestion.stages.parsing import MarkdownLoader
from ...ingestion.stages.storage import KnowledgeStore
from ...observability.obs import api as obs
from ...observability.sinks import JsonlSink
from ..settings import Settings


@dataclass
class DocumentOutcome:
    path: str
    trace_id: str
    title: str = ""
    section_count: int = 0
    record_ids: list[str] = field(default_factory=list)
    error: IngestionError | None = None


@dataclass
class BuildReport:
    outcomes: list[DocumentOutcome] = field(default_factory=list)

    @property
    def documents(self) -> int:
        return sum(1 for o in self.outcomes if o.error is None)

    @property
    def sections(self) -> int:
        return sum(o.section_count for o in self.outcomes if o.error is None)

    @property
    def failures(self) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.error is not None]


@dataclass
class _BuildState:
    input_path: Path
    document: Document | None = None
    record_ids: list[str] | None = None


@dataclass
class BuildRunner:
    """Ingest every Markdown file of a docs directory into the record store.

    Each file runs through its own pipeline (and trace); a failing file is
    reported in the `BuildReport` and does not stop the remaining ones.
    """

    settings: Settings
    loader: MarkdownLoader = field(default_factory=MarkdownLoader)

    def run(self, docs_dir: str | Path | None = None) -> BuildReport:
        src = Path(docs_dir) if docs_dir is not None else self.settings.paths.docs_dir
        if not src.is_dir():
            raise DocumentNotFoundError(stage="build", message=f"docs directory not found: {src}", path=str(src))

        store = KnowledgeStore.open(self.settings.paths.data_dir)
        pipeline = self._build_pipeline(store)

        sink = JsonlSink(self.settings.paths.logs_dir) if self.settings.paths.logs_dir is not None else None
        previous = obs.get_sink()
        if sink is not None:
            obs.set_sink(sink)
        try:
            report = BuildReport()
            for p in sorted(src.glob("*.md")):
                report.outcomes.append(self._run_one(pipeline, p))
            return report
        finally:
            if sink is not None:
                obs.set_sink(previous)

    def _build_pipeline(self, store: KnowledgeStore) -> IngestionPipeline:
        def load(state: _BuildState, ctx: StageContext) -> _BuildState:
            state.document = self.loader.load(state.input_path)
            return state

        def upsert(state: _BuildState, ctx: StageContext) -> _BuildState:
            assert state.document is not None
            state.record_ids = store.ingest(state.document)
            obs.event(
                "build.document",
                {"path": state.document.path, "sections": len(state.document.sections), "records": len(state.record_ids)},
            )
            return state

        fns = {"loader": load, "upsert": upsert}
        return IngestionPipeline([StageSpec(name=name, fn=fns[name]) for name in DEFAULT_STAGE_ORDER])

    def _run_one(self, pipeline: IngestionPipeline, path: Path) -> DocumentOutcome:
        result = pipeline.run(_BuildState(input_path=path))
        outcome = DocumentOutcome(path=str(path), trace_id=result.trace_id)
        if result.status != "ok":
            outcome.error = result.error
            return outcome

        state: Any = result.output
        outcome.title = state.document.title
        outcome.section_count = len(state.document.sections)
        outcome.record_ids = list(state.record_ids or [])
        return outcome
