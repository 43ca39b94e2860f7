from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .errors import IngestionError, StageExecutionError
from .models import IngestResult, ProgressCallback, StageContext
from ..observability.obs import api as obs
from ..observability.trace.context import TraceContext


@dataclass
class StageSpec:
    name: str
    fn: Callable[[Any, StageContext], Any]


DEFAULT_STAGE_ORDER: list[str] = [
    "loader",
    "upsert",
]


class IngestionPipeline:
    def __init__(self, stages: Iterable[StageSpec]) -> None:
        self._stages = list(stages)

    def run(
        self,
        input_data: Any,
        on_progress: ProgressCallback | None = None,
    ) -> IngestResult:
        ctx = TraceContext.new(trace_type="ingestion")
        with TraceContext.activate(ctx):
            data = input_data
            total = len(self._stages) or 1

            for idx, stage in enumerate(self._stages):
                try:
                    data = self._run_stage(stage, data, ctx=ctx, on_progress=on_progress, index=idx, total=total)
                except IngestionError as e:
                    return IngestResult(trace_id=ctx.trace_id, status="error", error=e, trace=ctx.finish())

            return IngestResult(trace_id=ctx.trace_id, status="ok", output=data, trace=ctx.finish())

    def _run_stage(
        self,
        stage: StageSpec,
        data: Any,
        *,
        ctx: TraceContext,
        on_progress: ProgressCallback | None,
        index: int,
        total: int,
    ) -> Any:
        if on_progress is not None:
            on_progress(stage.name, _percent(index, total), "start", {"index": index, "total": total})

        try:
            with obs.with_stage(stage.name, {"index": index, "total": total}):
                output = stage.fn(data, StageContext(trace_id=ctx.trace_id, stage=stage.name))
        except IngestionError:
            raise
        except Exception as e:
            raise StageExecutionError(stage.name, str(e)) from e
        finally:
            if on_progress is not None:
                on_progress(stage.name, _percent(index + 1, total), "end", {"index": index, "total": total})

        return output


def _percent(index: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round((index / total) * 100.0, 2)
