from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class IngestionError(Exception):
    stage: str
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.stage}: {self.message}"


class StageExecutionError(IngestionError):
    def __init__(self, stage: str, message: str | None = None) -> None:
        super().__init__(stage=stage, message=message or "stage failed")


@dataclass(eq=False)
class DocumentNotFoundError(IngestionError):
    path: str = ""


@dataclass(eq=False)
class RecordSerializationError(IngestionError):
    section_index: int | None = None


@dataclass(eq=False)
class StoreIoError(IngestionError):
    """Filesystem failure; `step` is one of mkdir|write|rename|cleanup|list.

    `section_index` is the position of the staged file in its commit, when the
    failure concerns one file.
    """

    path: str = ""
    step: str = ""
    section_index: int | None = None


@dataclass(eq=False)
class RollbackError(IngestionError):
    """Undoing a partial commit failed; `orphaned` lists files left behind."""

    orphaned: list[str] = field(default_factory=list)
