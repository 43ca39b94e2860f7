"""Caller-facing views over stored records."""

from __future__ import annotations

from dataclasses import dataclass

from ...ingestion.stages.storage import KnowledgeStore, Record


@dataclass(frozen=True)
class Brief:
    """A search hit: enough to decide whether to load the full record."""

    id: str
    title: str
    parent_title: str
    summary: str

    @property
    def display_title(self) -> str:
        if self.parent_title == self.title:
            return self.title
        return f"[{self.parent_title}] {self.title}"

    @classmethod
    def from_record(cls, r: Record) -> "Brief":
        return cls(id=r.id, title=r.title, parent_title=r.parent_title, summary=r.summary)


@dataclass(frozen=True)
class Details:
    id: str
    title: str
    parent_title: str
    content: str
    source_path: str

    @classmethod
    def from_record(cls, r: Record) -> "Details":
        return cls(
            id=r.id,
            title=r.title,
            parent_title=r.parent_title,
            content=r.content,
            source_path=r.source_path,
        )


class Retriever:
    def __init__(self, store: KnowledgeStore) -> None:
        self.store = store

    def scout(self, query: str) -> list[Brief]:
        return [Brief.from_record(r) for r in self.store.search(query)]

    def inspect(self, record_id: str) -> Details | None:
        r = self.store.get(record_id)
        return Details.from_record(r) if r is not None else None


__all__ = ["Brief", "Details", "Retriever"]
