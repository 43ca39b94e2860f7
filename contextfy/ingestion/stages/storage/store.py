from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from ....observability.obs import api as obs
from ...errors import RecordSerializationError, StoreIoError
from ...models import Document
from .records import Record, decode_record, encode_record, is_record_name, records_for
from .staging import STAGING_PREFIX, StagedCommit, recover_staging


@dataclass
class KnowledgeStore:
    """Directory of JSON records, one file per section.

    Construction creates the directory and clears staging leftovers of an
    interrupted `ingest`. Records from one `ingest` call are committed as a
    group: either all of them are in the directory or none are. Concurrent
    `ingest` calls on one instance are serialized; readers are not blocked and
    may observe a group while its files are still being moved in.
    """

    data_dir: Path
    _write_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIoError(stage="open", message=str(e), path=str(self.data_dir), step="mkdir") from e
        recover_staging(self.data_dir, prefix=STAGING_PREFIX)

    @classmethod
    def open(cls, data_dir: str | Path) -> "KnowledgeStore":
        return cls(data_dir=Path(data_dir))

    def ingest(self, document: Document) -> list[str]:
        """Persist `document` and return the new record ids in section order."""
        records = records_for(document)

        with self._write_lock, StagedCommit(self.data_dir, prefix=STAGING_PREFIX) as txn:
            for idx, record in enumerate(records):
                try:
                    payload = encode_record(record)
                except (TypeError, ValueError) as e:
                    raise RecordSerializationError(
                        stage="stage",
                        message=f"cannot encode section {idx} ({record.title!r}) of {document.path}: {e}",
                        section_index=idx,
                    ) from e
                try:
                    txn.stage(record.filename, payload)
                except StoreIoError as e:
                    raise _with_section(e, records, document) from e.__cause__
            obs.event("ingest.staged", {"records": len(records), "source_path": document.path})

            try:
                txn.commit()
            except StoreIoError as e:
                raise _with_section(e, records, document) from e.__cause__

        obs.event("ingest.committed", {"records": len(records), "source_path": document.path})
        return [r.id for r in records]

    def search(self, query: str) -> list[Record]:
        """Records whose title or summary contains `query`, ignoring case."""
        needle = query.lower()
        return [r for r in self.iter_records() if needle in r.title.lower() or needle in r.summary.lower()]

    def get(self, record_id: str) -> Record | None:
        for r in self.iter_records():
            if r.id == record_id:
                return r
        return None

    def iter_records(self) -> Iterator[Record]:
        """Committed records in directory order; corrupt files are skipped."""
        try:
            entries = list(os.scandir(self.data_dir))
        except OSError as e:
            raise StoreIoError(stage="read", message=str(e), path=str(self.data_dir), step="list") from e

        for entry in entries:
            if not is_record_name(entry.name, STAGING_PREFIX):
                continue
            try:
                if not entry.is_file():
                    continue
                with open(entry.path, "rb") as f:
                    record = decode_record(f.read())
            except (OSError, ValueError, TypeError) as e:
                obs.event(
                    "store.record_skipped",
                    {"file": entry.name, "exc_type": type(e).__name__, "message": str(e)},
                )
                continue
            yield record


def _with_section(err: StoreIoError, records: list[Record], document: Document) -> StoreIoError:
    idx = err.section_index
    if idx is None or not 0 <= idx < len(records):
        return err
    return StoreIoError(
        stage=err.stage,
        message=f"section {idx} ({records[idx].title!r}) of {document.path}: {err.message}",
        path=err.path,
        step=err.step,
        section_index=idx,
    )


def open_store(data_dir: str | Path) -> KnowledgeStore:
    return KnowledgeStore.open(data_dir)
