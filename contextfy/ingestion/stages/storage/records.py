from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, fields
from typing import Any

from ...models import Document


RECORD_SUFFIX = ".json"


@dataclass(frozen=True)
class Record:
    id: str
    title: str
    parent_title: str
    summary: str
    content: str
    source_path: str

    @property
    def filename(self) -> str:
        return f"{self.id}{RECORD_SUFFIX}"

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "Record":
        if not isinstance(raw, dict):
            raise TypeError(f"record must be an object, got {type(raw).__name__}")
        names = [f.name for f in fields(cls)]
        if set(raw) != set(names):
            raise ValueError(f"record fields mismatch: {sorted(raw)}")
        for name in names:
            if not isinstance(raw[name], str):
                raise TypeError(f"record field {name!r} must be str, got {type(raw[name]).__name__}")
        return cls(**{name: raw[name] for name in names})


def new_record_id() -> str:
    return str(uuid.uuid4())


def records_for(document: Document) -> list[Record]:
    """One record per section, or a single whole-document record without sections."""
    if not document.sections:
        return [
            Record(
                id=new_record_id(),
                title=document.title,
                parent_title=document.title,
                summary=document.summary,
                content=document.content,
                source_path=document.path,
            )
        ]
    return [
        Record(
            id=new_record_id(),
            title=s.title,
            parent_title=s.parent_title,
            summary=s.summary,
            content=s.content,
            source_path=document.path,
        )
        for s in document.sections
    ]


def encode_record(record: Record) -> bytes:
    # Lone surrogates cannot be written as UTF-8 and surface here.
    return json.dumps(record.to_dict(), ensure_ascii=False, indent=2).encode("utf-8")


def decode_record(data: bytes | str) -> Record:
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return Record.from_dict(json.loads(data))


def is_record_name(name: str, staging_prefix: str) -> bool:
    return name.endswith(RECORD_SUFFIX) and not name.startswith(staging_prefix)
