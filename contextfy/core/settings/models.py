from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping


def _as_path(v: Any, default: Path | None) -> Path | None:
    if v is None:
        return default
    if isinstance(v, Path):
        return v
    if isinstance(v, str):
        return Path(v)
    raise TypeError(f"expected path-like value, got {type(v).__name__}")


def _as_mapping(raw: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    v = raw.get(key)
    if v is not None and not isinstance(v, Mapping):
        raise TypeError(f"{key} must be mapping, got {type(v).__name__}")
    return v


@dataclass
class PathsSettings:
    data_dir: Path = Path(".contextfy/data")
    docs_dir: Path = Path("docs/examples")
    logs_dir: Path | None = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any] | None) -> "PathsSettings":
        d = d or {}
        return cls(
            data_dir=_as_path(d.get("data_dir"), cls.data_dir),
            docs_dir=_as_path(d.get("docs_dir"), cls.docs_dir),
            logs_dir=_as_path(d.get("logs_dir"), None),
        )


@dataclass
class Settings:
    paths: PathsSettings = field(default_factory=PathsSettings)

    # Keep the raw mapping for debugging.
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "Settings":
        raw = dict(raw or {})
        return cls(
            paths=PathsSettings.from_dict(_as_mapping(raw, "paths")),
            raw=raw,
        )
