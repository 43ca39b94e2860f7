from __future__ import annotations

import shutil
import uuid
from pathlib import Path
from types import TracebackType

from ....observability.obs import api as obs
from ...errors import RollbackError, StoreIoError


STAGING_PREFIX = ".staging-"


class StagedCommit:
    """Two-phase write of a group of files into `live_dir`.

    Files are first written into a private staging directory, then moved into
    the live directory one by one. Leaving the `with` block with an exception,
    or without calling `commit()`, removes every file this commit moved so far
    together with the staging directory, so the live directory ends up as it
    was before.

        with StagedCommit(root) as txn:
            txn.stage("a.json", payload)
            txn.commit()
    """

    def __init__(self, live_dir: Path, *, prefix: str = STAGING_PREFIX) -> None:
        self.live_dir = live_dir
        self.staging_dir = live_dir / f"{prefix}{uuid.uuid4().hex}"
        self.committed: list[Path] = []
        self._staged: list[str] = []
        self._done = False

    def __enter__(self) -> "StagedCommit":
        try:
            self.staging_dir.mkdir()
        except OSError as e:
            raise StoreIoError(
                stage="stage",
                message=f"cannot create staging dir: {e}",
                path=str(self.staging_dir),
                step="mkdir",
            ) from e
        return self

    def stage(self, name: str, payload: bytes) -> Path:
        target = self.staging_dir / name
        try:
            target.write_bytes(payload)
        except OSError as e:
            raise StoreIoError(
                stage="stage",
                message=f"cannot write {name}: {e}",
                path=str(target),
                step="write",
                section_index=len(self._staged),
            ) from e
        self._staged.append(name)
        return target

    def commit(self) -> list[Path]:
        for idx, name in enumerate(self._staged):
            src = self.staging_dir / name
            dst = self.live_dir / name
            try:
                src.rename(dst)
            except OSError as e:
                raise StoreIoError(
                    stage="commit",
                    message=f"cannot move {name}: {e}",
                    path=str(dst),
                    step="rename",
                    section_index=idx,
                ) from e
            self.committed.append(dst)
        self._done = True
        return list(self.committed)

    def rollback(self) -> None:
        orphaned: list[str] = []
        for p in reversed(self.committed):
            try:
                p.unlink(missing_ok=True)
            except OSError:
                orphaned.append(str(p))
        removed = len(self.committed) - len(orphaned)
        self.committed = []

        try:
            if self.staging_dir.exists():
                shutil.rmtree(self.staging_dir)
        except OSError:
            orphaned.append(str(self.staging_dir))

        if orphaned:
            raise RollbackError(
                stage="rollback",
                message=f"rollback left {len(orphaned)} orphaned path(s)",
                orphaned=orphaned,
            )
        obs.event("ingest.rolled_back", {"removed": removed, "staging_dir": self.staging_dir.name})

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is not None or not self._done:
            try:
                self.rollback()
            except RollbackError as rb:
                if exc is not None:
                    raise rb from exc
                raise
            return False

        try:
            self.staging_dir.rmdir()
        except OSError as e:
            # Records are already live; `recover_staging` removes the leftover.
            obs.event("error", {"step": "cleanup", "path": str(self.staging_dir), "message": str(e)})
        return False


def recover_staging(root: Path, *, prefix: str = STAGING_PREFIX) -> list[str]:
    """Delete leftover staging entries from an interrupted commit."""
    removed: list[str] = []
    try:
        entries = [p for p in root.iterdir() if p.name.startswith(prefix)]
    except OSError as e:
        raise StoreIoError(stage="recover", message=f"cannot list {root}: {e}", path=str(root), step="list") from e

    for p in entries:
        try:
            if p.is_dir() and not p.is_symlink():
                shutil.rmtree(p)
            else:
                p.unlink(missing_ok=True)
        except OSError as e:
            raise StoreIoError(stage="recover", message=f"cannot remove {p.name}: {e}", path=str(p), step="cleanup") from e
        removed.append(p.name)

    if removed:
        obs.event("store.recovered", {"removed": removed})
    return removed
