from __future__ import annotations

from pathlib import Path

import pytest

from contextfy.ingestion.errors import RollbackError, StoreIoError
from contextfy.ingestion.stages.storage import STAGING_PREFIX, StagedCommit, recover_staging


def _entries(root: Path) -> list[str]:
    return sorted(p.name for p in root.iterdir())


def test_commit_moves_files_and_removes_staging(tmp_path: Path) -> None:
    with StagedCommit(tmp_path) as txn:
        txn.stage("a.json", b"1")
        txn.stage("b.json", b"2")
        assert txn.staging_dir.name.startswith(STAGING_PREFIX)
        assert _entries(tmp_path) == [txn.staging_dir.name]
        moved = txn.commit()

    assert [p.name for p in moved] == ["a.json", "b.json"]
    assert _entries(tmp_path) == ["a.json", "b.json"]
    assert (tmp_path / "b.json").read_bytes() == b"2"


def test_exception_before_commit_leaves_nothing(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        with StagedCommit(tmp_path) as txn:
            txn.stage("a.json", b"1")
            raise RuntimeError("serializer blew up")

    assert _entries(tmp_path) == []


def test_leaving_without_commit_discards_staged_files(tmp_path: Path) -> None:
    with StagedCommit(tmp_path) as txn:
        txn.stage("a.json", b"1")

    assert _entries(tmp_path) == []


def test_rename_failure_rolls_back_moved_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "existing.json").write_bytes(b"keep")
    real_rename = Path.rename
    calls = {"n": 0}

    def flaky_rename(self: Path, target):
        calls["n"] += 1
        if calls["n"] == 3:
            raise OSError("device full")
        return real_rename(self, target)

    monkeypatch.setattr(Path, "rename", flaky_rename)

    with pytest.raises(StoreIoError) as ei:
        with StagedCommit(tmp_path) as txn:
            for name in ("a.json", "b.json", "c.json", "d.json"):
                txn.stage(name, b"x")
            txn.commit()

    assert ei.value.step == "rename"
    assert ei.value.section_index == 2
    assert ei.value.path.endswith("c.json")
    assert _entries(tmp_path) == ["existing.json"]


def test_interrupt_during_commit_rolls_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_rename = Path.rename
    calls = {"n": 0}

    def interrupted_rename(self: Path, target):
        calls["n"] += 1
        if calls["n"] == 2:
            raise KeyboardInterrupt
        return real_rename(self, target)

    monkeypatch.setattr(Path, "rename", interrupted_rename)

    with pytest.raises(KeyboardInterrupt):
        with StagedCommit(tmp_path) as txn:
            txn.stage("a.json", b"1")
            txn.stage("b.json", b"2")
            txn.commit()

    assert _entries(tmp_path) == []


def test_failed_rollback_reports_orphans(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_rename = Path.rename
    calls = {"n": 0}

    def flaky_rename(self: Path, target):
        calls["n"] += 1
        if calls["n"] == 2:
            raise OSError("rename failed")
        return real_rename(self, target)

    def failing_unlink(self: Path, missing_ok: bool = False) -> None:
        raise OSError("unlink failed")

    monkeypatch.setattr(Path, "rename", flaky_rename)
    monkeypatch.setattr(Path, "unlink", failing_unlink)

    with pytest.raises(RollbackError) as ei:
        with StagedCommit(tmp_path) as txn:
            txn.stage("a.json", b"1")
            txn.stage("b.json", b"2")
            txn.commit()

    assert ei.value.orphaned == [str(tmp_path / "a.json")]
    assert isinstance(ei.value.__cause__, StoreIoError)


def test_recover_staging_removes_only_staging_entries(tmp_path: Path) -> None:
    leftover = tmp_path / f"{STAGING_PREFIX}deadbeef"
    (leftover / "nested").mkdir(parents=True)
    (leftover / "nested" / "x.json").write_bytes(b"{}")
    (tmp_path / f"{STAGING_PREFIX}stray-file").write_bytes(b"")
    (tmp_path / "record.json").write_bytes(b"{}")

    removed = recover_staging(tmp_path)

    assert sorted(removed) == [f"{STAGING_PREFIX}deadbeef", f"{STAGING_PREFIX}stray-file"]
    assert _entries(tmp_path) == ["record.json"]
    assert recover_staging(tmp_path) == []
