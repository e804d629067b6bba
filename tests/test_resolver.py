"""Tests for bounded recursive mtime resolution."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

import pytest

from sweeper import resolver
from sweeper.resolver import (
    MAX_DEPTH,
    OLDEST_MTIME,
    directory_mtime,
    effective_mtime,
    newest_mtime_in_tree,
)


def _as_dt(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=UTC)


class TestNewestMtimeInTree:
    """Tests for newest_mtime_in_tree."""

    def test_empty_directory_uses_own_mtime(self, tmp_path: Path, age_tree) -> None:
        """Test that the directory itself counts as an entry."""
        project = tmp_path / "empty"
        project.mkdir()
        ts = age_tree(project, 12)

        assert newest_mtime_in_tree(project) == _as_dt(ts)

    def test_returns_newest_nested_file(self, tmp_path: Path, age_tree, days_ago) -> None:
        """Test that a recently touched nested file wins."""
        project = tmp_path / "project"
        (project / "src" / "pkg").mkdir(parents=True)
        (project / "README.md").write_text("readme")
        newest = project / "src" / "pkg" / "mod.py"
        newest.write_text("code")
        age_tree(project, 40)
        recent = days_ago(2)
        os.utime(newest, (recent, recent))

        assert newest_mtime_in_tree(project) == _as_dt(recent)

    def test_entries_beyond_max_depth_ignored(self, tmp_path: Path, age_tree, days_ago) -> None:
        """Test that depth 4 entries do not count with the default bound."""
        project = tmp_path / "project"
        deep_dir = project / "a" / "b" / "c"
        deep_dir.mkdir(parents=True)
        deep_file = deep_dir / "d.txt"
        deep_file.write_text("deep")
        old = age_tree(project, 40)
        recent = days_ago(1)
        os.utime(deep_file, (recent, recent))

        assert MAX_DEPTH == 3
        assert newest_mtime_in_tree(project) == _as_dt(old)
        assert newest_mtime_in_tree(project, max_depth=4) == _as_dt(recent)

    def test_entry_at_max_depth_counts(self, tmp_path: Path, age_tree, days_ago) -> None:
        """Test that an entry exactly at the depth bound is inspected."""
        project = tmp_path / "project"
        (project / "a" / "b").mkdir(parents=True)
        edge_file = project / "a" / "b" / "c.txt"
        edge_file.write_text("edge")
        age_tree(project, 40)
        recent = days_ago(1)
        os.utime(edge_file, (recent, recent))

        assert newest_mtime_in_tree(project) == _as_dt(recent)

    def test_zero_depth_only_reads_root(self, tmp_path: Path, age_tree, days_ago) -> None:
        """Test that max_depth=0 looks at the directory alone."""
        project = tmp_path / "project"
        project.mkdir()
        child = project / "fresh.txt"
        child.write_text("x")
        old = age_tree(project, 40)
        recent = days_ago(1)
        os.utime(child, (recent, recent))

        assert newest_mtime_in_tree(project, max_depth=0) == _as_dt(old)

    def test_symlinked_directory_not_followed(self, tmp_path: Path, age_tree, days_ago) -> None:
        """Test that a symlink's own mtime is used and its target is not walked."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "fresh.txt").write_text("fresh")

        project = tmp_path / "project"
        project.mkdir()
        (project / "old.txt").write_text("old")
        link = project / "link"
        link.symlink_to(outside, target_is_directory=True)
        old = age_tree(project, 40)
        os.utime(link, (old, old), follow_symlinks=False)

        assert newest_mtime_in_tree(project) == _as_dt(old)

    def test_nonexistent_directory_returns_none(self, tmp_path: Path) -> None:
        """Test that nothing readable yields None instead of an error."""
        assert newest_mtime_in_tree(tmp_path / "missing") is None

    def test_unlistable_subdirectory_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, age_tree, days_ago
    ) -> None:
        """Test that a directory that cannot be listed does not abort the walk."""
        project = tmp_path / "project"
        (project / "locked").mkdir(parents=True)
        (project / "locked" / "secret.txt").write_text("s")
        (project / "open.txt").write_text("o")
        ts = age_tree(project, 20)
        recent = days_ago(1)
        os.utime(project / "locked" / "secret.txt", (recent, recent))

        real_scandir = os.scandir

        def fake_scandir(path):  # type: ignore[no-untyped-def]
            if os.fspath(path).endswith("locked"):
                raise PermissionError("denied")
            return real_scandir(path)

        monkeypatch.setattr(resolver.os, "scandir", fake_scandir)

        assert newest_mtime_in_tree(project) == _as_dt(ts)


class TestEffectiveMtime:
    """Tests for the fallback chain."""

    def test_tree_walk_wins(self, tmp_path: Path, age_tree) -> None:
        """Test that the tree walk result is used when available."""
        project = tmp_path / "project"
        project.mkdir()
        (project / "file.txt").write_text("x")
        ts = age_tree(project, 3)

        assert effective_mtime(project) == _as_dt(ts)

    def test_falls_back_to_directory_metadata(self, tmp_path: Path, age_tree) -> None:
        """Test the second strategy when the walk yields nothing."""
        project = tmp_path / "project"
        project.mkdir()
        ts = age_tree(project, 9)

        result = effective_mtime(project, strategies=(lambda _p, _d: None, directory_mtime))

        assert result == _as_dt(ts)

    def test_falls_back_to_oldest(self, tmp_path: Path) -> None:
        """Test that an unreadable directory is treated as maximally stale."""
        assert effective_mtime(tmp_path / "missing") == OLDEST_MTIME

    def test_oldest_sorts_before_real_times(self) -> None:
        """Test that the fallback value precedes any real timestamp."""
        assert OLDEST_MTIME < datetime.fromtimestamp(0, tz=UTC)

    def test_strategies_tried_in_order(self, tmp_path: Path) -> None:
        """Test that later strategies are not consulted after a hit."""
        calls: list[str] = []
        first = datetime(2020, 1, 1, tzinfo=UTC)

        def one(_path: Path, _depth: int) -> datetime | None:
            calls.append("one")
            return first

        def two(_path: Path, _depth: int) -> datetime | None:
            calls.append("two")
            return None

        assert effective_mtime(tmp_path, strategies=(one, two)) == first
        assert calls == ["one"]
