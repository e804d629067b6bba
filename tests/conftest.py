"""Shared fixtures for sweeper tests."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from sweeper.config import SweeperConfig

DAY = 24 * 60 * 60


def days_ago(days: int) -> int:
    """Whole-second timestamp ``days`` days before now."""
    return int(time.time()) - days * DAY


def touch_tree(path: Path, ts: int) -> None:
    """Set the mtime of ``path`` and everything below it to ``ts``."""
    for dirpath, _dirnames, filenames in os.walk(path, topdown=False):
        for name in filenames:
            os.utime(os.path.join(dirpath, name), (ts, ts))
        os.utime(dirpath, (ts, ts))


def age_tree(path: Path, days: int) -> int:
    """Set the mtime of ``path`` and everything below it to ``days`` days ago.

    Returns:
        The timestamp that was applied.

    """
    ts = days_ago(days)
    touch_tree(path, ts)
    return ts


@pytest.fixture
def config() -> SweeperConfig:
    """Create a default configuration."""
    return SweeperConfig()


@pytest.fixture
def logger() -> logging.Logger:
    """Create a test logger."""
    return logging.getLogger("test-sweeper")


@pytest.fixture
def projects(tmp_path: Path) -> Path:
    """Root directory holding project folders."""
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def make_project(projects: Path) -> Callable[..., Path]:
    """Create an aged project folder under ``projects`` (or another root)."""

    def _make(
        name: str,
        days: int,
        files: Iterable[str] = ("README.md", "src/main.py"),
        root: Path | None = None,
    ) -> Path:
        project = (root or projects) / name
        project.mkdir(parents=True)
        for rel in files:
            file_path = project / rel
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(f"{name}:{rel}")
        age_tree(project, days)
        return project

    return _make


@pytest.fixture(name="age_tree")
def age_tree_fixture() -> Callable[[Path, int], int]:
    """Expose ``age_tree`` to tests."""
    return age_tree


@pytest.fixture(name="days_ago")
def days_ago_fixture() -> Callable[[int], int]:
    """Expose ``days_ago`` to tests."""
    return days_ago


@pytest.fixture(name="touch_tree")
def touch_tree_fixture() -> Callable[[Path, int], None]:
    """Expose ``touch_tree`` to tests."""
    return touch_tree
