"""Resolve the effective last-modified time of a directory tree."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# Levels below a project folder that are inspected
MAX_DEPTH = 3

# Used when nothing about a directory can be read; sorts before every real mtime.
OLDEST_MTIME = datetime.min.replace(tzinfo=UTC)

MtimeStrategy = Callable[[Path, int], datetime | None]


def _to_datetime(timestamp: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(timestamp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        logger.debug("Unrepresentable mtime: %r", timestamp)
        return None


def newest_mtime_in_tree(directory: Path, max_depth: int = MAX_DEPTH) -> datetime | None:
    """Return the newest mtime found in ``directory`` down to ``max_depth`` levels.

    The directory itself counts as depth 0. Entries are stat-ed without
    following symlinks, and symlinked directories are not descended into.
    Anything that cannot be listed or stat-ed is skipped.

    Args:
        directory: Directory to inspect.
        max_depth: How many levels below ``directory`` to visit.

    Returns:
        The newest modification time, or None if nothing was readable.

    """
    newest: float | None = None

    try:
        newest = os.stat(directory).st_mtime
    except OSError as e:
        logger.debug("Cannot stat %s: %s", directory, e)

    stack: list[tuple[str, int]] = [(os.fspath(directory), 0)]
    while stack:
        current, depth = stack.pop()
        if depth >= max_depth:
            continue

        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        mtime = entry.stat(follow_symlinks=False).st_mtime
                    except OSError as e:
                        logger.debug("Cannot stat %s: %s", entry.path, e)
                        continue

                    if newest is None or mtime > newest:
                        newest = mtime

                    try:
                        descend = entry.is_dir(follow_symlinks=False)
                    except OSError:
                        descend = False
                    if descend:
                        stack.append((entry.path, depth + 1))
        except OSError as e:
            logger.debug("Cannot list %s: %s", current, e)

    if newest is None:
        return None
    return _to_datetime(newest)


def directory_mtime(directory: Path, max_depth: int = MAX_DEPTH) -> datetime | None:
    """Return the directory's own metadata mtime, or None if it cannot be read."""
    try:
        return _to_datetime(os.stat(directory).st_mtime)
    except OSError as e:
        logger.debug("Cannot stat %s: %s", directory, e)
        return None


DEFAULT_STRATEGIES: tuple[MtimeStrategy, ...] = (newest_mtime_in_tree, directory_mtime)


def effective_mtime(
    directory: Path,
    max_depth: int = MAX_DEPTH,
    strategies: Sequence[MtimeStrategy] | None = None,
) -> datetime:
    """Resolve a directory's effective timestamp.

    Each strategy is tried in order and the first non-None answer wins.
    A directory nothing can be read from gets ``OLDEST_MTIME``, which makes it
    maximally stale.
    """
    for strategy in strategies if strategies is not None else DEFAULT_STRATEGIES:
        mtime = strategy(directory, max_depth)
        if mtime is not None:
            return mtime

    logger.debug("No readable mtime for %s, treating as oldest", directory)
    return OLDEST_MTIME
