"""Find stale project folders under a root directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ComputeError, PathError
from .resolver import effective_mtime

if TYPE_CHECKING:
    from .config import SweeperConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectItem:
    """An immediate child directory of a scanned root."""

    path: Path
    last_modified: datetime


@dataclass
class ScanReport:
    """Stale/fresh partition of the project folders under ``root``."""

    root: Path
    older_than_days: int
    cutoff: datetime
    stale: list[ProjectItem] = field(default_factory=list)  # oldest first
    fresh: list[ProjectItem] = field(default_factory=list)
    scanned_count: int = 0


def compute_cutoff(older_than_days: int, now: datetime | None = None) -> datetime:
    """Return ``now`` minus ``older_than_days`` days.

    Raises:
        ComputeError: If the threshold is negative or falls outside the
            representable range.

    """
    if older_than_days < 0:
        raise ComputeError(f"older_than_days must not be negative: {older_than_days}")
    if now is None:
        now = datetime.now(UTC)
    try:
        return now - timedelta(days=older_than_days)
    except OverflowError as e:
        raise ComputeError(f"Failed to compute cutoff time for {older_than_days} days") from e


class StaleScanner:
    """Partitions project folders into stale and fresh ones by their newest mtime."""

    def __init__(self, config: SweeperConfig) -> None:
        """Initialize the scanner.

        Args:
            config: Sweeper configuration.

        """
        self.config = config

    @staticmethod
    def _canonicalize(root: Path) -> Path:
        try:
            return Path(root).expanduser().resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathError(f"Cannot access path: {root}: {e}") from e

    @staticmethod
    def _list_children(root: Path) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(root) as entries:
                return list(entries)
        except OSError as e:
            raise PathError(f"read_dir failed: {root}: {e}") from e

    def scan(
        self,
        root: Path,
        older_than_days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> ScanReport:
        """Scan the immediate subdirectories of ``root``.

        Hidden directories (leading ``.``) and plain files are ignored. Each
        remaining directory gets its effective mtime from a bounded recursive
        walk; failures on individual children never abort the scan.

        Args:
            root: Directory whose children are project folders.
            older_than_days: Staleness threshold. Uses the configured default if None.
            now: Reference time, defaults to the current time.

        Returns:
            ScanReport with ``stale`` sorted oldest first.

        Raises:
            PathError: If ``root`` is missing, cannot be resolved or listed.
            ComputeError: If the cutoff cannot be computed.

        """
        if older_than_days is None:
            older_than_days = self.config.scan_older_than_days

        root = self._canonicalize(root)
        cutoff = compute_cutoff(older_than_days, now)
        report = ScanReport(root=root, older_than_days=older_than_days, cutoff=cutoff)

        for entry in self._list_children(root):
            try:
                is_dir = entry.is_dir()
            except OSError as e:
                logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
                continue

            if not is_dir or entry.name.startswith("."):
                continue

            report.scanned_count += 1
            path = Path(entry.path)
            item = ProjectItem(path=path, last_modified=effective_mtime(path, self.config.max_depth))

            if item.last_modified <= cutoff:
                report.stale.append(item)
            else:
                report.fresh.append(item)

        report.stale.sort(key=lambda item: item.last_modified)

        logger.debug(
            "Scanned %d folders under %s: %d stale, %d fresh",
            report.scanned_count,
            root,
            len(report.stale),
            len(report.fresh),
        )
        return report
