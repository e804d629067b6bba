"""Build month-bucketed archive plans from scan reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import PlanError
from .namer import avoid_collision

if TYPE_CHECKING:
    from .scanner import ScanReport

logger = logging.getLogger(__name__)

MONTH_BUCKET_FORMAT = "%Y-%m"
UNKNOWN_NAME = "unknown"


@dataclass(frozen=True)
class ArchiveMove:
    """One planned relocation."""

    source: Path
    destination: Path


@dataclass
class ArchivePlan:
    """Moves that archive stale folders into ``dest_root/month_bucket``."""

    dest_root: Path
    month_bucket: str  # e.g. "2026-02"
    moves: list[ArchiveMove] = field(default_factory=list)

    @property
    def bucket_dir(self) -> Path:
        """Directory every move lands in."""
        return self.dest_root / self.month_bucket


def _is_within(path: Path, parent: Path) -> bool:
    return path.is_relative_to(parent)


def build_archive_plan(report: ScanReport, dest_root: Path, *, now: datetime | None = None) -> ArchivePlan:
    """Plan moving every stale folder in ``report`` under ``dest_root``.

    The bucket is named after the current local month, not the folders' own
    age. Folders inside the destination, or containing it, are left out.
    Destinations never collide with existing entries or with each other.
    Nothing on disk is changed.

    Args:
        report: Result of a stale scan.
        dest_root: Archive root. It does not need to exist yet.
        now: Reference time for the month bucket, defaults to local now.

    Returns:
        The archive plan, moves in the same order as ``report.stale``.

    Raises:
        PlanError: If the report holds a relative path.

    """
    # Canonical where the path exists, best-effort absolute where it does not.
    dest_root = Path(dest_root).expanduser().resolve()

    if now is None:
        now = datetime.now()
    plan = ArchivePlan(dest_root=dest_root, month_bucket=now.strftime(MONTH_BUCKET_FORMAT))
    planned: set[Path] = set()

    for item in report.stale:
        if not item.path.is_absolute():
            raise PlanError(f"Scan report holds a relative path: {item.path}")

        if _is_within(item.path, dest_root):
            logger.info("Skipping %s: already inside archive %s", item.path, dest_root)
            continue
        if _is_within(dest_root, item.path):
            logger.warning("Skipping %s: archive %s lives inside it", item.path, dest_root)
            continue

        name = item.path.name or UNKNOWN_NAME
        destination = avoid_collision(plan.bucket_dir / name, planned)
        planned.add(destination)
        plan.moves.append(ArchiveMove(source=item.path, destination=destination))

    return plan
