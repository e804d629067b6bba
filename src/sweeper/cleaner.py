"""Apply archive plans and send stale folders to the system trash."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from send2trash import send2trash

from .errors import CreateDirectoryError, MoveError, TrashError

if TYPE_CHECKING:
    from .config import SweeperConfig
    from .planner import ArchivePlan
    from .scanner import ProjectItem


@dataclass(frozen=True)
class CleanupResult:
    """Result of a completed cleanup step."""

    path: Path
    action: str  # "archived", "trashed"
    destination: Path | None = None


class Cleaner:
    """Moves stale folders into the archive or the trash, stopping at the first failure.

    Completed steps are never rolled back. After a failure the caller can rerun
    the scan; folders already moved simply no longer show up.
    """

    def __init__(self, config: SweeperConfig, logger: logging.Logger) -> None:
        """Initialize the cleaner.

        Args:
            config: Sweeper configuration.
            logger: Logger instance.

        """
        self.config = config
        self.logger = logger

    def apply_plan(self, plan: ArchivePlan) -> list[CleanupResult]:
        """Apply every move of ``plan`` in order.

        Args:
            plan: Plan built by ``build_archive_plan``.

        Returns:
            One result per applied move.

        Raises:
            CreateDirectoryError: If a destination parent cannot be created.
            MoveError: If a move fails or its destination appeared after planning.

        """
        results: list[CleanupResult] = []

        for index, move in enumerate(plan.moves):
            parent = move.destination.parent
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self.logger.error("Error creating %s: %s", parent, e)
                raise CreateDirectoryError(parent, str(e), index=index) from e

            # shutil.move would nest the source inside an existing directory
            if move.destination.exists() or move.destination.is_symlink():
                self.logger.error("Destination already exists: %s", move.destination)
                raise MoveError(move.source, move.destination, "destination already exists", index=index)

            try:
                shutil.move(str(move.source), str(move.destination))
            except OSError as e:
                self.logger.error("Error moving %s -> %s: %s", move.source, move.destination, e)
                raise MoveError(move.source, move.destination, str(e), index=index) from e

            self.logger.info("Archived: %s -> %s", move.source, move.destination)
            results.append(CleanupResult(path=move.source, action="archived", destination=move.destination))

        return results

    def send_to_trash(self, items: Sequence[ProjectItem]) -> list[CleanupResult]:
        """Send each item to the system trash, in order.

        Args:
            items: Folders to delete, usually ``ScanReport.stale``.

        Returns:
            One result per trashed folder.

        Raises:
            TrashError: On the first item that cannot be trashed.

        """
        results: list[CleanupResult] = []

        for index, item in enumerate(items):
            try:
                send2trash(str(item.path))
            except OSError as e:
                self.logger.error("Error trashing %s: %s", item.path, e)
                raise TrashError(item.path, str(e), index=index) from e

            self.logger.info("Moved to trash: %s", item.path)
            results.append(CleanupResult(path=item.path, action="trashed"))

        return results
