"""Sort the files of a folder into category subfolders by extension."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import CreateDirectoryError, MoveError, PathError
from .namer import avoid_name_collision

if TYPE_CHECKING:
    from .config import SweeperConfig

DEFAULT_CATEGORIES: dict[str, str] = {
    # documents
    "pdf": "Documents", "doc": "Documents", "docx": "Documents", "txt": "Documents",
    # images
    "jpg": "Images", "png": "Images", "gif": "Images", "webp": "Images",
    # archives
    "zip": "Archives", "rar": "Archives", "7z": "Archives", "tar": "Archives", "gz": "Archives",
    # installers
    "dmg": "Installers", "exe": "Installers", "msi": "Installers",
    "pkg": "Installers", "deb": "Installers", "rpm": "Installers",
    # spreadsheets
    "csv": "Spreadsheets", "xlsx": "Spreadsheets",
}
DEFAULT_OTHER_CATEGORY = "Other"


@dataclass(frozen=True)
class OrganizeMove:
    """A file and the category folder it goes to."""

    source: Path
    destination: Path
    category: str


class FileOrganizer:
    """Plans and performs category moves for the files directly inside a folder."""

    def __init__(self, config: SweeperConfig, logger: logging.Logger) -> None:
        self.config = config
        self.logger = logger
        self.categories: dict[str, str] = dict(DEFAULT_CATEGORIES)
        for ext, label in config.categories.items():
            # Be kind: accept ".md" as well as "md"
            self.categories[ext.lower().lstrip(".")] = label

    def categorize(self, path: Path) -> str:
        """Return the category label for a file name."""
        ext = path.suffix.lstrip(".").lower()
        if not ext:
            return DEFAULT_OTHER_CATEGORY
        return self.categories.get(ext, DEFAULT_OTHER_CATEGORY)

    def plan(self, directory: Path) -> list[OrganizeMove]:
        """Plan a move for every regular file directly in ``directory``.

        Files are taken in name order. A name already used in the category
        folder gets ``_1``, ``_2``, ... appended.

        Raises:
            PathError: If ``directory`` cannot be listed.

        """
        directory = Path(directory).expanduser()
        try:
            with os.scandir(directory) as entries:
                files = sorted((Path(e.path) for e in entries if e.is_file()), key=lambda p: p.name)
        except OSError as e:
            raise PathError(f"read_dir failed: {directory}: {e}") from e

        moves: list[OrganizeMove] = []
        planned: set[Path] = set()
        for path in files:
            category = self.categorize(path)
            destination = avoid_name_collision(directory / category, path.name, planned)
            planned.add(destination)
            moves.append(OrganizeMove(source=path, destination=destination, category=category))

        return moves

    def organize(self, directory: Path, *, dry_run: bool = False) -> list[OrganizeMove]:
        """Sort ``directory`` into category folders.

        Args:
            directory: Folder to organize (non-recursive).
            dry_run: If True, only plan; nothing is created or moved.

        Returns:
            The planned moves, all applied unless ``dry_run``.

        Raises:
            PathError: If ``directory`` cannot be listed.
            CreateDirectoryError: If a category folder cannot be created.
            MoveError: On the first file that cannot be moved.

        """
        moves = self.plan(directory)

        if dry_run:
            for move in moves:
                self.logger.debug("Would move: %s -> %s", move.source, move.destination)
            return moves

        for index, move in enumerate(moves):
            target_dir = move.destination.parent
            try:
                target_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self.logger.error("Error creating %s: %s", target_dir, e)
                raise CreateDirectoryError(target_dir, str(e), index=index) from e

            try:
                shutil.move(str(move.source), str(move.destination))
            except OSError as e:
                self.logger.error("Error moving %s -> %s: %s", move.source, move.destination, e)
                raise MoveError(move.source, move.destination, str(e), index=index) from e

            self.logger.info("Organized: %s -> %s", move.source.name, move.destination)

        return moves
