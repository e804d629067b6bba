"""Exception hierarchy for sweeper."""

from __future__ import annotations

from pathlib import Path


class SweeperError(Exception):
    """Base error for the project."""


class ScanError(SweeperError):
    """A scan could not be completed."""


class PathError(ScanError):
    """A root or destination path is missing or cannot be canonicalized."""


class ComputeError(ScanError):
    """The staleness cutoff could not be computed."""


class PlanError(SweeperError):
    """An archive plan could not be built from a scan report."""


class ExecError(SweeperError):
    """Applying a plan or deleting items stopped at a failing step.

    ``index`` is the position of that step in its sequence, when known.
    """

    index: int | None = None


class MoveError(ExecError):
    """A single move failed."""

    def __init__(self, source: Path, destination: Path, reason: str, index: int | None = None) -> None:
        self.source = source
        self.destination = destination
        self.reason = reason
        self.index = index
        super().__init__(f"Failed to move '{source}' -> '{destination}': {reason}")


class TrashError(ExecError):
    """Sending an item to the system trash failed."""

    def __init__(self, path: Path, reason: str, index: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.index = index
        super().__init__(f"Failed to move '{path}' to trash: {reason}")


class CreateDirectoryError(ExecError):
    """A destination directory could not be created."""

    def __init__(self, path: Path, reason: str, index: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.index = index
        super().__init__(f"Failed to create dir: {path}: {reason}")
