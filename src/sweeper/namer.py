"""Pick destination paths that do not overwrite existing entries.

Both helpers only check for existence; they never create anything. The check is
not atomic, so a path may still be taken by another process before it is used.
"""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path


def _is_free(candidate: Path, taken: Collection[Path]) -> bool:
    return candidate not in taken and not candidate.exists()


def avoid_collision(target: Path, taken: Collection[Path] = ()) -> Path:
    """Return ``target``, or ``target_1``, ``target_2``, ... if it is in use.

    The counter is appended to the full path string, so ``archive/foo`` becomes
    ``archive/foo_1``.

    Args:
        target: Desired destination.
        taken: Destinations already handed out but not yet on disk.

    Returns:
        The first candidate that neither exists nor is in ``taken``.

    """
    if _is_free(target, taken):
        return target

    counter = 1
    while True:
        candidate = Path(f"{target}_{counter}")
        if _is_free(candidate, taken):
            return candidate
        counter += 1


def avoid_name_collision(directory: Path, name: str, taken: Collection[Path] = ()) -> Path:
    """Return ``directory / name``, appending ``_1``, ``_2``, ... to ``name`` while in use."""
    candidate = directory / name
    counter = 1
    while not _is_free(candidate, taken):
        candidate = directory / f"{name}_{counter}"
        counter += 1
    return candidate
