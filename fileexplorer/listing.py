"""One-level directory scanning with per-entry stat tolerance."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryChild:
    """One visible directory child plus stat metadata observed at scan time."""

    index: int
    name: str
    path: Path
    is_dir: bool
    file_size: int | None
    mtime_ns: int
    ctime_ns: int

    @property
    def extension(self) -> str:
        if self.is_dir:
            return ""
        suffix = Path(self.name).suffix
        return suffix[1:].lower() if suffix else ""


def sort_children(children: list[DirectoryChild]) -> list[DirectoryChild]:
    """Order by case-insensitive name, scan order breaking ties."""
    return sorted(children, key=lambda child: (child.name.lower(), child.index))


def list_directory_children(
    directory: Path,
    show_hidden: bool = False,
) -> tuple[list[DirectoryChild], Exception | None]:
    """List immediate children of ``directory``.

    Returns ``(children, scan_error)``; ``scan_error`` is set when the
    directory itself cannot be scanned. Children whose stat fails (for
    example because they vanished mid-scan or are dangling links) are
    omitted rather than failing the listing.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for index, child in enumerate(entries):
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    stat = child.stat()
                    is_dir = child.is_dir()
                except OSError as exc:
                    logger.debug("skipping %s: %s", child.path, exc)
                    continue

                children.append(
                    DirectoryChild(
                        index=index,
                        name=name,
                        path=Path(child.path),
                        is_dir=is_dir,
                        file_size=None if is_dir else int(stat.st_size),
                        mtime_ns=int(stat.st_mtime_ns),
                        ctime_ns=int(stat.st_ctime_ns),
                    )
                )
    except OSError as exc:
        return [], exc

    return sort_children(children), None


__all__ = [
    "DirectoryChild",
    "sort_children",
    "list_directory_children",
]
