"""Favorites sidecar persistence.

The sidecar is UTF-8 text holding one lower-cased relative path per line;
undecodable bytes are carried through untouched. It is rewritten in full on
every mutation through a temporary sibling file and ``os.replace``, so
readers never see a torn file. Concurrent writers still race with
last-writer-wins semantics.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import FavoritesPersistError, FavoritesReadError

logger = logging.getLogger(__name__)

FAVORITES_FILENAME = ".fileexplorer-favorites"


def favorite_key(item: str) -> str:
    """Return the canonical comparison key for a favorite path."""
    return item.strip().lower()


@dataclass(frozen=True)
class FavoriteList:
    """Ordered favorite keys as stored in the sidecar file."""

    items: tuple[str, ...] = ()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, str):
            return False
        return _index_of(self.items, favorite_key(item)) is not None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def count(self, item: str) -> int:
        key = favorite_key(item)
        return sum(1 for existing in self.items if existing == key)


def _index_of(items: tuple[str, ...] | list[str], key: str) -> int | None:
    """Return the first index of ``key`` or ``None`` when absent."""
    for idx, existing in enumerate(items):
        if existing == key:
            return idx
    return None


def load_favorites(path: Path) -> FavoriteList:
    """Read the sidecar at ``path``.

    A missing file is an empty list. Bytes that are not valid UTF-8 are kept
    as surrogate escapes so they survive a rewrite unchanged. Any other read
    failure raises ``FavoritesReadError``; callers must not persist over a
    file they could not read.
    """
    try:
        raw = path.read_text(encoding="utf-8", errors="surrogateescape")
    except FileNotFoundError:
        return FavoriteList()
    except OSError as exc:
        logger.warning("could not read favorites file %s: %s", path, exc)
        raise FavoritesReadError(str(path), reason=str(exc)) from exc

    items = [favorite_key(line) for line in raw.splitlines()]
    return FavoriteList(tuple(item for item in items if item))


def add_favorite(favorites: FavoriteList, item: str) -> FavoriteList:
    """Append ``item`` unless its key is already present."""
    key = favorite_key(item)
    if not key or _index_of(favorites.items, key) is not None:
        return favorites
    return FavoriteList(favorites.items + (key,))


def remove_favorite(favorites: FavoriteList, item: str) -> FavoriteList:
    """Drop every occurrence of ``item``, including historical duplicates."""
    key = favorite_key(item)
    remaining = list(favorites.items)
    while True:
        idx = _index_of(remaining, key)
        if idx is None:
            break
        del remaining[idx]
    if len(remaining) == len(favorites.items):
        return favorites
    return FavoriteList(tuple(remaining))


def _existing_mode(path: Path) -> int | None:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return None


def persist_favorites(path: Path, favorites: FavoriteList, *, param: str = "", item: str = "") -> None:
    """Overwrite the sidecar at ``path`` with ``favorites``.

    A symlinked sidecar is written through to its target, and the permission
    bits of an existing file are kept. Raises ``FavoritesPersistError`` naming
    the file and the item whose mutation triggered the write.
    """
    payload = "\n".join(favorites.items)
    target = Path(os.path.realpath(path)) if path.is_symlink() else path
    tmp_name: str | None = None
    try:
        mode = _existing_mode(target)
        fd, tmp_name = tempfile.mkstemp(prefix=target.name + ".", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            handle.write(payload)
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        logger.error("could not persist favorites to %s (%s=%s): %s", path, param, item, exc)
        raise FavoritesPersistError(str(path), param, item, reason=str(exc)) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
    logger.info("persisted %d favorites to %s", len(favorites), path)


class FavoritesStore:
    """Sidecar-bound facade over the favorites functions."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_root(cls, root: Path) -> FavoritesStore:
        """Store placed at the default sidecar location inside ``root``."""
        return cls(root / FAVORITES_FILENAME)

    def load(self) -> FavoriteList:
        return load_favorites(self.path)

    def add(self, favorites: FavoriteList, item: str) -> FavoriteList:
        return add_favorite(favorites, item)

    def remove(self, favorites: FavoriteList, item: str) -> FavoriteList:
        return remove_favorite(favorites, item)

    def persist(self, favorites: FavoriteList, *, param: str = "", item: str = "") -> None:
        persist_favorites(self.path, favorites, param=param, item=item)


__all__ = [
    "FAVORITES_FILENAME",
    "FavoriteList",
    "FavoritesStore",
    "favorite_key",
    "load_favorites",
    "add_favorite",
    "remove_favorite",
    "persist_favorites",
]
