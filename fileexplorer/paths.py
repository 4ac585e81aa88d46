"""Root containment for caller-supplied paths.

Every path that arrives with a request passes through ``resolve_path`` before
anything else touches the filesystem. The canonical on-disk form (symlinks and
``..`` resolved) must stay at or below the canonical root; anything else is a
``ContainmentError`` and callers fall back to the root itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from .errors import ContainmentError


@dataclass(frozen=True)
class ResolvedPath:
    """Contained location below a browse root."""

    root: Path
    relative: str
    is_dir: bool

    @property
    def absolute(self) -> Path:
        return self.root / self.relative if self.relative else self.root

    @property
    def display(self) -> str:
        """Relative path with the trailing-slash convention for directories."""
        if self.is_dir and self.relative:
            return self.relative + "/"
        return self.relative

    @property
    def parent(self) -> str:
        """Relative directory holding this entry (``""`` for root children)."""
        if "/" not in self.relative:
            return ""
        return self.relative.rsplit("/", 1)[0]

    @property
    def directory(self) -> str:
        """Relative directory the location represents for listing purposes."""
        return self.relative if self.is_dir else self.parent


def canonical_root(root: Path | str) -> Path:
    """Return the absolute canonical form of ``root``."""
    return Path(root).expanduser().resolve()


def normalize_candidate(raw: str) -> str:
    """Normalize separators and strip the outer slashes of a request path."""
    value = raw.strip().replace("\\", "/")
    value = value.strip("/")
    if value == ".":
        return ""
    return value


def _lexical_target(root: Path, candidate: str) -> str:
    return Path(os.path.normpath(os.path.join(str(root), candidate))).as_posix()


def resolve_path(root: Path, candidate: str, *, param: str = "") -> ResolvedPath:
    """Resolve ``candidate`` under ``root`` or raise ``ContainmentError``.

    ``root`` must already be canonical (see ``canonical_root``). Missing
    targets are reported with a lexically normalized path; that path is never
    returned to callers.
    """
    normalized = normalize_candidate(candidate)
    if not normalized:
        return ResolvedPath(root=root, relative="", is_dir=True)

    try:
        resolved = (root / normalized).resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        raise ContainmentError(param, candidate, _lexical_target(root, normalized)) from None

    if not resolved.is_relative_to(root):
        raise ContainmentError(param, candidate, resolved.as_posix())

    relative = resolved.relative_to(root).as_posix()
    if relative == ".":
        relative = ""
    return ResolvedPath(root=root, relative=relative, is_dir=resolved.is_dir())


def resolve_casefolded(root: Path, key: str) -> Path | None:
    """Locate the on-disk entry for a lower-cased relative ``key``.

    Tries the key verbatim first, then walks it segment by segment matching
    names case-insensitively. Returns ``None`` when nothing matches or the
    match escapes ``root``.
    """
    normalized = normalize_candidate(key)
    if not normalized:
        return None

    try:
        direct = (root / normalized).resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        direct = None
    if direct is not None:
        return direct if direct.is_relative_to(root) else None

    current = root
    for segment in normalized.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            current = current.parent
            continue
        exact = current / segment
        if exact.exists():
            current = exact
            continue
        folded = segment.lower()
        try:
            match = next(
                (child for child in sorted(current.iterdir()) if child.name.lower() == folded),
                None,
            )
        except OSError:
            return None
        if match is None:
            return None
        current = match

    try:
        resolved = current.resolve(strict=True)
    except (OSError, RuntimeError):
        return None
    return resolved if resolved.is_relative_to(root) else None


def document_url(path: Path, document_root: Path, prefix: str = "/") -> str:
    """Return the URL of ``path`` relative to ``document_root``.

    Returns ``""`` when ``path`` does not exist or lies outside the document
    root, since the web server could not serve it directly.
    """
    try:
        resolved = path.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return ""
    if not resolved.is_relative_to(document_root):
        return ""
    relative = resolved.relative_to(document_root).as_posix()
    if relative == ".":
        relative = ""
    if relative and resolved.is_dir():
        relative += "/"
    return prefix.rstrip("/") + "/" + quote(relative)


__all__ = [
    "ResolvedPath",
    "canonical_root",
    "normalize_candidate",
    "resolve_path",
    "resolve_casefolded",
    "document_url",
]
