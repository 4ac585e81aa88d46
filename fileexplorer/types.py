"""Request and result datatypes exchanged with front doors and presenters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlencode

from .classifier import Classification, category_name
from .errors import Fault

PARAM_DIR = "dir"
PARAM_FILE = "file"
PARAM_ADD_FAVORITE = "favadd"
PARAM_REMOVE_FAVORITE = "favrem"


def query_link(param: str, value: str) -> str:
    """Return the ``param=value`` query fragment used for navigation links."""
    return urlencode({param: value})


def _first_param(params: Mapping[str, object], name: str) -> str | None:
    value = params.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class NavigationRequest:
    """Raw selectors for one request; nothing here is trusted."""

    directory: str | None = None
    file: str | None = None
    add_favorite: str | None = None
    remove_favorite: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, object]) -> NavigationRequest:
        """Build a request from a query/form mapping (single or list values)."""
        return cls(
            directory=_first_param(params, PARAM_DIR),
            file=_first_param(params, PARAM_FILE),
            add_favorite=_first_param(params, PARAM_ADD_FAVORITE),
            remove_favorite=_first_param(params, PARAM_REMOVE_FAVORITE),
        )

    def selector(self) -> tuple[str, str] | None:
        """Return ``(param, raw value)`` of the honored dir/file selector."""
        if self.directory is not None:
            return PARAM_DIR, self.directory
        if self.file is not None:
            return PARAM_FILE, self.file
        return None


@dataclass(frozen=True)
class Segment:
    """One breadcrumb level; ``link`` is empty for root and the current level."""

    name: str
    link: str
    current: bool = False


@dataclass(frozen=True)
class DirectoryItem:
    name: str
    path: str
    mtime_ns: int | None
    link: str

    kind = "dir"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "name": self.name,
            "path": self.path,
            "mtime_ns": self.mtime_ns,
            "link": self.link,
        }


@dataclass(frozen=True)
class FileItem:
    name: str
    path: str
    extension: str
    size: int | None
    mtime_ns: int | None
    ctime_ns: int | None
    classification: Classification | None
    link: str = ""
    url: str = ""
    add_favorite: str = ""
    in_favorites: bool = False

    kind = "file"

    @property
    def category(self) -> str:
        return category_name(self.classification)

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "name": self.name,
            "path": self.path,
            "extension": self.extension,
            "size": self.size,
            "mtime_ns": self.mtime_ns,
            "ctime_ns": self.ctime_ns,
            "category": self.category,
            "link": self.link,
            "url": self.url,
            "add_favorite": self.add_favorite,
            "in_favorites": self.in_favorites,
        }


@dataclass(frozen=True)
class FavoriteView:
    """Favorite re-verified against the tree at render time."""

    key: str
    title: str
    url: str
    remove_link: str
    indirect: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "title": self.title,
            "url": self.url,
            "remove_link": self.remove_link,
            "indirect": self.indirect,
        }


def _breadcrumb_dicts(breadcrumb: tuple[Segment, ...]) -> list[dict[str, object]]:
    return [{"name": seg.name, "link": seg.link, "current": seg.current} for seg in breadcrumb]


@dataclass(frozen=True)
class DirectoryView:
    current: str
    dirs: tuple[DirectoryItem, ...]
    files: tuple[FileItem, ...]
    favorites: tuple[FavoriteView, ...]
    breadcrumb: tuple[Segment, ...]
    fault: Fault | None = None

    type = "dir"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "current": self.current,
            "dirs": [item.to_dict() for item in self.dirs],
            "files": [item.to_dict() for item in self.files],
            "favorites": [item.to_dict() for item in self.favorites],
            "breadcrumb": _breadcrumb_dicts(self.breadcrumb),
            "fault": self.fault.to_dict() if self.fault else None,
        }


@dataclass(frozen=True)
class FileView:
    current: str
    name: str
    extension: str
    size: int
    created_ns: int
    modified_ns: int
    classification: Classification | None
    css_class: str
    content: str
    add_favorite: str
    breadcrumb: tuple[Segment, ...]
    fault: Fault | None = None

    type = "file"

    @property
    def category(self) -> str:
        return category_name(self.classification)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "current": self.current,
            "name": self.name,
            "extension": self.extension,
            "size": self.size,
            "created_ns": self.created_ns,
            "modified_ns": self.modified_ns,
            "category": self.category,
            "class": self.css_class,
            "content": self.content,
            "add_favorite": self.add_favorite,
            "breadcrumb": _breadcrumb_dicts(self.breadcrumb),
            "fault": self.fault.to_dict() if self.fault else None,
        }


@dataclass(frozen=True)
class FaultView:
    """Terminal configuration fault: no listing or content is produced."""

    fault: Fault
    root: str = ""
    favorites_path: str = ""
    current: str = ""
    breadcrumb: tuple[Segment, ...] = ()

    type = "error"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "current": self.current,
            "root": self.root,
            "favorites_path": self.favorites_path,
            "fault": self.fault.to_dict(),
        }


NavigationResult = DirectoryView | FileView | FaultView


__all__ = [
    "PARAM_DIR",
    "PARAM_FILE",
    "PARAM_ADD_FAVORITE",
    "PARAM_REMOVE_FAVORITE",
    "query_link",
    "NavigationRequest",
    "Segment",
    "DirectoryItem",
    "FileItem",
    "FavoriteView",
    "DirectoryView",
    "FileView",
    "FaultView",
    "NavigationResult",
]
