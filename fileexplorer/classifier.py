"""Extension-based content classification.

Maps lower-cased extensions to a ``Classification``: one of the built-in
``Category`` members or a ``CustomCategory`` wrapping an external rendering
function. Also tracks which extensions may be opened by direct link instead
of through the viewer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    TEXT = "text"
    HTML = "html"
    IMAGE = "image"
    PDF = "pdf"
    DOWNLOAD = "download"


class InputMode(Enum):
    """What a custom content function receives."""

    FILENAME = "filename"
    CONTENTS = "contents"


@dataclass(frozen=True)
class CustomCategory:
    """Externally supplied renderer: ``function(arg) -> html``."""

    function: Callable[[str], str]
    input_mode: InputMode = InputMode.CONTENTS


Classification = Category | CustomCategory

_CATEGORY_ALIASES = {
    "text": Category.TEXT,
    "html": Category.HTML,
    "image": Category.IMAGE,
    "img": Category.IMAGE,
    "pdf": Category.PDF,
    "download": Category.DOWNLOAD,
    "down": Category.DOWNLOAD,
}

DEFAULT_CONTENTS: dict[str, Category] = {
    "htm": Category.HTML,
    "html": Category.HTML,
    "php": Category.HTML,
    "txt": Category.TEXT,
    "md": Category.TEXT,
    "ini": Category.TEXT,
    "json": Category.TEXT,
    "css": Category.TEXT,
    "jpg": Category.IMAGE,
    "jpeg": Category.IMAGE,
    "gif": Category.IMAGE,
    "svg": Category.IMAGE,
    "ico": Category.IMAGE,
    "png": Category.IMAGE,
    "pdf": Category.PDF,
}

DEFAULT_FOLLOW_LINKS = ("html", "htm", "php")


def normalize_extension(extension: str) -> str:
    return extension.strip().lower().lstrip(".")


def category_from_name(name: str) -> Category:
    """Parse a category name (aliases ``img`` and ``down`` accepted)."""
    try:
        return _CATEGORY_ALIASES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown content category: {name!r}") from None


def category_name(classification: Classification | None) -> str:
    """Short label for a classification (``""`` when unclassified)."""
    if classification is None:
        return ""
    if isinstance(classification, CustomCategory):
        return "custom"
    return classification.value


class ContentClassifier:
    """Mutable extension table, configured before requests are served."""

    def __init__(
        self,
        contents: dict[str, Classification] | None = None,
        follow_links: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        self._contents: dict[str, Classification] = dict(DEFAULT_CONTENTS if contents is None else contents)
        self._follow_links: list[str] = list(DEFAULT_FOLLOW_LINKS if follow_links is None else follow_links)

    def copy(self) -> ContentClassifier:
        return ContentClassifier(dict(self._contents), list(self._follow_links))

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(sorted(self._contents))

    @property
    def follow_links(self) -> tuple[str, ...]:
        return tuple(self._follow_links)

    def classify(self, extension: str) -> Classification | None:
        """Return the classification for ``extension`` or ``None``."""
        return self._contents.get(normalize_extension(extension))

    def followable(self, extension: str) -> bool:
        """Whether entries with ``extension`` may be opened by direct link."""
        return normalize_extension(extension) in self._follow_links

    def set_contents(
        self,
        extension: str,
        handler: Category | str | Callable[[str], str],
        input_mode: InputMode | str = InputMode.CONTENTS,
    ) -> None:
        """Associate ``extension`` with a category name/member or a function."""
        extension = normalize_extension(extension)
        if not extension:
            return
        if isinstance(handler, Category):
            self._contents[extension] = handler
        elif isinstance(handler, str):
            self._contents[extension] = category_from_name(handler)
        elif callable(handler):
            if isinstance(input_mode, str):
                input_mode = InputMode(input_mode.strip().lower() or InputMode.CONTENTS.value)
            self._contents[extension] = CustomCategory(function=handler, input_mode=input_mode)
        else:
            raise TypeError(f"unsupported content handler for {extension!r}: {handler!r}")

    def remove_contents(self, extension: str) -> None:
        self._contents.pop(normalize_extension(extension), None)

    def add_follow_link(self, extension: str) -> None:
        extension = normalize_extension(extension)
        if extension and extension not in self._follow_links:
            self._follow_links.append(extension)

    def remove_follow_link(self, extension: str) -> None:
        extension = normalize_extension(extension)
        if extension in self._follow_links:
            self._follow_links.remove(extension)

    def clear_follow_links(self) -> None:
        self._follow_links.clear()


__all__ = [
    "Category",
    "InputMode",
    "CustomCategory",
    "Classification",
    "ContentClassifier",
    "DEFAULT_CONTENTS",
    "DEFAULT_FOLLOW_LINKS",
    "normalize_extension",
    "category_from_name",
    "category_name",
]
