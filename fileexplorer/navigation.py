"""Per-request navigation engine.

``Explorer.explore`` runs one stateless pass:

1. establish the document root and the browse root (terminal faults 1/2)
2. resolve the dir/file selector under the root (fault 3 degrades to root)
3. apply at most one favorites mutation (fault 4 never blocks output)
4. list the target directory or describe the target file

Nothing is cached between calls; the favorites sidecar on disk is the only
state shared across requests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .classifier import Category, Classification, ContentClassifier, CustomCategory, normalize_extension
from .content import DEFAULT_STYLE, render_file_content
from .errors import (
    ContainmentError,
    ConfigurationError,
    DocumentRootError,
    ExplorerError,
    Fault,
    FavoritesPersistError,
    FavoritesReadError,
    RootError,
)
from .favorites import (
    FAVORITES_FILENAME,
    FavoriteList,
    add_favorite,
    favorite_key,
    load_favorites,
    persist_favorites,
    remove_favorite,
)
from .listing import list_directory_children
from .paths import (
    ResolvedPath,
    canonical_root,
    document_url,
    normalize_candidate,
    resolve_casefolded,
    resolve_path,
)
from .types import (
    PARAM_ADD_FAVORITE,
    PARAM_DIR,
    PARAM_FILE,
    PARAM_REMOVE_FAVORITE,
    DirectoryItem,
    DirectoryView,
    FaultView,
    FavoriteView,
    FileItem,
    FileView,
    NavigationRequest,
    NavigationResult,
    Segment,
    query_link,
)

logger = logging.getLogger(__name__)

DOCUMENT_ROOT_ENV = "DOCUMENT_ROOT"
MARKDOWN_EXTENSIONS = ("md", "markdown")


@dataclass(frozen=True)
class Roots:
    """Canonical locations derived at the start of a request."""

    document_root: Path
    root: Path
    favorites_path: Path


def build_breadcrumb(target: ResolvedPath) -> tuple[Segment, ...]:
    """Segments from the root (``.``) down to ``target``; last one unlinked."""
    if not target.relative:
        return (Segment(".", "", current=True),)
    parts = target.relative.split("/")
    segments = [Segment(".", "")]
    for idx, name in enumerate(parts[:-1]):
        prefix = "/".join(parts[: idx + 1])
        segments.append(Segment(name, query_link(PARAM_DIR, prefix)))
    segments.append(Segment(parts[-1], "", current=True))
    return tuple(segments)


def css_class_for(classification: Classification | None, extension: str) -> str:
    if classification is None:
        return ""
    if isinstance(classification, CustomCategory):
        return extension
    if classification is Category.HTML:
        return Category.TEXT.value
    return classification.value


def _blank(value: Path | str | None) -> bool:
    return value is None or not str(value).strip()


class Explorer:
    """Configured navigation engine; ``explore`` is safe to call per request."""

    def __init__(
        self,
        root: Path | str | None = None,
        *,
        document_root: Path | str | None = None,
        favorites_path: Path | str | None = None,
        use_favorites: bool = True,
        show_hidden: bool = False,
        classifier: ContentClassifier | None = None,
        text_transform: Callable[[str], str] | None = None,
        markdown_extensions: tuple[str, ...] = MARKDOWN_EXTENSIONS,
        style: str = DEFAULT_STYLE,
        url_prefix: str = "/",
    ) -> None:
        self.root = root
        self.document_root = document_root
        self.favorites_path = favorites_path
        self.use_favorites = use_favorites
        self.show_hidden = show_hidden
        self.classifier = classifier if classifier is not None else ContentClassifier()
        self.text_transform = text_transform
        self.markdown_extensions = tuple(normalize_extension(ext) for ext in markdown_extensions)
        self.style = style
        self.url_prefix = url_prefix

    def resolve_roots(self) -> Roots:
        """Establish document root, browse root and favorites sidecar path.

        Raises ``DocumentRootError`` (code 1) or ``RootError`` (code 2).
        """
        raw_document_root = self.document_root
        if _blank(raw_document_root):
            raw_document_root = os.environ.get(DOCUMENT_ROOT_ENV) or self.root
        if _blank(raw_document_root):
            raise DocumentRootError("")
        document_root = Path(str(raw_document_root).strip()).expanduser()
        if not document_root.is_dir():
            raise DocumentRootError(str(raw_document_root))
        document_root = canonical_root(document_root)

        if _blank(self.root):
            root = document_root
        else:
            root_candidate = Path(str(self.root).strip()).expanduser()
            if not root_candidate.is_dir():
                raise RootError(str(self.root))
            root = canonical_root(root_candidate)

        if _blank(self.favorites_path):
            favorites_path = root / FAVORITES_FILENAME
        else:
            favorites_path = Path(str(self.favorites_path).strip()).expanduser()
        return Roots(document_root=document_root, root=root, favorites_path=favorites_path)

    def explore(self, request: NavigationRequest | None = None) -> NavigationResult:
        """Run one navigation pass for ``request`` (defaults to the root)."""
        if request is None:
            request = NavigationRequest()
        try:
            roots = self.resolve_roots()
        except ConfigurationError as exc:
            logger.warning("explorer configuration fault %d: %s", exc.code, exc)
            return FaultView(
                fault=exc.to_fault(),
                root="" if _blank(self.root) else str(self.root),
                favorites_path="" if _blank(self.favorites_path) else str(self.favorites_path),
            )
        return _NavigationPass(self, roots, request).run()


class _NavigationPass:
    """Mutable per-request state; discarded once a result is produced."""

    def __init__(self, explorer: Explorer, roots: Roots, request: NavigationRequest) -> None:
        self.explorer = explorer
        self.classifier = explorer.classifier
        self.roots = roots
        self.root = roots.root
        self.request = request
        self.selector = request.selector()
        self.target = ResolvedPath(root=self.root, relative="", is_dir=True)
        self.favorites = FavoriteList()
        self.fault: Fault | None = None

    def run(self) -> NavigationResult:
        self._resolve_target()
        if self.explorer.use_favorites and self._load_favorites():
            if self.request.add_favorite is not None:
                self._add_favorite(self.request.add_favorite)
            elif self.request.remove_favorite is not None:
                self._remove_favorite(self.request.remove_favorite)

        if self.target.is_dir:
            return self._list_directory()
        return self._describe_file()

    def _report(self, exc: ExplorerError) -> None:
        logger.warning("navigation fault %d: %s", exc.code, exc)
        if self.fault is None:
            self.fault = exc.to_fault()

    def _reset_to_root(self) -> None:
        self.target = ResolvedPath(root=self.root, relative="", is_dir=True)

    def _resolve_target(self) -> None:
        if self.selector is None:
            return
        param, value = self.selector
        try:
            self.target = resolve_path(self.root, value, param=param)
        except ContainmentError as exc:
            self._report(exc)
            self._reset_to_root()

    def _pending_mutation(self) -> tuple[str | None, str | None]:
        if self.request.add_favorite is not None:
            return PARAM_ADD_FAVORITE, self.request.add_favorite
        if self.request.remove_favorite is not None:
            return PARAM_REMOVE_FAVORITE, self.request.remove_favorite
        return None, None

    def _load_favorites(self) -> bool:
        """Load the sidecar; on a read failure no mutation may overwrite it."""
        try:
            self.favorites = load_favorites(self.roots.favorites_path)
        except FavoritesReadError as exc:
            param, item = self._pending_mutation()
            self._report(FavoritesReadError(exc.path, param, item))
            return False
        return True

    def _persist(self, param: str, item: str) -> None:
        try:
            persist_favorites(self.roots.favorites_path, self.favorites, param=param, item=item)
        except FavoritesPersistError as exc:
            self._report(exc)

    def _add_favorite(self, raw: str) -> None:
        try:
            resolved = resolve_path(self.root, raw, param=PARAM_ADD_FAVORITE)
        except ContainmentError:
            logger.info("ignoring favorite %r: no such file under root", raw)
            return
        if resolved.is_dir:
            logger.info("ignoring favorite %r: not a file", raw)
            return

        if self.selector is None:
            self.target = ResolvedPath(root=self.root, relative=resolved.parent, is_dir=True)

        key = favorite_key(resolved.relative)
        updated = add_favorite(self.favorites, key)
        if updated is self.favorites:
            return
        self.favorites = updated
        self._persist(PARAM_ADD_FAVORITE, key)

    def _remove_favorite(self, raw: str) -> None:
        key = favorite_key(normalize_candidate(raw))
        if not key:
            return
        updated = remove_favorite(self.favorites, key)
        if updated is self.favorites:
            return
        self.favorites = updated

        if self.selector is None and "/" in key:
            parent = resolve_casefolded(self.root, key.rsplit("/", 1)[0])
            if parent is not None and parent.is_dir():
                self.target = ResolvedPath(
                    root=self.root,
                    relative=parent.relative_to(self.root).as_posix(),
                    is_dir=True,
                )
        self._persist(PARAM_REMOVE_FAVORITE, key)

    def _url(self, path: Path) -> str:
        return document_url(path, self.roots.document_root, self.explorer.url_prefix)

    def _in_favorites(self, relative: str) -> bool:
        return self.explorer.use_favorites and relative in self.favorites

    def _list_directory(self) -> DirectoryView:
        children, scan_error = list_directory_children(self.target.absolute, self.explorer.show_hidden)
        if scan_error is not None:
            logger.warning("could not list %s: %s", self.target.absolute, scan_error)

        base = self.target.relative
        dirs: list[DirectoryItem] = []
        files: list[FileItem] = []
        for child in children:
            relative = f"{base}/{child.name}" if base else child.name
            if child.is_dir:
                dirs.append(
                    DirectoryItem(
                        name=child.name,
                        path=relative,
                        mtime_ns=child.mtime_ns,
                        link=query_link(PARAM_DIR, relative),
                    )
                )
                continue

            extension = child.extension
            classification = self.classifier.classify(extension)
            follow = self.classifier.followable(extension)
            in_favorites = self._in_favorites(relative)
            add_link = ""
            if self.explorer.use_favorites and not in_favorites and follow:
                add_link = query_link(PARAM_ADD_FAVORITE, relative)
            files.append(
                FileItem(
                    name=child.name,
                    path=relative,
                    extension=extension,
                    size=child.file_size,
                    mtime_ns=child.mtime_ns,
                    ctime_ns=child.ctime_ns,
                    classification=classification,
                    link=query_link(PARAM_FILE, relative) if classification is not None else "",
                    url=self._url(child.path) if follow else "",
                    add_favorite=add_link,
                    in_favorites=in_favorites,
                )
            )

        return DirectoryView(
            current=self.target.relative,
            dirs=tuple(dirs),
            files=tuple(files),
            favorites=self._favorite_views(),
            breadcrumb=build_breadcrumb(self.target),
            fault=self.fault,
        )

    def _favorite_views(self) -> tuple[FavoriteView, ...]:
        if not self.explorer.use_favorites:
            return ()
        views: dict[str, FavoriteView] = {}
        for key in self.favorites:
            if key in views:
                continue
            located = resolve_casefolded(self.root, key)
            if located is None or not located.is_file():
                continue
            title = located.relative_to(self.root).as_posix()
            url = self._url(located)
            indirect = not url or not self.classifier.followable(located.suffix)
            if indirect:
                url = query_link(PARAM_FILE, title)
            views[key] = FavoriteView(
                key=key,
                title=title,
                url=url,
                remove_link=query_link(PARAM_REMOVE_FAVORITE, key),
                indirect=indirect,
            )
        return tuple(views[key] for key in sorted(views))

    def _describe_file(self) -> NavigationResult:
        path = self.target.absolute
        try:
            stat = path.stat()
        except OSError:
            param, value = self.selector if self.selector is not None else (PARAM_FILE, self.target.relative)
            self._report(ContainmentError(param, value, path.as_posix()))
            self._reset_to_root()
            return self._list_directory()

        extension = normalize_extension(path.suffix)
        classification = self.classifier.classify(extension)
        text_transform = None
        if extension in self.explorer.markdown_extensions:
            text_transform = self.explorer.text_transform
        try:
            content = render_file_content(
                path,
                classification,
                url=self._url(path),
                style=self.explorer.style,
                text_transform=text_transform,
            )
        except OSError as exc:
            logger.warning("could not read %s: %s", path, exc)
            content = ""

        add_link = ""
        if self.explorer.use_favorites and not self._in_favorites(self.target.relative):
            add_link = query_link(PARAM_ADD_FAVORITE, self.target.relative)

        return FileView(
            current=self.target.relative,
            name=path.name,
            extension=extension,
            size=int(stat.st_size),
            created_ns=int(stat.st_ctime_ns),
            modified_ns=int(stat.st_mtime_ns),
            classification=classification,
            css_class=css_class_for(classification, extension),
            content=content,
            add_favorite=add_link,
            breadcrumb=build_breadcrumb(self.target),
            fault=self.fault,
        )


__all__ = [
    "DOCUMENT_ROOT_ENV",
    "MARKDOWN_EXTENSIONS",
    "Roots",
    "Explorer",
    "build_breadcrumb",
    "css_class_for",
]
