"""HTML presentation of navigation results.

Consumes only the structured result; never touches the filesystem. Links in
results are query fragments which get appended to ``base_link``.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from html import escape

from .errors import CONTAINMENT_FAULT, FAVORITES_FAULT, Fault
from .types import DirectoryView, FileView, NavigationResult, Segment

_BYTE_SUFFIXES = ("", "K", "M", "G")
_BYTE_SUFFIXES_FULL = (" bytes", " KB", " MB", " GB")


def format_bytes(size: int, full_suffix: bool = False) -> str:
    """Human-readable size, e.g. ``1K`` or ``1 KB`` for 1024 bytes."""
    suffixes = _BYTE_SUFFIXES_FULL if full_suffix else _BYTE_SUFFIXES
    value = float(max(0, size))
    idx = 0
    while value >= 1024 and idx < len(suffixes) - 1:
        value /= 1024
        idx += 1
    return f"{value:,.2f}".replace(".00", "") + suffixes[idx]


def format_timestamp(ns: int) -> str:
    return datetime.fromtimestamp(ns / 1_000_000_000).strftime("%Y/%m/%d %H:%M:%S")


def normalize_base_link(base_link: str) -> str:
    """Return ``base_link`` ready for a query fragment to be appended."""
    base_link = base_link.strip()
    return base_link + ("&" if "?" in base_link else "?")


def _favorites_block(result: DirectoryView, base: str) -> str:
    if not result.favorites:
        return ""
    out = ['<div class="x-favorites">']
    for idx, favorite in enumerate(result.favorites):
        if favorite.indirect:
            href = base + favorite.url
            target = ""
            icon = "bi-star-indirect"
        else:
            href = favorite.url
            target = f' target="xfav_{idx}"'
            icon = "bi-star-fill"
        out.append(
            f'<div><i class="bi {icon}"></i> '
            f'<a href="{escape(href)}"{target}>{escape(favorite.title)}</a> '
            f'<a href="{escape(base + favorite.remove_link)}" class="x-favlink" title="Remove from favorites">'
            '<i class="bi bi-dash-circle"></i></a></div>'
        )
    out.append("</div>\n")
    return "".join(out)


def _breadcrumb_block(breadcrumb: tuple[Segment, ...], result: NavigationResult, base: str) -> tuple[str, str]:
    """Return ``(markup, parent_link)`` for the breadcrumb row."""
    if not breadcrumb:
        return "", ""
    home = base[:-1]
    parent_link = ""
    out = ['<p class="x-folder">']
    first_linked = True
    for segment in breadcrumb:
        name = escape(segment.name)
        if segment.name == "." and not segment.link:
            parent_link = home
            out.append(f'<a href="{escape(home)}" class="root">Home</a> ')
            continue
        if segment.link:
            parent_link = base + segment.link
            anchor = f'<a href="{escape(parent_link)}">{name}</a>'
            out.append(f"<b>{anchor}</b>" if first_linked else anchor)
            first_linked = False
            out.append(" / ")
            continue
        out.append(f"<b>{name}</b>")
        if result.type != "file":
            out.append(" / ")
    if isinstance(result, FileView) and result.add_favorite:
        out.append(
            f' <a href="{escape(base + result.add_favorite)}" class="x-favlink" title="Add to favorites">'
            '<i class="bi bi-plus-circle"></i></a>'
        )
    out.append("</p>\n")
    if len(breadcrumb) == 1:
        # Root listing: there is no level above.
        parent_link = ""
    return "".join(out), parent_link


def _fault_block(fault: Fault, base: str) -> str:
    details = fault.details
    if fault.code == CONTAINMENT_FAULT:
        body = (
            '<b class="x-error">Reference not found</b>'
            f'<p class="x-info">{escape(details.get("param", ""))} = {escape(details.get("value", ""))}</p>'
        )
    elif fault.code == FAVORITES_FAULT:
        body = (
            '<b class="x-error">Could not save favorites</b>'
            f'<p class="x-info">File location: {escape(details.get("favorites", ""))}</p>'
        )
    else:
        listed = "\n".join(f"{key}: {value}" for key, value in sorted(details.items()))
        body = (
            f'<b class="x-error">An error has occurred ({fault.code})</b>'
            '<div style="margin-top:10px" class="x-info">'
            f"The following details are available: <pre>{escape(listed)}</pre></div>"
        )
    return body + f'<a href="{escape(base[:-1])}">Back to start</a>'


def _file_block(result: FileView) -> str:
    return (
        '<div class="x-info"><table>'
        f"<tr><td><b>Created:</b></td><td>{format_timestamp(result.created_ns)}</td></tr>"
        f"<tr><td><b>Last modified:</b></td><td>{format_timestamp(result.modified_ns)}</td></tr>"
        f"<tr><td><b>Size:</b></td><td>{format_bytes(result.size, True)}</td></tr>"
        "</table></div>"
        f'<div class="x-{escape(result.css_class)}">{result.content}</div>'
    )


def _listing_block(result: DirectoryView, base: str, parent_link: str) -> str:
    out: list[str] = []
    if parent_link:
        out.append(
            f'<div class="x-folder"><i class="bi bi-folder-fill"></i> <a href="{escape(parent_link)}"><b> . . </b></a></div>'
        )
    for item in result.dirs:
        out.append(
            f'<div class="x-folder"><i class="bi bi-folder-fill"></i> '
            f'<a href="{escape(base + item.link)}"> {escape(item.name)}</a></div>'
        )
    for item in result.files:
        label = escape(item.name)
        if item.link:
            label = f'<a href="{escape(base + item.link)}">{label}</a>'
        if item.url:
            target = "x-" + hashlib.md5(item.url.encode("utf-8"), usedforsecurity=False).hexdigest()
            label += (
                f' <a href="{escape(item.url)}" class="x-favlink" title="Open" target="{target}">'
                '<i class="bi bi-box-arrow-up-right"></i></a>'
            )
        if item.add_favorite:
            label += (
                f' <a href="{escape(base + item.add_favorite)}" class="x-favlink" title="Add to favorites">'
                '<i class="bi bi-plus-circle"></i></a>'
            )
        if item.in_favorites:
            icon = "bi-file-check"
        elif item.category:
            icon = f"bi-file-{item.category}"
        else:
            icon = "bi-file"
        out.append(f'<div class="x-file"><i class="bi {icon}"></i> {label}</div>')
    return "".join(out)


def _totals_block(result: DirectoryView) -> str:
    total_dirs = len(result.dirs)
    total_files = len(result.files)
    if total_dirs + total_files == 0:
        return ""
    out = [f'<div class="x-totals">Found {total_dirs + total_files} item(s): ']
    if total_dirs:
        out.append(f" {total_dirs} directory(ies)")
    if total_files:
        out.append(f" {total_files} file(s)")
    out.append("</div>")
    return "".join(out)


def render_html(result: NavigationResult, base_link: str = "") -> str:
    """Render ``result`` as the explorer HTML fragment."""
    base = normalize_base_link(base_link)
    out = ['<div class="x-explorer">']

    if isinstance(result, DirectoryView):
        out.append(_favorites_block(result, base))

    breadcrumb, parent_link = _breadcrumb_block(result.breadcrumb, result, base)
    out.append(breadcrumb)

    if result.fault is not None:
        out.append(_fault_block(result.fault, base))
    if isinstance(result, FileView):
        out.append(_file_block(result))
    elif isinstance(result, DirectoryView):
        out.append(_listing_block(result, base, parent_link))

    out.append("</div>")
    if isinstance(result, DirectoryView):
        out.append(_totals_block(result))
    return "".join(out)


__all__ = [
    "format_bytes",
    "format_timestamp",
    "normalize_base_link",
    "render_html",
]
