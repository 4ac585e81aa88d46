"""Category-specific rendering of file contents to HTML fragments.

Text is escaped and bare URLs are turned into links. Markup files go through
Pygments. Images, PDFs and downloads only reference the file by URL. Custom
and markdown transforms are external callables; when they fail or return
nothing the plain text rendering is used instead.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .classifier import Category, Classification, CustomCategory, InputMode

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "default"

_URL_RE = re.compile(
    r"""((?:https?|ftp)://\S*?\.\S*?)([\s)\[\]{},;"'<]|&(?:quot|#x27|lt|gt);|\.\s|$)""",
    re.IGNORECASE,
)


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def autolink(text: str) -> str:
    """Wrap bare ``http``/``https``/``ftp`` URLs of escaped text in anchors."""
    if not text:
        return text
    return _URL_RE.sub(r'<a href="\1" target="_blank">\1</a>\2', text)


def format_text(source: str) -> str:
    """Escaped, auto-linked ``<pre>`` block; empty input gives ``""``."""
    if not source:
        return ""
    return "<pre>" + autolink(html.escape(source)) + "</pre>"


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> HtmlFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using %r", style, DEFAULT_STYLE)
        style = DEFAULT_STYLE
    return HtmlFormatter(style=style, noclasses=True)


def highlight_markup(source: str, filename: str, style: str = DEFAULT_STYLE) -> str:
    """Syntax-highlight ``source`` as HTML, then auto-link URLs."""
    if not source:
        return ""
    try:
        lexer = get_lexer_for_filename(filename, source)
    except ClassNotFound:
        lexer = TextLexer()
    return autolink(highlight(source, lexer, _formatter_for_style(style)))


def embed_image(url: str) -> str:
    return f'<img src="{html.escape(url)}">' if url else ""


def embed_pdf(url: str) -> str:
    return f'<embed src="{html.escape(url)}" type="application/pdf">' if url else ""


def download_link(url: str, name: str) -> str:
    if not url:
        return ""
    return f'<a href="{html.escape(url)}">Download {html.escape(name)}</a>'


def run_transform(function: Callable[[str], str], argument: str) -> str:
    """Call an external transform; failures and non-text output give ``""``."""
    try:
        rendered = function(argument)
    except Exception as exc:
        logger.debug("content transform %r failed: %s", function, exc)
        return ""
    return rendered if isinstance(rendered, str) else ""


def render_file_content(
    path: Path,
    classification: Classification | None,
    *,
    url: str = "",
    style: str = DEFAULT_STYLE,
    text_transform: Callable[[str], str] | None = None,
) -> str:
    """Render the viewer body for ``path`` according to ``classification``.

    ``text_transform`` is only consulted for ``Category.TEXT`` and is passed by
    the caller when the extension is a markdown-like one.
    """
    if classification is None:
        return ""

    if isinstance(classification, CustomCategory):
        if classification.input_mode is InputMode.FILENAME:
            rendered = run_transform(classification.function, str(path))
            return rendered or format_text(read_text(path))
        source = read_text(path)
        return run_transform(classification.function, source) or format_text(source)

    if classification is Category.TEXT:
        source = read_text(path)
        if text_transform is not None and source:
            return run_transform(text_transform, source) or format_text(source)
        return format_text(source)
    if classification is Category.HTML:
        return highlight_markup(read_text(path), path.name, style)
    if classification is Category.IMAGE:
        return embed_image(url)
    if classification is Category.PDF:
        return embed_pdf(url)
    if classification is Category.DOWNLOAD:
        return download_link(url, path.name)
    return ""


__all__ = [
    "DEFAULT_STYLE",
    "read_text",
    "autolink",
    "format_text",
    "highlight_markup",
    "embed_image",
    "embed_pdf",
    "download_link",
    "run_transform",
    "render_file_content",
]
