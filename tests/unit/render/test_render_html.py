"""Tests for the HTML presenter over hand-built results."""

from __future__ import annotations

import re
import unittest

from fileexplorer.classifier import Category
from fileexplorer.errors import Fault
from fileexplorer.render import format_bytes, normalize_base_link, render_html
from fileexplorer.types import (
    DirectoryItem,
    DirectoryView,
    FaultView,
    FavoriteView,
    FileItem,
    FileView,
    Segment,
)


def _file_item(name: str, **kwargs) -> FileItem:
    defaults = dict(
        path=name,
        extension=name.rsplit(".", 1)[-1],
        size=10,
        mtime_ns=0,
        ctime_ns=0,
        classification=None,
    )
    defaults.update(kwargs)
    return FileItem(name=name, **defaults)


class FormattingTests(unittest.TestCase):
    def test_format_bytes(self) -> None:
        self.assertEqual(format_bytes(0), "0")
        self.assertEqual(format_bytes(500, True), "500 bytes")
        self.assertEqual(format_bytes(1024), "1K")
        self.assertEqual(format_bytes(1024, True), "1 KB")
        self.assertEqual(format_bytes(1536), "1.50K")
        self.assertEqual(format_bytes(3 * 1024 * 1024 * 1024, True), "3 GB")

    def test_normalize_base_link(self) -> None:
        self.assertEqual(normalize_base_link(""), "?")
        self.assertEqual(normalize_base_link("index.php"), "index.php?")
        self.assertEqual(normalize_base_link("index.php?page=files"), "index.php?page=files&")


class DirectoryRenderTests(unittest.TestCase):
    def test_root_listing(self) -> None:
        view = DirectoryView(
            current="",
            dirs=(DirectoryItem(name="docs", path="docs", mtime_ns=0, link="dir=docs"),),
            files=(
                _file_item(
                    "index.html",
                    classification=Category.HTML,
                    link="file=index.html",
                    url="/index.html",
                    add_favorite="favadd=index.html",
                ),
                _file_item("run.sh"),
            ),
            favorites=(),
            breadcrumb=(Segment(".", "", current=True),),
        )

        rendered = render_html(view, "app.php")

        self.assertTrue(rendered.startswith('<div class="x-explorer">'))
        self.assertIn('<a href="app.php" class="root">Home</a>', rendered)
        self.assertNotIn(" . . ", rendered)
        self.assertIn('<a href="app.php?dir=docs"> docs</a>', rendered)
        self.assertIn('<a href="app.php?file=index.html">index.html</a>', rendered)
        self.assertIn('href="/index.html" class="x-favlink" title="Open"', rendered)
        self.assertIn('href="app.php?favadd=index.html"', rendered)
        self.assertIn('<i class="bi bi-file-html"></i>', rendered)
        self.assertIn('<i class="bi bi-file"></i> run.sh</div>', rendered)
        self.assertTrue(rendered.endswith("Found 3 item(s):  1 directory(ies) 2 file(s)</div>"))

    def test_nested_listing_has_parent_row_and_favorites(self) -> None:
        view = DirectoryView(
            current="sub/dir",
            dirs=(),
            files=(_file_item("file.txt", path="sub/dir/file.txt", in_favorites=True),),
            favorites=(
                FavoriteView(
                    key="docs/page.html",
                    title="docs/Page.html",
                    url="/docs/Page.html",
                    remove_link="favrem=docs%2Fpage.html",
                    indirect=False,
                ),
                FavoriteView(
                    key="sub/dir/file.txt",
                    title="sub/dir/file.txt",
                    url="file=sub%2Fdir%2Ffile.txt",
                    remove_link="favrem=sub%2Fdir%2Ffile.txt",
                    indirect=True,
                ),
            ),
            breadcrumb=(Segment(".", ""), Segment("sub", "dir=sub"), Segment("dir", "", current=True)),
        )

        rendered = render_html(view)

        self.assertIn('<a href="?dir=sub"><b> . . </b></a>', rendered)
        self.assertIn('<b><a href="?dir=sub">sub</a></b> / <b>dir</b> / ', rendered)
        self.assertIn('<a href="/docs/Page.html" target="xfav_0">docs/Page.html</a>', rendered)
        self.assertIn('<a href="?file=sub%2Fdir%2Ffile.txt">sub/dir/file.txt</a>', rendered)
        self.assertIn('href="?favrem=docs%2Fpage.html"', rendered)
        self.assertIn("bi-file-check", rendered)

    def test_containment_fault_block(self) -> None:
        view = DirectoryView(
            current="",
            dirs=(),
            files=(),
            favorites=(),
            breadcrumb=(Segment(".", "", current=True),),
            fault=Fault(3, {"param": "file", "value": "../<x>", "path": "/x"}),
        )

        rendered = render_html(view)

        self.assertIn("Reference not found", rendered)
        self.assertIn("file = ../&lt;x&gt;", rendered)
        self.assertNotIn("x-totals", rendered)


class FileRenderTests(unittest.TestCase):
    def _view(self, **kwargs) -> FileView:
        defaults = dict(
            current="notes.md",
            name="notes.md",
            extension="md",
            size=1024,
            created_ns=1_700_000_000 * 1_000_000_000,
            modified_ns=1_700_000_000 * 1_000_000_000,
            classification=Category.TEXT,
            css_class="text",
            content="<pre>hi</pre>",
            add_favorite="favadd=notes.md",
            breadcrumb=(Segment(".", ""), Segment("notes.md", "", current=True)),
        )
        defaults.update(kwargs)
        return FileView(**defaults)

    def test_file_view(self) -> None:
        rendered = render_html(self._view())

        self.assertIn("<b>notes.md</b>", rendered)
        self.assertNotIn("<b>notes.md</b> / ", rendered)
        self.assertIn('href="?favadd=notes.md" class="x-favlink" title="Add to favorites"', rendered)
        self.assertIn("<td>1 KB</td>", rendered)
        self.assertRegex(rendered, re.compile(r"<td>\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}</td>"))
        self.assertIn('<div class="x-text"><pre>hi</pre></div>', rendered)
        self.assertNotIn("x-totals", rendered)

    def test_favorites_fault_still_shows_content(self) -> None:
        view = self._view(add_favorite="", fault=Fault(4, {"favorites": "/ro/favs", "value": "notes.md"}))

        rendered = render_html(view)

        self.assertIn("Could not save favorites", rendered)
        self.assertIn("File location: /ro/favs", rendered)
        self.assertIn("<pre>hi</pre>", rendered)
        self.assertNotIn("Add to favorites", rendered)


class FaultRenderTests(unittest.TestCase):
    def test_configuration_fault(self) -> None:
        rendered = render_html(FaultView(fault=Fault(2, {"path": "/missing"}), root="/missing"))

        self.assertIn("An error has occurred (2)", rendered)
        self.assertIn("<pre>path: /missing</pre>", rendered)
        self.assertIn("Back to start", rendered)
        self.assertEqual(rendered.count("x-folder"), 0)


if __name__ == "__main__":
    unittest.main()
