"""Tests for one-level directory scanning."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from fileexplorer.listing import list_directory_children


class ListDirectoryChildrenTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "beta").mkdir()
        (self.root / "Alpha.TXT").write_text("alpha", encoding="utf-8")
        (self.root / "gamma.md").write_text("gamma!", encoding="utf-8")
        (self.root / ".hidden").write_text("h", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_children_sorted_case_insensitively(self) -> None:
        children, error = list_directory_children(self.root)
        self.assertIsNone(error)
        self.assertEqual([child.name for child in children], ["Alpha.TXT", "beta", "gamma.md"])

    def test_metadata_per_kind(self) -> None:
        children, _ = list_directory_children(self.root)
        by_name = {child.name: child for child in children}

        self.assertTrue(by_name["beta"].is_dir)
        self.assertIsNone(by_name["beta"].file_size)
        self.assertEqual(by_name["beta"].extension, "")
        self.assertEqual(by_name["gamma.md"].file_size, 6)
        self.assertEqual(by_name["Alpha.TXT"].extension, "txt")
        self.assertGreater(by_name["gamma.md"].mtime_ns, 0)

    def test_hidden_entries_need_opt_in(self) -> None:
        hidden, _ = list_directory_children(self.root, show_hidden=True)
        self.assertIn(".hidden", [child.name for child in hidden])
        self.assertEqual(next(child for child in hidden if child.name == ".hidden").extension, "")

    def test_dangling_symlink_is_skipped(self) -> None:
        os.symlink(self.root / "missing-target", self.root / "broken.txt")
        children, error = list_directory_children(self.root)
        self.assertIsNone(error)
        self.assertNotIn("broken.txt", [child.name for child in children])

    def test_missing_directory_reports_scan_error(self) -> None:
        children, error = list_directory_children(self.root / "nope")
        self.assertEqual(children, [])
        self.assertIsInstance(error, OSError)


if __name__ == "__main__":
    unittest.main()
