"""Tests for favorites sidecar loading, mutation, and persistence."""

from __future__ import annotations

import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fileexplorer.errors import FavoritesPersistError, FavoritesReadError
from fileexplorer.favorites import (
    FAVORITES_FILENAME,
    FavoriteList,
    FavoritesStore,
    add_favorite,
    load_favorites,
    persist_favorites,
    remove_favorite,
)


class FavoritesLoadTests(unittest.TestCase):
    def test_missing_file_loads_empty_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(len(load_favorites(Path(tmp) / "absent")), 0)

    def test_blank_lines_and_line_endings_are_stripped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_bytes(b"Docs/Guide.txt\r\n\r\n  notes.md  \n\nb.txt")

            favorites = load_favorites(path)

            self.assertEqual(favorites.items, ("docs/guide.txt", "notes.md", "b.txt"))

    def test_historical_duplicates_are_kept_on_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_text("a.txt\nA.txt\nb.txt\n", encoding="utf-8")

            favorites = load_favorites(path)

            self.assertEqual(favorites.count("a.txt"), 2)
            self.assertIn("A.TXT", favorites)

    def test_undecodable_bytes_survive_rewrite(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_bytes(b"a.txt\ncaf\xe9.txt\n")

            favorites = load_favorites(path)
            self.assertEqual(len(favorites), 2)
            persist_favorites(path, add_favorite(favorites, "b.txt"))

            self.assertEqual(path.read_bytes(), b"a.txt\ncaf\xe9.txt\nb.txt")

    def test_unreadable_existing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_text("a.txt\n", encoding="utf-8")

            with mock.patch.object(Path, "read_text", side_effect=PermissionError("denied")):
                with self.assertRaises(FavoritesReadError) as ctx:
                    load_favorites(path)

            self.assertEqual(ctx.exception.code, 4)
            self.assertEqual(ctx.exception.to_fault().details, {"favorites": str(path)})


class FavoritesMutationTests(unittest.TestCase):
    def test_add_is_idempotent(self) -> None:
        favorites = FavoriteList(("a.txt",))

        once = add_favorite(favorites, "Sub/Dir/File.txt")
        twice = add_favorite(once, "sub/dir/file.txt")

        self.assertEqual(len(once), len(favorites) + 1)
        self.assertEqual(len(twice), len(once))
        self.assertIs(twice, once)
        self.assertEqual(once.items[-1], "sub/dir/file.txt")

    def test_remove_drops_every_duplicate(self) -> None:
        favorites = FavoriteList(("x.txt", "a.txt", "b.txt", "a.txt", "a.txt"))

        updated = remove_favorite(favorites, "A.txt")

        self.assertEqual(updated.count("a.txt"), 0)
        self.assertEqual(updated.items, ("x.txt", "b.txt"))

    def test_remove_of_first_entry_is_found(self) -> None:
        updated = remove_favorite(FavoriteList(("a.txt", "a.txt")), "a.txt")
        self.assertEqual(updated.items, ())

    def test_remove_missing_item_returns_same_list(self) -> None:
        favorites = FavoriteList(("a.txt",))
        self.assertIs(remove_favorite(favorites, "b.txt"), favorites)


class FavoritesPersistTests(unittest.TestCase):
    def test_persist_then_load_round_trips(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            favorites = FavoriteList(("docs/guide.txt", "notes.md", "deep/a/b/c.html"))

            persist_favorites(path, favorites, param="favadd", item="notes.md")

            self.assertEqual(load_favorites(path), favorites)
            self.assertEqual(path.read_text(encoding="utf-8"), "docs/guide.txt\nnotes.md\ndeep/a/b/c.html")
            self.assertEqual([p.name for p in Path(tmp).iterdir()], ["favs"])

    def test_persist_overwrites_whole_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_text("old.txt\nolder.txt\n", encoding="utf-8")

            persist_favorites(path, FavoriteList(("new.txt",)))

            self.assertEqual(path.read_text(encoding="utf-8"), "new.txt")

    def test_persist_failure_reports_path_and_item(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing-dir" / "favs"

            with self.assertRaises(FavoritesPersistError) as ctx:
                persist_favorites(path, FavoriteList(("a.txt",)), param="favadd", item="a.txt")

            self.assertEqual(ctx.exception.code, 4)
            self.assertEqual(ctx.exception.path, str(path))
            self.assertEqual(ctx.exception.item, "a.txt")
            fault = ctx.exception.to_fault()
            self.assertEqual(fault.details["favorites"], str(path))
            self.assertEqual(fault.details["param"], "favadd")
            self.assertEqual(fault.details["value"], "a.txt")

    def test_persist_keeps_permission_bits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "favs"
            path.write_text("a.txt", encoding="utf-8")
            os.chmod(path, 0o664)

            persist_favorites(path, FavoriteList(("a.txt", "b.txt")))

            self.assertEqual(stat.S_IMODE(path.stat().st_mode), 0o664)

    def test_persist_writes_through_symlink(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            real = Path(tmp) / "shared-favs"
            real.write_text("a.txt", encoding="utf-8")
            link = Path(tmp) / "favs"
            os.symlink(real, link)

            persist_favorites(link, FavoriteList(("a.txt", "b.txt")))

            self.assertTrue(link.is_symlink())
            self.assertEqual(real.read_text(encoding="utf-8"), "a.txt\nb.txt")


class FavoritesStoreTests(unittest.TestCase):
    def test_store_for_root_uses_default_sidecar(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            store = FavoritesStore.for_root(root)
            self.assertEqual(store.path, root / FAVORITES_FILENAME)

            favorites = store.add(store.load(), "a.txt")
            store.persist(favorites)
            favorites = store.remove(store.load(), "a.txt")

            self.assertEqual(favorites.items, ())
            self.assertEqual(store.load().items, ("a.txt",))


if __name__ == "__main__":
    unittest.main()
