"""Tests for trail cache backends."""

import json
from pathlib import Path

import pytest
from menutrail.core.cache import FileCache, MemoryCache, NullCache, compute_cid_hash


class TestMemoryCache:
    """Tests for MemoryCache."""

    def test__missing_entry__returns_none(self) -> None:
        assert MemoryCache().get("active-trail:main") is None

    def test__set__returns_stored_data(self) -> None:
        cache = MemoryCache()

        cache.set("cid", {"": "", "Docs": "Docs"}, tags=["menu:main"])

        assert cache.get("cid") == {"": "", "Docs": "Docs"}

    def test__set__copies_data(self) -> None:
        """Mutating the stored dict afterwards does not change the entry."""
        cache = MemoryCache()
        data = {"": ""}

        cache.set("cid", data)
        data["Docs"] = "Docs"

        assert cache.get("cid") == {"": ""}

    def test__invalidate_tags__removes_tagged_entries(self) -> None:
        cache = MemoryCache()
        cache.set("main", {"": ""}, tags=["menu:main", "menu_link_tree"])
        cache.set("footer", {"": ""}, tags=["menu:footer", "menu_link_tree"])

        cache.invalidate_tags(["menu:main"])

        assert cache.get("main") is None
        assert cache.get("footer") == {"": ""}

    def test__delete_and_clear(self) -> None:
        cache = MemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)

        cache.delete("a")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0


class TestFileCache:
    """Tests for FileCache."""

    def test__missing_entry__returns_none(self, tmp_path: Path) -> None:
        assert FileCache(tmp_path / ".cache").get("cid") is None

    def test__set__persists_between_instances(self, tmp_path: Path) -> None:
        FileCache(tmp_path / ".cache").set("cid", {"": "", "Docs": "Docs"})

        result = FileCache(tmp_path / ".cache").get("cid")

        assert result == {"": "", "Docs": "Docs"}

    def test__set__creates_gitignore(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path / ".cache")

        cache.set("cid", {"": ""})

        gitignore_path = tmp_path / ".cache" / ".gitignore"
        assert gitignore_path.read_text() == "# Ignore everything in this directory\n*\n"

    def test__set__writes_hashed_file(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path / ".cache")

        cache.set("cid", {"": ""}, tags=["menu:main"])

        item_path = tmp_path / ".cache" / "trails" / f"{compute_cid_hash('cid')}.json"
        item = json.loads(item_path.read_text())
        assert item == {"cid": "cid", "tags": ["menu:main"], "data": {"": ""}}

    def test__corrupt_entry__returns_none(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path / ".cache")
        cache.set("cid", {"": ""})
        item_path = tmp_path / ".cache" / "trails" / f"{compute_cid_hash('cid')}.json"
        item_path.write_text("not json")

        assert cache.get("cid") is None

    def test__invalidate_tags__removes_tagged_entries(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path / ".cache")
        cache.set("main", {"": ""}, tags=["menu:main"])
        cache.set("footer", {"": ""}, tags=["menu:footer"])

        cache.invalidate_tags(["menu:main"])

        assert cache.get("main") is None
        assert cache.get("footer") == {"": ""}

    def test__invalidate_tags__empty_cache__no_error(self, tmp_path: Path) -> None:
        FileCache(tmp_path / ".cache").invalidate_tags(["menu:main"])

    def test__delete_and_clear(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path / ".cache")
        cache.set("a", {"": ""})
        cache.set("b", {"": ""})

        cache.delete("a")
        assert cache.get("a") is None
        assert cache.get("b") == {"": ""}

        cache.clear()
        assert cache.get("b") is None
        assert (tmp_path / ".cache" / ".gitignore").exists()

    def test__cache_dir__property(self, tmp_path: Path) -> None:
        assert FileCache(tmp_path / ".cache").cache_dir == tmp_path / ".cache"


class TestNullCache:
    """Tests for NullCache."""

    @pytest.mark.parametrize("data", [{"": ""}, 1, "x"])
    def test__set__never_stores(self, data: object) -> None:
        cache = NullCache()

        cache.set("cid", data)

        assert cache.get("cid") is None
