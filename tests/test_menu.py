"""Tests for menu tree structures."""

import pytest
from menutrail.core.menu import Menu, MenuHelper, MenuStorage, MenuTreeBuilder

from tests.helpers import make_link


class TestMenuTreeBuilder:
    """Tests for MenuTreeBuilder.build()."""

    def test__siblings__ordered_by_weight_then_title(self) -> None:
        """Order siblings by weight, then title."""
        builder = MenuTreeBuilder()
        builder.add_link(make_link("b", "/b", weight=1))
        builder.add_link(make_link("c", "/c", weight=0))
        builder.add_link(make_link("a", "/a", weight=1))

        tree = builder.build()

        assert [link.id for link in tree.get_root_links()] == ["c", "a", "b"]

    def test__unknown_parent__placed_at_top_level(self) -> None:
        """Treat links with a missing parent as top-level links."""
        builder = MenuTreeBuilder()
        builder.add_link(make_link("orphan", "/orphan", "missing"))

        tree = builder.build()

        assert [link.id for link in tree.get_root_links()] == ["orphan"]

    def test__get_children__returns_children(self) -> None:
        builder = MenuTreeBuilder()
        builder.add_link(make_link("docs", "/docs"))
        builder.add_link(make_link("api", "/docs/api", "docs"))
        tree = builder.build()

        assert [link.id for link in tree.get_children("docs")] == ["api"]
        assert tree.get_children("unknown") == []
        assert len(tree) == 2


class TestMenuTreeFlatten:
    """Tests for MenuTree.flatten()."""

    def test__nested_links__parents_before_children(self) -> None:
        """Flatten depth-first with parents first."""
        builder = MenuTreeBuilder()
        builder.add_link(make_link("api", "/docs/api", "docs"))
        builder.add_link(make_link("home", "/home", weight=-1))
        builder.add_link(make_link("docs", "/docs"))
        builder.add_link(make_link("guide", "/docs/guide", "docs", weight=-1))
        builder.add_link(make_link("deep", "/docs/api/deep", "api"))
        tree = builder.build()

        flat = [link.id for link in tree.flatten()]

        assert flat == ["home", "docs", "guide", "api", "deep"]

    def test__disabled_link__hides_subtree(self) -> None:
        """Skip disabled links together with their children."""
        builder = MenuTreeBuilder()
        builder.add_link(make_link("docs", "/docs", enabled=False))
        builder.add_link(make_link("api", "/docs/api", "docs"))
        builder.add_link(make_link("home", "/home"))
        tree = builder.build()

        assert [link.id for link in tree.flatten()] == ["home"]
        assert len(tree.flatten(include_disabled=True)) == 3


class TestMenuStorage:
    """Tests for MenuStorage."""

    def test__add_link__unknown_menu__raises(self) -> None:
        storage = MenuStorage()

        with pytest.raises(KeyError):
            storage.add_link(make_link("home", "/home"))

    def test__load_menu__unknown__returns_none(self, storage: MenuStorage) -> None:
        assert storage.load_menu("nonexistent") is None

    def test__load_tree__unknown_menu__returns_empty_tree(self, storage: MenuStorage) -> None:
        assert len(storage.load_tree("nonexistent")) == 0

    def test__add_link__refreshes_tree(self, storage: MenuStorage) -> None:
        """Rebuild a menu tree after its links change."""
        assert len(storage.load_tree("main")) == 3

        storage.add_link(make_link("Blog", "/blog"))

        assert len(storage.load_tree("main")) == 4

    def test__move_link__refreshes_both_menus(self, storage: MenuStorage) -> None:
        """Moving a link to another menu removes it from the old tree."""
        storage.add_menu(Menu(name="footer", label="Footer"))
        storage.load_tree("main")

        storage.add_link(make_link("Home", "/home", menu_name="footer"))

        assert storage.load_tree("main").get_link("Home") is None
        assert storage.load_tree("footer").get_link("Home") is not None

    def test__menu_names__definition_order(self, storage: MenuStorage) -> None:
        storage.add_menu(Menu(name="footer", label="Footer"))

        assert storage.menu_names() == ["main", "footer"]

    def test__has_link_url__any_menu(self, storage: MenuStorage) -> None:
        storage.add_menu(Menu(name="footer", label="Footer"))
        storage.add_link(make_link("Legal", "/legal", menu_name="footer"))

        assert storage.has_link_url("/docs/api/")
        assert storage.has_link_url("/legal")
        assert not storage.has_link_url("/docs/api/v2")


class TestGetParentIds:
    """Tests for MenuStorage.get_parent_ids()."""

    def test__nested_link__returns_ancestors_nearest_first(self, storage: MenuStorage) -> None:
        storage.add_link(make_link("Deep", "/docs/api/deep", "API"))

        parents = storage.get_parent_ids("Deep")

        assert list(parents.items()) == [("API", "API"), ("Docs", "Docs")]

    def test__top_level_link__returns_empty(self, storage: MenuStorage) -> None:
        assert storage.get_parent_ids("Home") == {}

    def test__unknown_link__returns_empty(self, storage: MenuStorage) -> None:
        assert storage.get_parent_ids("nonexistent") == {}

    def test__excludes_link_itself(self, storage: MenuStorage) -> None:
        assert "API" not in storage.get_parent_ids("API")

    def test__parent_cycle__stops_at_repeat(self) -> None:
        """Cut parent cycles instead of looping forever."""
        storage = MenuStorage()
        storage.add_menu(Menu(name="main", label="Main"))
        storage.add_link(make_link("a", "/a", "b"))
        storage.add_link(make_link("b", "/b", "a"))

        assert storage.get_parent_ids("a") == {"b": "b"}


class TestMenuHelper:
    """Tests for MenuHelper.get_menu_links()."""

    def test__known_menu__returns_links_in_tree_order(self, storage: MenuStorage) -> None:
        helper = MenuHelper(storage)

        links = helper.get_menu_links("main")

        assert [link.id for link in links] == ["Home", "Docs", "API"]

    def test__unknown_menu__returns_empty(self, storage: MenuStorage) -> None:
        assert MenuHelper(storage).get_menu_links("nonexistent") == []

    def test__empty_menu__returns_empty(self, storage: MenuStorage) -> None:
        storage.add_menu(Menu(name="empty", label="Empty"))

        assert MenuHelper(storage).get_menu_links("empty") == []
