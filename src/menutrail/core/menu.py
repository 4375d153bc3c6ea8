"""Menu link tree structures.

Stores menu definitions and their links with efficient id lookups,
ancestor traversal and tree-ordered flattening. MenuHelper is the
read-only view used by the active trail resolver.
"""

import logging
from dataclasses import dataclass

from menutrail.core.aliases import normalize_path
from menutrail.core.types import MenuLinkId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuLink:
    """Menu link data."""

    id: MenuLinkId
    title: str
    url: str
    menu_name: str
    parent: str = ""
    weight: int = 0
    enabled: bool = True

    def to_dict(self) -> dict[str, str | int | bool]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "menu_name": self.menu_name,
            "parent": self.parent,
            "weight": self.weight,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class Menu:
    """Menu definition."""

    name: str
    label: str
    # Per-menu override of the global trail source, None to inherit
    trail_source: str | None = None


class MenuTree:
    """Link hierarchy of a single menu.

    Stores links in a flat list with parent/children relationships
    tracked by indices. Siblings are kept in (weight, title) order.
    """

    __slots__ = ("_children", "_id_index", "_links", "_roots")

    def __init__(
        self,
        links: list[MenuLink],
        children: list[list[int]],
        roots: list[int],
    ) -> None:
        """Initialize menu tree.

        Args:
            links: Flat list of all links
            children: Children indices for each link
            roots: Indices of top-level links
        """
        self._links = links
        self._children = children
        self._roots = roots
        self._id_index = {link.id: i for i, link in enumerate(links)}

    def __len__(self) -> int:
        return len(self._links)

    def get_link(self, link_id: str) -> MenuLink | None:
        idx = self._id_index.get(link_id)
        if idx is None:
            return None
        return self._links[idx]

    def get_children(self, link_id: str) -> list[MenuLink]:
        """Get direct children of a link, empty if unknown."""
        idx = self._id_index.get(link_id)
        if idx is None:
            return []
        return [self._links[i] for i in self._children[idx]]

    def get_root_links(self) -> list[MenuLink]:
        """Get top-level links."""
        return [self._links[i] for i in self._roots]

    def flatten(self, *, include_disabled: bool = False) -> list[MenuLink]:
        """Flatten the tree depth-first, parents before children.

        Disabled links hide their whole subtree unless include_disabled is set.
        """
        result: list[MenuLink] = []
        stack = list(reversed(self._roots))
        while stack:
            idx = stack.pop()
            link = self._links[idx]
            if not link.enabled and not include_disabled:
                continue
            result.append(link)
            stack.extend(reversed(self._children[idx]))
        return result


class MenuTreeBuilder:
    """Builder for constructing MenuTree instances."""

    def __init__(self) -> None:
        self._links: list[MenuLink] = []

    def add_link(self, link: MenuLink) -> int:
        """Add a link to the tree.

        Returns:
            Index of the added link
        """
        self._links.append(link)
        return len(self._links) - 1

    def build(self) -> MenuTree:
        """Build the MenuTree instance.

        Links whose parent is not part of the menu are placed at top level.
        """
        index = {link.id: i for i, link in enumerate(self._links)}
        children: list[list[int]] = [[] for _ in self._links]
        roots: list[int] = []

        for i, link in enumerate(self._links):
            parent_idx = index.get(link.parent) if link.parent else None
            if parent_idx is None or parent_idx == i:
                if link.parent:
                    logger.debug(f"Link {link.id} has unknown parent {link.parent!r}")
                roots.append(i)
            else:
                children[parent_idx].append(i)

        def sort_key(idx: int) -> tuple[int, str]:
            return (self._links[idx].weight, self._links[idx].title)

        roots.sort(key=sort_key)
        for siblings in children:
            siblings.sort(key=sort_key)

        return MenuTree(links=list(self._links), children=children, roots=roots)


class MenuStorage:
    """In-memory store of menu definitions and links.

    Link ids are unique across all menus.
    """

    def __init__(self) -> None:
        self._menus: dict[str, Menu] = {}
        self._links: dict[str, MenuLink] = {}
        self._trees: dict[str, MenuTree] = {}

    def add_menu(self, menu: Menu) -> None:
        self._menus[menu.name] = menu
        self._trees.pop(menu.name, None)

    def add_link(self, link: MenuLink) -> None:
        """Add or replace a link.

        Raises:
            KeyError: If the link's menu is not defined
        """
        if link.menu_name not in self._menus:
            raise KeyError(f"Menu not found: {link.menu_name}")
        previous = self._links.get(link.id)
        if previous is not None:
            self._trees.pop(previous.menu_name, None)
        self._links[link.id] = link
        self._trees.pop(link.menu_name, None)

    def load_menu(self, menu_name: str) -> Menu | None:
        return self._menus.get(menu_name)

    def menu_names(self) -> list[str]:
        """Menu names in definition order."""
        return list(self._menus)

    def get_link(self, link_id: str) -> MenuLink | None:
        return self._links.get(link_id)

    def has_link_url(self, url: str) -> bool:
        """Check whether any link in any menu points at url."""
        normalized = normalize_path(url)
        return any(normalize_path(link.url) == normalized for link in self._links.values())

    def load_tree(self, menu_name: str) -> MenuTree:
        """Get the link tree of a menu, empty for unknown menus."""
        tree = self._trees.get(menu_name)
        if tree is None:
            builder = MenuTreeBuilder()
            for link in self._links.values():
                if link.menu_name == menu_name:
                    builder.add_link(link)
            tree = builder.build()
            if menu_name in self._menus:
                self._trees[menu_name] = tree
        return tree

    def get_parent_ids(self, link_id: str) -> dict[str, str]:
        """Get ancestor ids of a link, nearest parent first.

        The link's own id is not included.

        Args:
            link_id: Menu link id

        Returns:
            Mapping of each ancestor id to itself, empty for unknown links
        """
        link = self._links.get(link_id)
        if link is None:
            return {}

        parents: dict[str, str] = {}
        seen = {link.id}
        current = link.parent
        while current and current not in seen:
            seen.add(current)
            parents[current] = current
            parent = self._links.get(current)
            if parent is None:
                break
            current = parent.parent
        return parents


class MenuHelper:
    """Read-only access to the flattened links of a menu."""

    def __init__(self, storage: MenuStorage) -> None:
        self._storage = storage

    def get_menu_links(self, menu_name: str) -> list[MenuLink]:
        """Get enabled links of a menu in tree order.

        Parents come before their children, siblings in weight order.

        Args:
            menu_name: Menu name

        Returns:
            List of MenuLink, empty if the menu is unknown or has no links
        """
        return self._storage.load_tree(menu_name).flatten()
