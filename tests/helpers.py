"""Test helpers."""

from menutrail.core.menu import MenuLink
from menutrail.core.types import MenuLinkId


def make_link(
    link_id: str,
    url: str,
    parent: str = "",
    *,
    menu_name: str = "main",
    weight: int = 0,
    enabled: bool = True,
) -> MenuLink:
    """Create a link titled after its id."""
    return MenuLink(
        id=MenuLinkId(link_id),
        title=link_id,
        url=url,
        menu_name=menu_name,
        parent=parent,
        weight=weight,
        enabled=enabled,
    )
