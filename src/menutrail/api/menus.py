"""Menu API endpoints.

Provides menu listings, link trees and active trails for a given path.
"""

from aiohttp import web

from menutrail.app_keys import services_key
from menutrail.core.menu import MenuLink, MenuTree
from menutrail.core.types import RequestContext, TrailSourceMode

DEFAULT_LANGCODE = "en"


def create_menu_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/menus", list_menus),
        web.get("/api/menus/{menu}/tree", get_menu_tree),
        web.get("/api/menus/{menu}/active-trail", get_active_trail),
    ]


async def list_menus(request: web.Request) -> web.Response:
    services = request.app[services_key]
    menus = []
    for name in services.storage.menu_names():
        menu = services.storage.load_menu(name)
        if menu is None:
            continue
        trail_source = TrailSourceMode.effective(menu.trail_source, services.default_trail_source)
        menus.append({"name": menu.name, "label": menu.label, "trail_source": str(trail_source)})
    return web.json_response({"menus": menus})


async def get_menu_tree(request: web.Request) -> web.Response:
    menu_name = request.match_info["menu"]
    services = request.app[services_key]

    menu = services.storage.load_menu(menu_name)
    if menu is None:
        return web.json_response(
            {"error": "Menu not found", "menu": menu_name},
            status=404,
        )

    tree = services.storage.load_tree(menu_name)
    items = [_build_item(tree, link) for link in tree.get_root_links() if link.enabled]
    return web.json_response({"menu": menu.name, "label": menu.label, "items": items})


async def get_active_trail(request: web.Request) -> web.Response:
    """Active trail of a menu for the ?path= query parameter.

    The trail is served from cache while active_link is always resolved
    from the current menu links. Changing links without invalidating the
    menu's cache tag leaves the two out of step until the cache is cleared.
    """
    menu_name = request.match_info["menu"]
    path = request.query.get("path")
    if not path:
        return web.json_response(
            {"error": "Missing path query parameter", "menu": menu_name},
            status=400,
        )
    langcode = request.query.get("lang", DEFAULT_LANGCODE)

    services = request.app[services_key]
    resolver = services.create_resolver(RequestContext(path_info=path, langcode=langcode))

    trail = resolver.get_active_trail_ids(menu_name)
    trail_source = resolver.get_trail_source(menu_name)
    active_link = None
    if trail_source is TrailSourceMode.PATH:
        active_link = resolver.get_active_trail_link(menu_name)
    elif trail_source is TrailSourceMode.CORE:
        active_link = resolver.get_active_link(menu_name)

    return web.json_response(
        {
            "menu": menu_name,
            "path": path,
            "langcode": langcode,
            "trail_source": str(trail_source) if trail_source is not None else None,
            "active_link": active_link.to_dict() if active_link is not None else None,
            "trail": trail,
        },
    )


def _build_item(tree: MenuTree, link: MenuLink) -> dict[str, object]:
    """Recursively build a nested link dict."""
    item: dict[str, object] = {"id": link.id, "title": link.title, "url": link.url}
    children = [child for child in tree.get_children(link.id) if child.enabled]
    if children:
        item["children"] = [_build_item(tree, child) for child in children]
    return item
