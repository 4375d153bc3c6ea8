"""Cache management API endpoint."""

from aiohttp import web

from menutrail.app_keys import services_key


def create_cache_routes() -> list[web.RouteDef]:
    return [
        web.post("/api/cache/clear", clear_cache),
    ]


async def clear_cache(request: web.Request) -> web.Response:
    services = request.app[services_key]
    menu_name = request.query.get("menu")
    if menu_name:
        services.cache.invalidate_tags([f"menu:{menu_name}"])
    else:
        services.cache.clear()
    return web.json_response({"cleared": menu_name or "all"})
