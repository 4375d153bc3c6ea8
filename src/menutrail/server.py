"""aiohttp server for menutrail.

Application factory and route registration for standalone server mode.
"""

from aiohttp import web

from menutrail.api.cache import create_cache_routes
from menutrail.api.menus import create_menu_routes
from menutrail.app_keys import services_key
from menutrail.config import Config
from menutrail.services import TrailServices, build_services


def create_app(
    config: Config,
    *,
    services: TrailServices | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        services: Prebuilt services, built from config when omitted

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[services_key] = services if services is not None else build_services(config)

    app.router.add_routes(create_menu_routes())
    app.router.add_routes(create_cache_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
