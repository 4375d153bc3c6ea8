"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from menutrail.config import (
    AliasConfig,
    CacheConfig,
    Config,
    LinkConfig,
    MenuConfig,
    ServerConfig,
    TrailConfig,
)
from menutrail.core.aliases import AliasManager
from menutrail.core.cache import MemoryCache
from menutrail.core.lock import MemoryLock
from menutrail.core.menu import Menu, MenuStorage
from menutrail.core.types import RequestContext
from menutrail.services import TrailServices, build_services

from tests.helpers import make_link


@pytest.fixture
def storage() -> MenuStorage:
    """Menu "main" with Home, Docs and Docs > API."""
    storage = MenuStorage()
    storage.add_menu(Menu(name="main", label="Main navigation"))
    storage.add_link(make_link("Home", "/home", weight=0))
    storage.add_link(make_link("Docs", "/docs", weight=1))
    storage.add_link(make_link("API", "/docs/api", "Docs"))
    return storage


@pytest.fixture
def aliases() -> AliasManager:
    return AliasManager()


@pytest.fixture
def services(storage: MenuStorage, aliases: AliasManager) -> TrailServices:
    return TrailServices(
        storage=storage,
        aliases=aliases,
        cache=MemoryCache(),
        lock=MemoryLock(),
    )


@pytest.fixture
def resolve(services: TrailServices) -> Callable[[str, str], dict[str, str]]:
    """Resolve the active trail of a menu for a path."""

    def _resolve(menu_name: str, path: str) -> dict[str, str]:
        resolver = services.create_resolver(RequestContext(path_info=path))
        return resolver.get_active_trail_ids(menu_name)

    return _resolve


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration with a small site menu."""
    return Config(
        server=ServerConfig(),
        trail=TrailConfig(),
        cache=CacheConfig(cache_dir=tmp_path / ".cache"),
        menus=[
            MenuConfig(
                name="main",
                label="Main navigation",
                links=[
                    LinkConfig(id="home", title="Home", url="/home"),
                    LinkConfig(id="docs", title="Docs", url="/docs", weight=1),
                    LinkConfig(id="api", title="API", url="/docs/api", parent="docs"),
                    LinkConfig(id="about", title="About", url="/node/1", weight=2),
                ],
            ),
            MenuConfig(
                name="footer",
                label="Footer",
                trail_source="disabled",
                links=[LinkConfig(id="legal", title="Legal", url="/legal")],
            ),
        ],
        aliases=[AliasConfig(path="/node/1", alias="/about")],
    )


@pytest.fixture
def test_services(test_config: Config) -> TrailServices:
    return build_services(test_config)
