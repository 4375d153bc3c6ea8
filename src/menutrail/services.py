"""Service wiring.

Builds the long-lived collaborators (menus, aliases, cache, lock) from
configuration and creates a resolver for each request.
"""

from dataclasses import dataclass

from menutrail.config import Config
from menutrail.core.aliases import AliasManager
from menutrail.core.cache import CacheBackend, FileCache, MemoryCache, NullCache
from menutrail.core.lock import LockBackend, MemoryLock
from menutrail.core.menu import Menu, MenuHelper, MenuLink, MenuStorage
from menutrail.core.path import PathHelper
from menutrail.core.trail import ActiveTrailResolver
from menutrail.core.types import MenuLinkId, RequestContext


@dataclass
class TrailServices:
    """Collaborators shared by all requests."""

    storage: MenuStorage
    aliases: AliasManager
    cache: CacheBackend
    lock: LockBackend
    default_trail_source: str = "path"
    max_path_parts: int = 0
    lock_timeout: float = 30.0

    def is_known_path(self, path: str) -> bool:
        """Check whether a path is a link target or an alias.

        Any other prefix canonicalizes to itself and cannot match a link,
        so dropping it never changes the resolved trail.
        """
        return self.storage.has_link_url(path) or self.aliases.is_known_path(path)

    def create_path_helper(self, context: RequestContext) -> PathHelper:
        return PathHelper(
            context,
            self.aliases,
            max_path_parts=self.max_path_parts,
            validator=self.is_known_path,
        )

    def create_resolver(self, context: RequestContext) -> ActiveTrailResolver:
        """Create an active trail resolver for one request."""
        return ActiveTrailResolver(
            context,
            self.storage,
            self.create_path_helper(context),
            MenuHelper(self.storage),
            self.storage,
            self.aliases,
            self.cache,
            self.lock,
            default_trail_source=self.default_trail_source,
            lock_timeout=self.lock_timeout,
        )


def build_storage(config: Config) -> MenuStorage:
    """Load menu definitions and links from configuration."""
    storage = MenuStorage()
    for menu_config in config.menus:
        storage.add_menu(
            Menu(
                name=menu_config.name,
                label=menu_config.label,
                trail_source=menu_config.trail_source,
            ),
        )
        for link in menu_config.links:
            storage.add_link(
                MenuLink(
                    id=MenuLinkId(link.id),
                    title=link.title,
                    url=link.url,
                    menu_name=menu_config.name,
                    parent=link.parent,
                    weight=link.weight,
                    enabled=link.enabled,
                ),
            )
    return storage


def build_cache(config: Config) -> CacheBackend:
    if not config.cache.enabled:
        return NullCache()
    if config.cache.backend == "file":
        return FileCache(config.cache.cache_dir)
    return MemoryCache()


def build_services(config: Config) -> TrailServices:
    """Create shared services from configuration."""
    aliases = AliasManager()
    for alias in config.aliases:
        aliases.add_alias(alias.path, alias.alias, alias.langcode)

    return TrailServices(
        storage=build_storage(config),
        aliases=aliases,
        cache=build_cache(config),
        lock=MemoryLock(),
        default_trail_source=config.trail.trail_source,
        max_path_parts=config.trail.max_path_parts,
        lock_timeout=config.cache.lock_timeout,
    )
