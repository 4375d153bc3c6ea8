"""Active trail resolution.

The active trail of a menu is the set of ancestor link ids of the link
matching the current page. Each TrailSourceMode has its own TrailSource;
ActiveTrailResolver picks one per menu and caches the result per menu,
language and requested path.
"""

import logging
from typing import Protocol

from menutrail.core.aliases import AliasManager, normalize_path
from menutrail.core.cache import CacheBackend
from menutrail.core.lock import LockBackend
from menutrail.core.menu import Menu, MenuLink
from menutrail.core.types import ActiveTrail, RequestContext, TrailSourceMode, URLPath

logger = logging.getLogger(__name__)

CACHE_TAG_LINK_TREE = "menu_link_tree"


class UrlSource(Protocol):
    def get_urls(self) -> list[URLPath]: ...


class LinkSource(Protocol):
    def get_menu_links(self, menu_name: str) -> list[MenuLink]: ...


class AncestorLookup(Protocol):
    def get_parent_ids(self, link_id: str) -> dict[str, str]: ...


class MenuLoader(Protocol):
    def load_menu(self, menu_name: str) -> Menu | None: ...

    def menu_names(self) -> list[str]: ...


class TrailSource(Protocol):
    """Builds the active trail of a menu for the current request."""

    def get_active_trail_ids(self, menu_name: str) -> ActiveTrail: ...


def top_level_trail() -> ActiveTrail:
    """Trail holding only the top level.

    Parent ids are used both as key and value; "" stands for the top level.
    """
    return {"": ""}


def merge_trail(parents: dict[str, str], trail: ActiveTrail) -> ActiveTrail:
    """Merge ancestor ids into a trail.

    Keys already in the trail keep their value; ancestors come first.
    """
    merged = dict(parents)
    merged.update(trail)
    return merged


class DisabledTrailSource:
    """Trail source that never marks links as active."""

    def get_active_trail_ids(self, menu_name: str) -> ActiveTrail:
        return top_level_trail()


class PathTrailSource:
    """Trail source matching menu link URLs against the requested path."""

    def __init__(
        self,
        path_helper: UrlSource,
        menu_helper: LinkSource,
        ancestors: AncestorLookup,
        aliases: AliasManager,
        langcode: str | None = None,
    ) -> None:
        self._path_helper = path_helper
        self._menu_helper = menu_helper
        self._ancestors = ancestors
        self._aliases = aliases
        self._langcode = langcode

    def get_active_trail_ids(self, menu_name: str) -> ActiveTrail:
        active_trail = top_level_trail()
        active_link = self.get_active_trail_link(menu_name)
        if active_link is not None:
            parents = self._ancestors.get_parent_ids(active_link.id)
            if parents:
                active_trail = merge_trail(parents, active_trail)
        return active_trail

    def get_active_trail_link(self, menu_name: str) -> MenuLink | None:
        """Fetch the deepest, heaviest menu link matching the path.

        Candidate URLs are tried most specific first. For each URL the menu
        links are scanned in reverse tree order, so among links sharing a
        URL the last one in the tree wins.

        Args:
            menu_name: Menu within which to find the active trail link

        Returns:
            Matching MenuLink, or None if no link matches
        """
        menu_links = self._menu_helper.get_menu_links(menu_name)
        trail_urls = self._path_helper.get_urls()
        link_urls = [self._aliases.canonical_url(link.url, self._langcode) for link in menu_links]

        for trail_url in reversed(trail_urls):
            for menu_link, link_url in zip(reversed(menu_links), reversed(link_urls), strict=True):
                if link_url == trail_url:
                    logger.debug(f"Menu {menu_name}: {trail_url} matches link {menu_link.id}")
                    return menu_link

        return None


class CoreTrailSource:
    """Route-based trail source.

    The active link is the first link, in tree order, whose target system
    path equals the system path of the request. No prefix matching.
    """

    def __init__(
        self,
        context: RequestContext,
        menus: MenuLoader,
        menu_helper: LinkSource,
        ancestors: AncestorLookup,
        aliases: AliasManager,
    ) -> None:
        self._context = context
        self._menus = menus
        self._menu_helper = menu_helper
        self._ancestors = ancestors
        self._aliases = aliases

    def get_active_link(self, menu_name: str | None = None) -> MenuLink | None:
        """Find the link routing to the current page.

        Args:
            menu_name: Menu to search, or None to search all menus

        Returns:
            Matching MenuLink or None
        """
        langcode = self._context.langcode
        system_path = self._aliases.get_path_by_alias(self._context.path_info, langcode)
        menu_names = [menu_name] if menu_name is not None else self._menus.menu_names()

        for name in menu_names:
            for link in self._menu_helper.get_menu_links(name):
                if self._aliases.get_path_by_alias(link.url, langcode) == system_path:
                    return link
        return None

    def get_active_trail_ids(self, menu_name: str) -> ActiveTrail:
        active_trail = top_level_trail()
        active_link = self.get_active_link(menu_name)
        if active_link is not None:
            parents = self._ancestors.get_parent_ids(active_link.id)
            if parents:
                active_trail = merge_trail(parents, active_trail)
        return active_trail


class ActiveTrailResolver:
    """Computes and caches menu active trails for one request.

    Replaces the route-based active trail service: the trail source of each
    menu is its own override, or the global default.
    """

    def __init__(
        self,
        context: RequestContext,
        menus: MenuLoader,
        path_helper: UrlSource,
        menu_helper: LinkSource,
        ancestors: AncestorLookup,
        aliases: AliasManager,
        cache: CacheBackend,
        lock: LockBackend,
        *,
        default_trail_source: str | None = TrailSourceMode.PATH,
        lock_timeout: float = 30.0,
    ) -> None:
        """Initialize resolver.

        Args:
            context: Current request
            menus: Menu definition lookup
            path_helper: Candidate URLs of the current request
            menu_helper: Flattened links of a menu
            ancestors: Ancestor id lookup for links
            aliases: Alias registry used to canonicalize link URLs
            cache: Trail cache shared between requests
            lock: Named locks shared between requests
            default_trail_source: Trail source for menus without an override
            lock_timeout: Seconds to wait for a concurrent computation
        """
        self._context = context
        self._menus = menus
        self._cache = cache
        self._lock = lock
        self._default_trail_source = default_trail_source
        self._lock_timeout = lock_timeout

        self._path_source = PathTrailSource(
            path_helper, menu_helper, ancestors, aliases, context.langcode
        )
        self._core_source = CoreTrailSource(context, menus, menu_helper, ancestors, aliases)
        self._sources: dict[TrailSourceMode, TrailSource] = {
            TrailSourceMode.DISABLED: DisabledTrailSource(),
            TrailSourceMode.PATH: self._path_source,
            TrailSourceMode.CORE: self._core_source,
        }

    @property
    def context(self) -> RequestContext:
        return self._context

    def get_cid(self, menu_name: str) -> str:
        """Cache id for a menu's trail on the current request."""
        path_info = normalize_path(self._context.path_info)
        return f"active-trail:menu:{menu_name}:langcode:{self._context.langcode}:pathinfo:{path_info}"

    def get_trail_source(self, menu_name: str) -> TrailSourceMode | None:
        """Effective trail source of a menu, None for unknown menus."""
        menu = self._menus.load_menu(menu_name)
        if menu is None:
            return None
        return TrailSourceMode.effective(menu.trail_source, self._default_trail_source)

    def get_active_trail_ids(self, menu_name: str) -> ActiveTrail:
        """Get the active trail of a menu, computing it on cache miss.

        Concurrent misses for the same cache id compute once: the first
        caller holds the lock while the others wait and then read the cache.
        When the lock cannot be acquired in time the trail is computed
        without being cached.

        Args:
            menu_name: Menu name

        Returns:
            Mapping of active ancestor ids, always including ""
        """
        cid = self.get_cid(menu_name)
        cached = self._cache.get(cid)
        if cached is not None:
            logger.debug(f"Active trail cache hit: {cid}")
            return dict(cached)

        if not self._lock.acquire(cid, self._lock_timeout):
            logger.warning(f"Could not acquire lock for {cid}, computing without cache")
            return self.do_get_active_trail_ids(menu_name)

        try:
            cached = self._cache.get(cid)
            if cached is not None:
                logger.debug(f"Active trail cache filled while waiting: {cid}")
                return dict(cached)

            logger.debug(f"Active trail cache miss: {cid}")
            active_trail = self.do_get_active_trail_ids(menu_name)
            self._cache.set(cid, active_trail, tags=[f"menu:{menu_name}", CACHE_TAG_LINK_TREE])
            return dict(active_trail)
        finally:
            self._lock.release(cid)

    def do_get_active_trail_ids(self, menu_name: str) -> ActiveTrail:
        """Compute the active trail of a menu without caching."""
        trail_source = self.get_trail_source(menu_name)
        if trail_source is None:
            return top_level_trail()

        logger.debug(f"Menu {menu_name} uses trail source {trail_source}")
        return self._sources[trail_source].get_active_trail_ids(menu_name)

    def get_active_trail_link(self, menu_name: str) -> MenuLink | None:
        """Fetch the deepest, heaviest menu link matching the current path."""
        return self._path_source.get_active_trail_link(menu_name)

    def get_active_link(self, menu_name: str | None = None) -> MenuLink | None:
        """Route-based active link, as the replaced service computes it."""
        return self._core_source.get_active_link(menu_name)
