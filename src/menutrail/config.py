"""Configuration management for menutrail.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "menutrail.toml"

CACHE_BACKENDS = ("memory", "file")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class TrailConfig:
    """Active trail configuration."""

    # One of "core", "path", "disabled"; anything else behaves as "path"
    trail_source: str = "path"
    max_path_parts: int = 0


@dataclass
class CacheConfig:
    """Trail cache configuration."""

    enabled: bool = True
    backend: str = "memory"
    cache_dir: Path = field(default_factory=lambda: Path(".cache"))
    lock_timeout: float = 30.0


@dataclass
class LinkConfig:
    """Menu link definition."""

    id: str
    title: str
    url: str
    parent: str = ""
    weight: int = 0
    enabled: bool = True


@dataclass
class MenuConfig:
    """Menu definition."""

    name: str
    label: str
    trail_source: str | None = None
    links: list[LinkConfig] = field(default_factory=list)


@dataclass
class AliasConfig:
    """Path alias definition."""

    path: str
    alias: str
    langcode: str | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    trail: TrailConfig
    cache: CacheConfig
    menus: list[MenuConfig] = field(default_factory=list)
    aliases: list[AliasConfig] = field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for menutrail.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            trail=TrailConfig(),
            cache=CacheConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            trail=cls._parse_trail(data.get("trail")),
            cache=cls._parse_cache(data.get("cache"), config_dir),
            menus=cls._parse_menus(data.get("menus")),
            aliases=cls._parse_aliases(data.get("aliases")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_trail(cls, data: object) -> TrailConfig:
        """Parse trail configuration section.

        Unknown trail_source strings are kept; they resolve to "path" when
        a trail is built.
        """
        if data is None:
            return TrailConfig()

        if not isinstance(data, dict):
            raise ValueError("trail section must be a dictionary")

        trail_source = data.get("trail_source", "path")
        if not isinstance(trail_source, str):
            raise ValueError("trail.trail_source must be a string")

        max_path_parts = data.get("max_path_parts", 0)
        if not isinstance(max_path_parts, int) or isinstance(max_path_parts, bool):
            raise ValueError("trail.max_path_parts must be an integer")
        if max_path_parts < 0:
            raise ValueError("trail.max_path_parts must not be negative")

        return TrailConfig(trail_source=trail_source, max_path_parts=max_path_parts)

    @classmethod
    def _parse_cache(cls, data: object, config_dir: Path) -> CacheConfig:
        """Parse cache configuration section.

        Args:
            data: Raw cache section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            CacheConfig instance
        """
        if data is None:
            return CacheConfig(cache_dir=config_dir / ".cache")

        if not isinstance(data, dict):
            raise ValueError("cache section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("cache.enabled must be a boolean")

        backend = data.get("backend", "memory")
        if backend not in CACHE_BACKENDS:
            raise ValueError(f"cache.backend must be one of: {', '.join(CACHE_BACKENDS)}")

        cache_dir = data.get("dir", ".cache")
        if not isinstance(cache_dir, str):
            raise ValueError("cache.dir must be a string")

        lock_timeout = data.get("lock_timeout", 30.0)
        if not isinstance(lock_timeout, int | float) or isinstance(lock_timeout, bool):
            raise ValueError("cache.lock_timeout must be a number")

        return CacheConfig(
            enabled=enabled,
            backend=backend,
            cache_dir=config_dir / cache_dir,
            lock_timeout=float(lock_timeout),
        )

    @classmethod
    def _parse_menus(cls, data: object) -> list[MenuConfig]:
        """Parse menus section.

        Each menu is a sub-table keyed by menu name with an optional
        array of link tables.
        """
        if data is None:
            return []

        if not isinstance(data, dict):
            raise ValueError("menus section must be a dictionary")

        menus: list[MenuConfig] = []
        for name, menu_data in data.items():
            if not isinstance(menu_data, dict):
                raise ValueError(f"menus.{name} must be a dictionary")

            label = menu_data.get("label", name)
            if not isinstance(label, str):
                raise ValueError(f"menus.{name}.label must be a string")

            trail_source = menu_data.get("trail_source")
            if trail_source is not None and not isinstance(trail_source, str):
                raise ValueError(f"menus.{name}.trail_source must be a string")

            links_raw = menu_data.get("links", [])
            if not isinstance(links_raw, list):
                raise ValueError(f"menus.{name}.links must be a list")
            links = [cls._parse_link(name, item) for item in links_raw]

            menus.append(
                MenuConfig(name=name, label=label, trail_source=trail_source, links=links),
            )
        return menus

    @classmethod
    def _parse_link(cls, menu_name: str, data: object) -> LinkConfig:
        prefix = f"menus.{menu_name}.links"
        if not isinstance(data, dict):
            raise ValueError(f"{prefix} items must be dictionaries")

        for key in ("id", "title", "url"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"{prefix}.{key} must be a string")

        parent = data.get("parent", "")
        if not isinstance(parent, str):
            raise ValueError(f"{prefix}.parent must be a string")

        weight = data.get("weight", 0)
        if not isinstance(weight, int) or isinstance(weight, bool):
            raise ValueError(f"{prefix}.weight must be an integer")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError(f"{prefix}.enabled must be a boolean")

        return LinkConfig(
            id=data["id"],
            title=data["title"],
            url=data["url"],
            parent=parent,
            weight=weight,
            enabled=enabled,
        )

    @classmethod
    def _parse_aliases(cls, data: object) -> list[AliasConfig]:
        """Parse aliases section.

        Top-level keys map system paths to language-neutral aliases;
        sub-tables keyed by language code hold language-specific ones.
        """
        if data is None:
            return []

        if not isinstance(data, dict):
            raise ValueError("aliases section must be a dictionary")

        aliases: list[AliasConfig] = []
        for key, value in data.items():
            if isinstance(value, str):
                aliases.append(AliasConfig(path=key, alias=value))
            elif isinstance(value, dict):
                for path, alias in value.items():
                    if not isinstance(alias, str):
                        raise ValueError(f"aliases.{key} values must be strings")
                    aliases.append(AliasConfig(path=path, alias=alias, langcode=key))
            else:
                raise ValueError("aliases values must be strings or tables")
        return aliases

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        trail_source: str | None = None,
        cache_enabled: bool | None = None,
        cache_dir: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            trail_source: Override trail.trail_source
            cache_enabled: Override cache.enabled
            cache_dir: Override cache.cache_dir

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        trail = self.trail
        if trail_source is not None:
            trail = replace(self.trail, trail_source=trail_source)

        cache = self.cache
        if cache_enabled is not None or cache_dir is not None:
            cache = replace(
                self.cache,
                enabled=cache_enabled if cache_enabled is not None else self.cache.enabled,
                cache_dir=cache_dir if cache_dir is not None else self.cache.cache_dir,
            )

        return replace(self, server=server, trail=trail, cache=cache)
