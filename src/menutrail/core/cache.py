"""Active trail cache backends.

Entries are JSON-serializable values stored under a string cache id and
labelled with tags. Invalidating a tag drops every entry carrying it.

File cache structure:
    .cache/
    └── trails/
        └── <cid_hash>.json     # {"cid": ..., "tags": [...], "data": ...}
"""

import hashlib
import json
import logging
import shutil
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol, TypedDict

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Protocol for trail cache storage."""

    def get(self, cid: str) -> Any | None: ...

    def set(self, cid: str, data: Any, tags: Iterable[str] = ()) -> None: ...

    def delete(self, cid: str) -> None: ...

    def invalidate_tags(self, tags: Iterable[str]) -> None: ...

    def clear(self) -> None: ...


class CachedItem(TypedDict):
    """Stored cache item structure."""

    cid: str
    tags: list[str]
    data: Any


def compute_cid_hash(cid: str) -> str:
    """Compute a filesystem-safe hash of a cache id.

    Returns:
        SHA-256 hash of the cache id
    """
    return hashlib.sha256(cid.encode()).hexdigest()


class MemoryCache:
    """Process-local cache safe for use from multiple threads."""

    def __init__(self) -> None:
        self._items: dict[str, CachedItem] = {}
        self._lock = threading.Lock()

    def get(self, cid: str) -> Any | None:
        with self._lock:
            item = self._items.get(cid)
        if item is None:
            return None
        return item["data"]

    def set(self, cid: str, data: Any, tags: Iterable[str] = ()) -> None:
        # Round-trip through JSON so callers never share mutable state
        item = CachedItem(cid=cid, tags=sorted(set(tags)), data=json.loads(json.dumps(data)))
        with self._lock:
            self._items[cid] = item

    def delete(self, cid: str) -> None:
        with self._lock:
            self._items.pop(cid, None)

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        invalid = set(tags)
        with self._lock:
            for cid in [cid for cid, item in self._items.items() if invalid & set(item["tags"])]:
                del self._items[cid]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class FileCache:
    """File-based cache persisting entries as JSON documents.

    Unreadable or corrupt entries are treated as misses.
    """

    _GITIGNORE_CONTENT = "# Ignore everything in this directory\n*\n"

    def __init__(self, cache_dir: Path) -> None:
        """Initialize cache with directory path.

        Args:
            cache_dir: Root directory for cache files (e.g., .cache/)
        """
        self._cache_dir = cache_dir
        self._trails_dir = cache_dir / "trails"

    @property
    def cache_dir(self) -> Path:
        """Root cache directory."""
        return self._cache_dir

    def _ensure_cache_dir(self) -> None:
        """Create cache directory with .gitignore if it doesn't exist."""
        if not self._cache_dir.exists():
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            gitignore_path = self._cache_dir / ".gitignore"
            gitignore_path.write_text(self._GITIGNORE_CONTENT, encoding="utf-8")

    def _item_path(self, cid: str) -> Path:
        return self._trails_dir / f"{compute_cid_hash(cid)}.json"

    def get(self, cid: str) -> Any | None:
        """Retrieve cached data.

        Args:
            cid: Cache id

        Returns:
            Cached data if present and readable, None otherwise
        """
        item = self._read_item(self._item_path(cid))
        if item is None or item["cid"] != cid:
            return None
        return item["data"]

    def set(self, cid: str, data: Any, tags: Iterable[str] = ()) -> None:
        """Store data in cache.

        Args:
            cid: Cache id
            data: JSON-serializable data
            tags: Tags used for invalidation
        """
        self._ensure_cache_dir()
        self._trails_dir.mkdir(parents=True, exist_ok=True)
        item: CachedItem = {"cid": cid, "tags": sorted(set(tags)), "data": data}
        self._item_path(cid).write_text(json.dumps(item), encoding="utf-8")

    def delete(self, cid: str) -> None:
        item_path = self._item_path(cid)
        if item_path.exists():
            item_path.unlink()

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        """Remove all entries carrying any of the given tags."""
        invalid = set(tags)
        if not self._trails_dir.exists():
            return
        for item_path in self._trails_dir.glob("*.json"):
            item = self._read_item(item_path)
            if item is None or invalid & set(item["tags"]):
                item_path.unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove all cached entries."""
        if self._trails_dir.exists():
            shutil.rmtree(self._trails_dir)

    def _read_item(self, item_path: Path) -> CachedItem | None:
        """Read and validate a cache item file.

        Args:
            item_path: Path to cache item JSON file

        Returns:
            CachedItem if valid, None otherwise
        """
        if not item_path.exists():
            return None

        try:
            data = json.loads(item_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable cache item {item_path.name}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        if "cid" not in data or "data" not in data:
            return None
        tags = data.get("tags", [])
        if not isinstance(tags, list):
            return None

        return CachedItem(cid=data["cid"], tags=tags, data=data["data"])


class NullCache:
    """Cache that stores nothing, used when caching is disabled."""

    def get(self, cid: str) -> Any | None:
        return None

    def set(self, cid: str, data: Any, tags: Iterable[str] = ()) -> None:
        pass

    def delete(self, cid: str) -> None:
        pass

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        pass

    def clear(self) -> None:
        pass
