"""Path alias lookups.

Maps system paths (e.g., "/node/1") to human-friendly aliases
(e.g., "/about") and back. Canonical URLs are the outbound form of a
path: its alias when one exists, the system path otherwise.
"""

from dataclasses import dataclass

from menutrail.core.types import URLPath


@dataclass(frozen=True)
class PathAlias:
    """Alias of a system path, optionally bound to a language."""

    path: str
    alias: str
    langcode: str | None = None


def normalize_path(path: str) -> str:
    """Normalize path to have a leading slash and no trailing slash.

    External URLs and the front page are returned unchanged.
    """
    if is_external(path):
        return path
    path = path.split("#", 1)[0]
    stripped = path.strip("/")
    if not stripped:
        return "/"
    return f"/{stripped}"


def is_external(url: str) -> bool:
    return "://" in url or url.startswith("//")


class AliasManager:
    """Alias registry with language fallback.

    Language-specific aliases take precedence over language-neutral ones.
    When several aliases match, the most recently added wins.
    """

    def __init__(self, aliases: list[PathAlias] | None = None) -> None:
        self._aliases: list[PathAlias] = []
        for alias in aliases or []:
            self.add_alias(alias.path, alias.alias, alias.langcode)

    def add_alias(self, path: str, alias: str, langcode: str | None = None) -> None:
        self._aliases.append(
            PathAlias(
                path=normalize_path(path),
                alias=normalize_path(alias),
                langcode=langcode,
            ),
        )

    def get_aliases(self, path: str, langcode: str | None = None) -> list[str]:
        """Get all aliases of a system path, most preferred last."""
        normalized = normalize_path(path)
        return [a.alias for a in self._candidates(langcode) if a.path == normalized]

    def get_alias_by_path(self, path: str, langcode: str | None = None) -> str:
        """Get the preferred alias of a system path, or the path itself."""
        aliases = self.get_aliases(path, langcode)
        if not aliases:
            return normalize_path(path)
        return aliases[-1]

    def get_path_by_alias(self, alias: str, langcode: str | None = None) -> str:
        """Get the system path an alias points to, or the alias itself."""
        normalized = normalize_path(alias)
        for candidate in reversed(self._candidates(langcode)):
            if candidate.alias == normalized:
                return candidate.path
        return normalized

    def is_known_path(self, path: str) -> bool:
        """Check whether a path is an alias or an aliased system path in any language."""
        normalized = normalize_path(path)
        return any(normalized in (a.path, a.alias) for a in self._aliases)

    def canonical_url(self, url: str, langcode: str | None = None) -> URLPath:
        """Convert a system path or alias to its canonical outbound form."""
        if is_external(url):
            return URLPath(url)
        system_path = self.get_path_by_alias(url, langcode)
        return URLPath(self.get_alias_by_path(system_path, langcode))

    def _candidates(self, langcode: str | None) -> list[PathAlias]:
        """Aliases visible to a language, neutral ones first."""
        neutral = [a for a in self._aliases if a.langcode is None]
        if langcode is None:
            return neutral
        specific = [a for a in self._aliases if a.langcode == langcode]
        return neutral + specific
