"""Candidate URLs for the current request.

Turns the requested path into the chain of URLs that may correspond
to it in a menu, from the shortest prefix to the page itself.
"""

import logging
from collections.abc import Callable

from menutrail.core.aliases import AliasManager, is_external
from menutrail.core.types import RequestContext, URLPath

logger = logging.getLogger(__name__)


class PathHelper:
    """Builds candidate URLs for a request.

    For "/blog/2024/my-post" the candidates are "/blog", "/blog/2024" and
    "/blog/2024/my-post", each converted to its canonical form.
    """

    def __init__(
        self,
        context: RequestContext,
        aliases: AliasManager,
        *,
        max_path_parts: int = 0,
        validator: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize path helper.

        Args:
            context: Current request
            aliases: Alias registry used to canonicalize each candidate
            max_path_parts: Maximum number of leading path segments used for
                            prefix candidates, 0 for no limit
            validator: Optional check dropping prefixes that are not valid pages
        """
        self._context = context
        self._aliases = aliases
        self._max_path_parts = max_path_parts
        self._validator = validator

    def get_urls(self) -> list[URLPath]:
        """Get candidate URLs, least specific first.

        The last element is always the canonical URL of the current page.
        """
        langcode = self._context.langcode
        current = self._aliases.canonical_url(self._context.path_info, langcode)

        urls: list[URLPath] = []
        for path in self._get_prefixes(current):
            if self._validator is not None and not self._validator(path):
                logger.debug(f"Skipping invalid trail path {path}")
                continue
            url = self._aliases.canonical_url(path, langcode)
            if url != current and url not in urls:
                urls.append(url)
        urls.append(current)
        return urls

    def _get_prefixes(self, current: str) -> list[str]:
        """Get proper path prefixes of the current page, shortest first."""
        if is_external(current):
            return []
        parts = [part for part in current.split("/") if part]
        if self._max_path_parts > 0:
            parts = parts[: self._max_path_parts]
        else:
            parts = parts[:-1]
        return ["/" + "/".join(parts[:i]) for i in range(1, len(parts) + 1)]
