"""Core type definitions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import NewType

# URL path in canonical form (e.g., "/about", "/docs/api")
# Distinct from plain str to catch comparisons against raw request paths
URLPath = NewType("URLPath", str)

# Stable menu link identifier (e.g., "main.docs")
MenuLinkId = NewType("MenuLinkId", str)

# Ancestor id -> ancestor id; always holds the top-level "" entry
ActiveTrail = dict[str, str]


class TrailSourceMode(StrEnum):
    """Algorithm used to build the active trail of a menu."""

    DISABLED = "disabled"
    PATH = "path"
    CORE = "core"

    @classmethod
    def resolve(cls, value: str | None) -> "TrailSourceMode":
        """Map a configured value to a mode.

        Missing or unknown values fall back to PATH.
        """
        if not value:
            return cls.PATH
        try:
            return cls(value)
        except ValueError:
            return cls.PATH

    @classmethod
    def effective(cls, menu_value: str | None, default: str | None) -> "TrailSourceMode":
        """Mode of a menu: its own setting if present, else the default."""
        return cls.resolve(menu_value or default)


@dataclass(frozen=True)
class RequestContext:
    """State of the request a trail is computed for."""

    path_info: str
    langcode: str = "en"
