"""
Discoverers resolve the current base URL of a named API.

Anything with a ``url()`` method qualifies. ``DirectDiscoverer`` covers the
fixed-URL case; registry-backed implementations plug in the same way and are
responsible for their own thread-safety.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Discoverer(Protocol):
    """Yields the base URL for one API."""

    def url(self) -> str:
        """Return the current base URL. May change between calls."""
        ...


@dataclass(frozen=True, slots=True)
class DirectDiscoverer:
    """Discoverer for a fixed base URL with no pooling or lookup."""

    base_url: str

    def url(self) -> str:
        return self.base_url
