"""
Query cache for the API client.

Responses are stored under (endpoint, sorted params). A mutation
names the endpoint prefixes it makes stale, and every key under
those prefixes is dropped.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def cache_key(endpoint: str, params: dict | None = None) -> tuple:
    items = tuple(sorted(
        (str(name), str(value))
        for name, value in (params or {}).items()
        if value is not None
    ))
    return endpoint, items


class QueryCache:
    """
    An explicit cache object, handed to each ErpClient.

    Not thread-safe; give each thread its own cache.
    """

    def __init__(self):
        self._entries: dict[tuple, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def get(self, endpoint: str, params: dict | None = None, default=None):
        return self._entries.get(cache_key(endpoint, params), default)

    def has(self, endpoint: str, params: dict | None = None) -> bool:
        return cache_key(endpoint, params) in self._entries

    def set(self, endpoint: str, params: dict | None, value: Any) -> None:
        self._entries[cache_key(endpoint, params)] = value

    def invalidate(self, prefix: str) -> int:
        """Drop every key whose endpoint starts with prefix."""
        stale = [key for key in self._entries if key[0].startswith(prefix)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cached queries under %s", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
