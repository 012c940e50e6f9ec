"""In-memory response cache with a fixed time-to-live."""

from __future__ import annotations

from collections.abc import Callable
import time
from typing import Any

from .config import CACHE_TTL_SECONDS


class TTLCache:
    """Unbounded key/value cache whose entries expire after ``ttl_seconds``.

    Expired entries are skipped on read and overwritten on the next
    ``set``; nothing is evicted in the background.

    Example:
        >>> cache = TTLCache(ttl_seconds=60)
        >>> cache.set("services_https://example.com", {"services": []})
        >>> cache.get("services_https://example.com")
        {'services': []}
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Age after which an entry is considered stale.
            clock: Monotonic time source, in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        """Store a value, resetting its age."""
        self._entries[key] = (value, self._clock())

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
