"""Tiny in-memory TTL cache for successful parse results."""

from __future__ import annotations

import time

from monojar.scraper.models import JarData


class ResultCache:
    """Maps jar URLs to their last :class:`JarData` for ``ttl`` seconds.

    A ``ttl`` of zero (or less) disables caching entirely.
    """

    def __init__(self, ttl: float) -> None:
        self.ttl = ttl
        self._entries: dict[str, tuple[float, JarData]] = {}

    def get(self, url: str) -> JarData | None:
        if self.ttl <= 0:
            return None
        entry = self._entries.get(url)
        if entry is None:
            return None
        stored_at, data = entry
        if time.monotonic() - stored_at >= self.ttl:
            del self._entries[url]
            return None
        return data

    def put(self, url: str, data: JarData) -> None:
        """Store *data* for *url* and drop every entry that has expired."""
        if self.ttl <= 0:
            return
        now = time.monotonic()
        expired = [key for key, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl]
        for key in expired:
            del self._entries[key]
        self._entries[url] = (now, data)

    def clear(self) -> None:
        self._entries.clear()
