"""Key/value caches for geocoding and travel results."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Protocol

from ..db.supabase import get_supabase_client

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Cache capability injected into the location service.

    Values are plain JSON-compatible structures. Entries only disappear by
    expiry; there is no explicit invalidation.
    """

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: int | None = None) -> None: ...


class InMemoryCache:
    """Process-local cache with per-entry TTL."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float | None, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (now + ttl if ttl else None, value)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, (expires_at, _) in self._entries.items() if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


class SupabaseCache:
    """Cache stored in the ``cache_entries`` table (key, value, expires_at).

    Errors are logged and treated as cache misses so a broken cache never
    breaks a lookup.
    """

    def __init__(self, table: str = "cache_entries", client_factory: Callable[[], Any] = get_supabase_client) -> None:
        self.table = table
        self._client_factory = client_factory

    def get(self, key: str) -> Any | None:
        client = self._client_factory()
        if client is None:
            return None
        try:
            response = client.table(self.table).select("value, expires_at").eq("key", key).limit(1).execute()
            rows = response.data or []
            if not rows:
                return None
            row = rows[0]
            expires_at = row.get("expires_at")
            if expires_at and _parse_timestamp(expires_at) <= datetime.now(timezone.utc):
                return None
            return row.get("value")
        except Exception as exc:
            logger.error(f"Cache get error for key {key}: {exc}")
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        client = self._client_factory()
        if client is None:
            return
        expires_at = (datetime.now(timezone.utc) + timedelta(seconds=ttl)).isoformat() if ttl else None
        try:
            client.table(self.table).upsert({"key": key, "value": value, "expires_at": expires_at}).execute()
        except Exception as exc:
            logger.error(f"Cache set error for key {key}: {exc}")


def _parse_timestamp(value: Any) -> datetime:
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
