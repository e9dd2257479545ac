"""Client-side query cache keyed by (resource path, parameters)."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

QueryKey = tuple[str, tuple[tuple[str, Any], ...]]


def make_key(path: str, params: dict[str, Any] | None = None) -> QueryKey:
    """Canonical cache key: parameters sorted by name, None values dropped."""
    items = tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))
    return (path, items)


class QueryStatus(StrEnum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class QueryState:
    status: QueryStatus = QueryStatus.LOADING
    data: Any = None
    error: Exception | None = None
    updated_at: datetime | None = field(default=None)


class QueryCache:
    """
    Deduplicating cache for read requests.

    - A ready entry is served without a request.
    - Concurrent fetches of the same key share one in-flight task.
    - invalidate() drops entries by path; a result that arrives for a key
      invalidated while it was in flight is discarded.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)
        self._entries: dict[QueryKey, QueryState] = {}
        self._inflight: dict[QueryKey, asyncio.Task] = {}
        self._generations: dict[QueryKey, int] = {}

    def state(self, key: QueryKey) -> QueryState | None:
        return self._entries.get(key)

    def get_data(self, key: QueryKey) -> Any:
        state = self._entries.get(key)
        return state.data if state else None

    def set_data(self, key: QueryKey, data: Any) -> None:
        """Replace cached data directly (optimistic updates and rollbacks)."""
        self._entries[key] = QueryState(
            status=QueryStatus.READY, data=data, updated_at=datetime.now(timezone.utc)
        )

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    async def fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        state = self._entries.get(key)
        if state is not None and state.status is QueryStatus.READY:
            return state.data

        task = self._inflight.get(key)
        if task is None:
            generation = self._generations.get(key, 0)
            self._entries[key] = QueryState(
                status=QueryStatus.LOADING, data=state.data if state else None
            )
            task = asyncio.ensure_future(self._run(key, fetcher, generation))
            self._inflight[key] = task
        # Shield so one cancelled caller does not cancel the shared request.
        return await asyncio.shield(task)

    async def _run(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]], generation: int) -> Any:
        current = asyncio.current_task()
        try:
            data = await fetcher()
        except Exception as e:
            if self._generations.get(key, 0) == generation:
                self._entries[key] = QueryState(status=QueryStatus.ERROR, error=e)
            self.logger.warning("Query %s failed: %s", key[0], e)
            raise
        finally:
            if self._inflight.get(key) is current:
                del self._inflight[key]

        if self._generations.get(key, 0) == generation:
            self._entries[key] = QueryState(
                status=QueryStatus.READY, data=data, updated_at=datetime.now(timezone.utc)
            )
        else:
            self.logger.debug("Discarding stale result for %s", key[0])
        return data

    def invalidate(self, path: str | None = None) -> int:
        """
        Drop cached entries for ``path`` (all entries when None).

        Returns the number of keys invalidated.
        """
        keys = {k for k in (*self._entries, *self._inflight) if path is None or k[0] == path}
        for key in keys:
            self._entries.pop(key, None)
            self._inflight.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        if keys:
            self.logger.debug("Invalidated %d cache key(s) for %s", len(keys), path or "*")
        return len(keys)
