"""In-memory id -> payload cache sitting in front of a message backend.

Write-through: the store updates the cache after every successful save,
so a read right after a save never touches the backend. Retention is
unbounded unless ``maxsize`` is given, in which case the least recently
used entry is dropped.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Awaitable, Callable

from messagestore.locks import KeyedLock

logger = logging.getLogger(__name__)


class MessageCache:
    """Per-id single-flight cache for message payloads.

    - ``get_or_add()`` returns a cached payload or runs ``loader`` on miss.
    - ``add_or_update()`` overwrites unconditionally.
    - Per-id asyncio locks make concurrent misses for one id share a
      single load. A lock lives only while someone holds or awaits it.
    """

    def __init__(self, maxsize: int | None = None) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be positive or None, got {maxsize}")
        self._maxsize = maxsize
        self._entries: OrderedDict[int, str] = OrderedDict()
        self._locks = KeyedLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    async def get_or_add(
        self, message_id: int, loader: Callable[[], Awaitable[str]]
    ) -> str:
        """Return the cached payload, awaiting ``loader()`` once on miss.

        Exceptions from ``loader`` propagate and leave the cache unchanged.
        """
        async with self._locks.hold(message_id):
            if message_id in self._entries:
                self._entries.move_to_end(message_id)
                self._hits += 1
                return self._entries[message_id]

            self._misses += 1
            payload = await loader()
            self._store(message_id, payload)
            return payload

    async def add_or_update(self, message_id: int, payload: str) -> None:
        """Overwrite the cached payload for ``message_id``."""
        async with self._locks.hold(message_id):
            self._store(message_id, payload)

    def _store(self, message_id: int, payload: str) -> None:
        self._entries[message_id] = payload
        self._entries.move_to_end(message_id)
        if self._maxsize is None:
            return
        while len(self._entries) > self._maxsize:
            evicted, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("Evicted message %d from cache.", evicted)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._entries

    @property
    def size(self) -> int:
        """Number of entries currently in cache."""
        return len(self._entries)

    def health(self) -> dict[str, object]:
        """Return cache metrics for monitoring."""
        return {
            "cache_size": self.size,
            "maxsize": self._maxsize,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }
