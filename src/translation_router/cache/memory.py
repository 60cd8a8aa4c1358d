import logging
from collections import OrderedDict
from typing import Iterable, Optional

from translation_router.cache.base import CacheBackend
from translation_router.cache.entry import CacheEntry

logger = logging.getLogger(__name__)


class MemoryBackend(CacheBackend):
    """In-memory cache backend keeping entries in insertion order."""

    def __init__(self, max_size: Optional[int] = None):
        self.cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.max_size = max_size

    async def get(self, key: str) -> Optional[CacheEntry]:
        return self.cache.get(key)

    async def set(self, entry: CacheEntry) -> None:
        if entry.key in self.cache:
            # Replaced entries move to the newest position.
            del self.cache[entry.key]
        elif self.max_size is not None and len(self.cache) >= self.max_size:
            oldest_key, _ = self.cache.popitem(last=False)
            logger.debug("Memory backend full, removed oldest entry %s", oldest_key[:12])
        self.cache[entry.key] = entry

    async def delete(self, keys: Iterable[str]) -> int:
        removed = 0
        for key in keys:
            if self.cache.pop(key, None) is not None:
                removed += 1
        return removed

    async def entries(self) -> list[CacheEntry]:
        return sorted(self.cache.values(), key=lambda entry: entry.created_at)

    async def clear(self) -> None:
        self.cache.clear()
        logger.info("Memory cache cleared")

    async def count(self) -> int:
        return len(self.cache)
