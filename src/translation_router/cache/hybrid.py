import logging
from typing import Iterable, Optional

from translation_router.cache.base import CacheBackend
from translation_router.cache.entry import CacheEntry

logger = logging.getLogger(__name__)


class HybridBackend(CacheBackend):
    """Hybrid backend using memory for hot data and persistent storage for cold data."""

    def __init__(self, memory_backend: CacheBackend, persistent_backend: CacheBackend):
        self.memory_backend = memory_backend
        self.persistent_backend = persistent_backend

    async def get(self, key: str) -> Optional[CacheEntry]:
        """Check memory first, then persistent storage."""
        entry = await self.memory_backend.get(key)
        if entry is not None:
            return entry

        entry = await self.persistent_backend.get(key)
        if entry is not None:
            await self.memory_backend.set(entry)
            logger.debug("Promoted persistent entry %s to memory", key[:12])
        return entry

    async def set(self, entry: CacheEntry) -> None:
        await self.persistent_backend.set(entry)
        await self.memory_backend.set(entry)

    async def delete(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        await self.memory_backend.delete(keys)
        return await self.persistent_backend.delete(keys)

    async def entries(self) -> list[CacheEntry]:
        return await self.persistent_backend.entries()

    async def clear(self) -> None:
        await self.memory_backend.clear()
        await self.persistent_backend.clear()
        logger.info("Hybrid cache cleared")

    async def count(self) -> int:
        return await self.persistent_backend.count()
