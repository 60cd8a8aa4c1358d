import hashlib
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from translation_router.cache.entry import CacheEntry


def fingerprint(text: str, source_lang: str, target_lang: str) -> str:
    """Generate the cache key for a (source, target, text) triple."""
    content = f"{source_lang}:{target_lang}:{text}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class CacheBackend(ABC):
    """Abstract per-key storage for translation cache entries."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry for a key, expired or not."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, entry: CacheEntry) -> None:
        """Insert or replace the entry stored under ``entry.key``."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, keys: Iterable[str]) -> int:
        """Delete entries by key and return how many were removed."""
        raise NotImplementedError

    @abstractmethod
    async def entries(self) -> list[CacheEntry]:
        """Return every stored entry, oldest first."""
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cache entries."""
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError
