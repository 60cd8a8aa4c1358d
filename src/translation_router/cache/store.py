import asyncio
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, Optional

from translation_router.cache.base import CacheBackend, fingerprint
from translation_router.cache.entry import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=30)
DEFAULT_MAX_ENTRIES = 10000

_WARM_FIELDS = ("text", "source_lang", "target_lang", "translation")


class TranslationCache:
    """TTL-aware translation cache over a per-key backend.

    The cache is the single writer of its backend: every operation runs under
    one ``asyncio.Lock`` and touches individual keys, so concurrent requests
    never overwrite each other's inserts. Provider calls happen outside of it.

    ``hits`` and ``misses`` count lookups for the lifetime of the process and
    are never persisted.
    """

    def __init__(
        self,
        backend: CacheBackend,
        ttl: timedelta = DEFAULT_TTL,
        max_entries: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.backend = backend
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        self.hits = 0
        self.misses = 0
        self._lock = asyncio.Lock()

    async def get(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """Get cached translation, or ``None`` on a miss."""
        key = fingerprint(text, source_lang, target_lang)
        async with self._lock:
            entry = await self.backend.get(key)
            if entry is not None and not entry.is_expired(self.clock()):
                self.hits += 1
                logger.debug("Cache hit for: %s...", text[:50])
                return entry.translation

            self.misses += 1
            if entry is not None:
                logger.debug("Cache entry expired for: %s...", text[:50])
            else:
                logger.debug("Cache miss for: %s...", text[:50])
            return None

    async def set(self, text: str, source_lang: str, target_lang: str, translation: str) -> None:
        """Store translation in cache."""
        async with self._lock:
            await self.backend.set(self._new_entry(text, source_lang, target_lang, translation))
            if self.max_entries is not None:
                await self._prune(self.max_entries)
        logger.debug("Cached translation for: %s...", text[:50])

    async def cleanup_expired(self) -> int:
        """Remove expired entries and return count of removed entries."""
        async with self._lock:
            now = self.clock()
            expired = [entry.key for entry in await self.backend.entries() if entry.is_expired(now)]
            removed = await self.backend.delete(expired) if expired else 0
        if removed:
            logger.info("Cleaned up %s expired translation cache entries", removed)
        return removed

    async def prune(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> int:
        """Remove the oldest entries until at most ``max_entries`` remain."""
        async with self._lock:
            return await self._prune(max_entries)

    async def _prune(self, max_entries: int) -> int:
        if await self.backend.count() <= max_entries:
            return 0
        entries = await self.backend.entries()
        to_remove = len(entries) - max_entries
        if to_remove <= 0:
            return 0
        removed = await self.backend.delete(entry.key for entry in entries[:to_remove])
        logger.info("Pruned %s old translation cache entries", removed)
        return removed

    async def clear_all(self) -> None:
        """Clear all cache entries. Hit and miss counters are kept."""
        logger.info("Clearing all translation cache")
        async with self._lock:
            await self.backend.clear()

    async def size(self) -> int:
        return await self.backend.count()

    async def export(self) -> dict[str, dict[str, Any]]:
        """Export every entry keyed by fingerprint, oldest first."""
        async with self._lock:
            entries = await self.backend.entries()
        return {entry.key: entry.to_dict() for entry in entries}

    async def import_data(self, data: Mapping[str, Any], merge: bool = True) -> int:
        """Import entries produced by :meth:`export`.

        With ``merge=False`` the current content is replaced.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Cache import data must be a mapping of key to entry")

        entries: list[CacheEntry] = []
        for key, raw in data.items():
            try:
                entry = CacheEntry.from_dict({**raw, "key": key})
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed cache entry %s: %s", key, exc)
                continue
            entries.append(entry)

        async with self._lock:
            if not merge:
                await self.backend.clear()
            for entry in entries:
                await self.backend.set(entry)
            if self.max_entries is not None:
                await self._prune(self.max_entries)

        logger.info("Imported %s translation cache entries", len(entries))
        return len(entries)

    async def warm(self, translations: Iterable[Mapping[str, str]]) -> int:
        """Seed the cache with precomputed translations.

        Each item needs ``text``, ``source_lang``, ``target_lang`` and
        ``translation``; incomplete items are skipped.
        """
        added = 0
        async with self._lock:
            for item in translations:
                if not all(name in item for name in _WARM_FIELDS):
                    continue
                await self.backend.set(
                    self._new_entry(item["text"], item["source_lang"], item["target_lang"], item["translation"])
                )
                added += 1
            if self.max_entries is not None:
                await self._prune(self.max_entries)

        logger.info("Warmed translation cache with %s entries", added)
        return added

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        async with self._lock:
            entries = await self.backend.entries()
        now = self.clock()
        size_bytes = sum(
            len(json.dumps(entry.to_dict(), ensure_ascii=False).encode("utf-8")) for entry in entries
        )
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "total": len(entries),
            "expired": sum(1 for entry in entries if entry.is_expired(now)),
            "size_bytes": size_bytes,
            "size_kb": round(size_bytes / 1024, 2),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(hit_rate, 2),
        }

    def _new_entry(self, text: str, source_lang: str, target_lang: str, translation: str) -> CacheEntry:
        now = self.clock()
        return CacheEntry(
            key=fingerprint(text, source_lang, target_lang),
            source_text=text,
            translation=translation,
            source_language=source_lang,
            target_language=target_lang,
            created_at=now,
            expires_at=now + self.ttl,
        )
