import json
import logging
import os
from typing import Iterable, Optional

from translation_router.cache.base import CacheBackend
from translation_router.cache.entry import CacheEntry

logger = logging.getLogger(__name__)


class FileBackend(CacheBackend):
    """File-based cache backend storing one JSON document per key."""

    def __init__(self, cache_dir: str):
        self.cache_dir = cache_dir
        os.makedirs(cache_dir, exist_ok=True)
        logger.info("File cache initialized: %s", cache_dir)

    def _get_cache_file_path(self, hash_key: str) -> str:
        """Get cache file path for hash key."""
        return os.path.join(self.cache_dir, f"{hash_key}.json")

    def _cache_files(self) -> list[str]:
        return [
            os.path.join(self.cache_dir, filename)
            for filename in os.listdir(self.cache_dir)
            if filename.endswith(".json")
        ]

    def _read(self, cache_file: str) -> Optional[CacheEntry]:
        try:
            with open(cache_file, encoding="utf-8") as f:
                return CacheEntry.from_dict(json.load(f))
        except FileNotFoundError:
            # Removed by another process after the existence check.
            return None
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Corrupted cache file %s: %s", cache_file, exc)
            os.remove(cache_file)
            return None

    async def get(self, key: str) -> Optional[CacheEntry]:
        cache_file = self._get_cache_file_path(key)
        if not os.path.exists(cache_file):
            return None
        return self._read(cache_file)

    async def set(self, entry: CacheEntry) -> None:
        cache_file = self._get_cache_file_path(entry.key)
        tmp_file = f"{cache_file}.tmp"
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(entry.to_dict(), f, ensure_ascii=False, indent=2)
        os.replace(tmp_file, cache_file)

    async def delete(self, keys: Iterable[str]) -> int:
        removed = 0
        for key in keys:
            cache_file = self._get_cache_file_path(key)
            if os.path.exists(cache_file):
                os.remove(cache_file)
                removed += 1
        return removed

    async def entries(self) -> list[CacheEntry]:
        loaded = [self._read(cache_file) for cache_file in self._cache_files()]
        return sorted(
            (entry for entry in loaded if entry is not None),
            key=lambda entry: entry.created_at,
        )

    async def clear(self) -> None:
        for cache_file in self._cache_files():
            os.remove(cache_file)
        logger.info("File cache cleared")

    async def count(self) -> int:
        return len(self._cache_files())
