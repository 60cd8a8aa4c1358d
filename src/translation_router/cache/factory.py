from translation_router.cache.base import CacheBackend
from translation_router.cache.file import FileBackend
from translation_router.cache.hybrid import HybridBackend
from translation_router.cache.memory import MemoryBackend
from translation_router.cache.sqlite import SQLiteBackend


class CacheFactory:
    """Factory for creating different types of cache backends."""

    @staticmethod
    def create_backend(cache_type: str, **kwargs) -> CacheBackend:
        """Create a backend instance based on type."""
        if cache_type == "memory":
            # Capacity of a memory-only cache is enforced by TranslationCache.max_entries.
            return MemoryBackend()
        if cache_type == "sqlite":
            db_path = kwargs.get("db_path")
            if not db_path:
                raise ValueError("db_path is required for sqlite cache")
            return SQLiteBackend(db_path=db_path)
        if cache_type == "file":
            cache_dir = kwargs.get("cache_dir")
            if not cache_dir:
                raise ValueError("cache_dir is required for file cache")
            return FileBackend(cache_dir=cache_dir)
        if cache_type == "hybrid":
            db_path = kwargs.get("db_path")
            if not db_path:
                raise ValueError("db_path is required for hybrid cache")
            memory_backend = MemoryBackend(max_size=kwargs.get("memory_size") or 1000)
            return HybridBackend(memory_backend, SQLiteBackend(db_path=db_path))
        raise ValueError(f"Unknown cache type: {cache_type}")
