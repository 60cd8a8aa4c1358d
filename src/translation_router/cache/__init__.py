from translation_router.cache.base import CacheBackend, fingerprint
from translation_router.cache.entry import CacheEntry
from translation_router.cache.factory import CacheFactory
from translation_router.cache.file import FileBackend
from translation_router.cache.hybrid import HybridBackend
from translation_router.cache.manager import CacheManager
from translation_router.cache.memory import MemoryBackend
from translation_router.cache.sqlite import SQLiteBackend
from translation_router.cache.store import TranslationCache

__all__ = [
    "CacheEntry",
    "CacheBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "FileBackend",
    "HybridBackend",
    "CacheFactory",
    "CacheManager",
    "TranslationCache",
    "fingerprint",
]
