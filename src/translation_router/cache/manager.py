import json
import logging
from pathlib import Path

from translation_router.cache.store import TranslationCache

logger = logging.getLogger(__name__)


class CacheManager:
    """Utility class for managing a translation cache from the command line."""

    def __init__(self, cache: TranslationCache):
        self.cache = cache

    async def print_stats(self) -> None:
        """Print cache statistics."""
        stats = await self.cache.get_stats()
        print("\n📊 Cache Statistics:")
        print("=" * 40)
        for key, value in stats.items():
            print(f"{key.replace('_', ' ').title()}: {value}")

    async def export_cache(self, export_path: str) -> int:
        """Export cache to a JSON file and return the number of entries written."""
        export_data = await self.cache.export()
        path = Path(export_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(export_data, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Cache exported to %s", export_path)
        return len(export_data)

    async def import_cache(self, import_path: str, merge: bool = True) -> int:
        """Import cache entries from a JSON file written by :meth:`export_cache`."""
        import_data = json.loads(Path(import_path).read_text(encoding="utf-8"))
        imported = await self.cache.import_data(import_data, merge=merge)
        logger.info("Cache imported from %s", import_path)
        return imported
