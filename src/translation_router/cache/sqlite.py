import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from translation_router.cache.base import CacheBackend
from translation_router.cache.entry import CacheEntry

logger = logging.getLogger(__name__)

_COLUMNS = (
    "hash_key, source_text, translated_text, source_language, target_language, created_at, expires_at"
)


def _row_to_entry(row: tuple) -> CacheEntry:
    return CacheEntry(
        key=row[0],
        source_text=row[1],
        translation=row[2],
        source_language=row[3],
        target_language=row[4],
        created_at=datetime.fromisoformat(row[5]),
        expires_at=datetime.fromisoformat(row[6]),
    )


class SQLiteBackend(CacheBackend):
    """SQLite-based persistent cache backend with per-key upserts."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._init_db()

    def _init_db(self) -> None:
        """Initialize SQLite database."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS translations (
                    hash_key TEXT PRIMARY KEY,
                    source_text TEXT NOT NULL,
                    translated_text TEXT NOT NULL,
                    source_language TEXT NOT NULL,
                    target_language TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_created_at ON translations(created_at)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_expires_at ON translations(expires_at)")
            conn.commit()
        logger.info("SQLite cache initialized: %s", self.db_path)

    async def get(self, key: str) -> Optional[CacheEntry]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM translations WHERE hash_key = ?",
                (key,),
            )
            row = cursor.fetchone()
        return _row_to_entry(row) if row else None

    async def set(self, entry: CacheEntry) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO translations ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.key,
                    entry.source_text,
                    entry.translation,
                    entry.source_language,
                    entry.target_language,
                    entry.created_at.isoformat(),
                    entry.expires_at.isoformat(),
                ),
            )
            conn.commit()

    async def delete(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.executemany(
                "DELETE FROM translations WHERE hash_key = ?",
                [(key,) for key in keys],
            )
            conn.commit()
            return cursor.rowcount

    async def entries(self) -> list[CacheEntry]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(f"SELECT {_COLUMNS} FROM translations ORDER BY created_at, rowid")
            rows = cursor.fetchall()
        return [_row_to_entry(row) for row in rows]

    async def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM translations")
            conn.commit()
        logger.info("SQLite cache cleared")

    async def count(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM translations").fetchone()[0]
