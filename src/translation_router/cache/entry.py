from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class CacheEntry:
    """Represents a cached translation entry."""

    key: str
    source_text: str
    translation: str
    source_language: str
    target_language: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """An entry is expired once ``expires_at`` is not in the future."""
        return self.expires_at <= (now or datetime.now())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["expires_at"] = self.expires_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        """Create from dictionary."""
        data = dict(data)
        data["created_at"] = datetime.fromisoformat(data["created_at"])
        data["expires_at"] = datetime.fromisoformat(data["expires_at"])
        return cls(**data)
