import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from platformdirs import user_cache_dir

ApiKeyResolver = Callable[[str, Optional[str]], Optional[str]]

# Environment variable prefixes for provider API keys.
API_KEY_ENV_PREFIXES: dict[str, str] = {
    "openai": "OPENAI",
    "anthropic": "ANTHROPIC",
    "google": "GOOGLE_TRANSLATE",
    "deepl": "DEEPL",
}


def env_api_key_resolver(provider_name: str, context_id: Optional[str] = None) -> Optional[str]:
    """Resolve an API key from the environment.

    A context specific variable (``OPENAI_API_KEY_<CONTEXT>``) takes precedence
    over the global one (``OPENAI_API_KEY``).
    """
    prefix = API_KEY_ENV_PREFIXES.get(provider_name, provider_name.upper().replace("-", "_"))
    if context_id:
        suffix = str(context_id).upper().replace("-", "_")
        key = os.getenv(f"{prefix}_API_KEY_{suffix}")
        if key:
            return key
    return os.getenv(f"{prefix}_API_KEY") or None


def parse_context_providers(raw: str) -> dict[str, str]:
    """Parse ``ctx=provider,ctx2=provider`` into a mapping."""
    overrides: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        context_id, sep, provider = item.partition("=")
        if not sep or not context_id.strip() or not provider.strip():
            raise ValueError(f"Invalid context provider override: {item!r}")
        overrides[context_id.strip()] = provider.strip().lower()
    return overrides


@dataclass
class Config:
    """Configuration settings for the translation core."""

    default_provider: str = "openai"
    context_providers: dict[str, str] = field(default_factory=dict)
    openai_model: str = "gpt-4.1-mini"
    openai_base_url: Optional[str] = None
    anthropic_model: str = "claude-3-haiku-20240307"
    request_timeout: Optional[float] = None  # seconds, None keeps provider defaults
    requests_per_second: int = 10
    # Caching configuration
    cache_type: str = "hybrid"  # memory, sqlite, file, hybrid
    cache_ttl_days: int = 30
    cache_max_entries: int = 10000
    cache_memory_size: int = 1000
    cache_db_path: str = ""
    cache_dir: str = ""

    def __post_init__(self) -> None:
        if not self.cache_db_path or not self.cache_dir:
            base_cache_dir = Path(user_cache_dir("translation-router", "translation-router"))
            if not self.cache_db_path:
                self.cache_db_path = str(base_cache_dir / "translation_cache.db")
            if not self.cache_dir:
                self.cache_dir = str(base_cache_dir / "translation_cache")

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from ``TRANSLATION_*`` environment variables."""
        timeout = os.getenv("TRANSLATION_REQUEST_TIMEOUT")
        return cls(
            default_provider=os.getenv("TRANSLATION_PROVIDER", "openai").lower(),
            context_providers=parse_context_providers(os.getenv("TRANSLATION_CONTEXT_PROVIDERS", "")),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4.1-mini"),
            openai_base_url=os.getenv("OPENAI_API_BASE") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307"),
            request_timeout=float(timeout) if timeout else None,
            requests_per_second=int(os.getenv("TRANSLATION_REQUESTS_PER_SECOND", "10")),
            cache_type=os.getenv("TRANSLATION_CACHE_TYPE", "hybrid"),
            cache_ttl_days=int(os.getenv("TRANSLATION_CACHE_TTL_DAYS", "30")),
            cache_max_entries=int(os.getenv("TRANSLATION_CACHE_MAX_ENTRIES", "10000")),
            cache_memory_size=int(os.getenv("TRANSLATION_CACHE_MEMORY_SIZE", "1000")),
            cache_db_path=os.getenv("TRANSLATION_CACHE_DB_PATH", ""),
            cache_dir=os.getenv("TRANSLATION_CACHE_DIR", ""),
        )
