import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from translation_router.cache import MemoryBackend, TranslationCache  # noqa: E402
from translation_router.services.base import TranslationProvider  # noqa: E402


# Test fixtures and utilities


class FakeClock:
    """Controllable replacement for ``datetime.now``."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingProvider(TranslationProvider):
    """Provider double that records every call it receives."""

    name = "openai"

    def __init__(self, suffix: str = "-x", supports_batch: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.suffix = suffix
        self.supports_batch = supports_batch
        self.calls: list[str] = []
        self.batch_calls: list[list[str]] = []
        self.api_keys: list[str] = []
        self.closed = False

    async def _translate(self, text, source_lang, target_lang, api_key):
        self.calls.append(text)
        self.api_keys.append(api_key)
        return f"{text}{self.suffix}"

    async def _translate_many(self, texts, source_lang, target_lang, api_key):
        self.batch_calls.append(list(texts))
        self.api_keys.append(api_key)
        return [f"{text}{self.suffix}" for text in texts]

    async def close(self) -> None:
        self.closed = True


class FailingProvider(TranslationProvider):
    """Provider double that fails on a given text."""

    name = "openai"

    def __init__(self, error: Exception, fail_on: str = None, **kwargs):
        super().__init__(**kwargs)
        self.error = error
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def _translate(self, text, source_lang, target_lang, api_key):
        self.calls.append(text)
        if self.fail_on is None or text == self.fail_on:
            raise self.error
        return f"{text}-x"


def static_resolver(provider_name, context_id=None):
    return f"{provider_name}-key"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock) -> TranslationCache:
    return TranslationCache(MemoryBackend(), ttl=timedelta(days=30), clock=clock)
