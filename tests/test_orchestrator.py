import asyncio

import pytest

from conftest import FailingProvider, RecordingProvider, static_resolver
from translation_router.cache import HybridBackend, TranslationCache
from translation_router.config import Config
from translation_router.detection import GoogleLanguageDetector, LanguageDetector
from translation_router.errors import NetworkError, ProviderError
from translation_router.orchestrator import TranslationService
from translation_router.services import Provider, Translator


class CountingDetector(LanguageDetector):
    def __init__(self):
        super().__init__()
        self.calls: list[str] = []

    async def detect(self, text, allow_remote_fallback=False):
        self.calls.append(text)
        return await super().detect(text, allow_remote_fallback)


def _service(provider, memory_cache, detector=None):
    translator = Translator({Provider.OPENAI: provider}, api_key_resolver=static_resolver)
    return TranslationService(detector or LanguageDetector(), translator, memory_cache)


@pytest.mark.asyncio
async def test_repeated_translate_hits_cache(memory_cache):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)

    first = await service.translate("Hola", "en", source_lang="es")
    second = await service.translate("Hola", "en", source_lang="es")

    assert first == second == "Hola-x"
    assert provider.calls == ["Hola"]
    assert memory_cache.hits == 1


@pytest.mark.asyncio
async def test_same_language_returns_input_without_side_effects(memory_cache):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)

    assert await service.translate("The cat is on the mat", "en") == "The cat is on the mat"
    assert await service.translate("Hola", "es", source_lang="es") == "Hola"
    assert provider.calls == []
    assert await memory_cache.size() == 0
    assert memory_cache.hits == memory_cache.misses == 0


@pytest.mark.asyncio
async def test_source_is_detected_when_missing(memory_cache):
    provider = RecordingProvider()
    detector = CountingDetector()
    service = _service(provider, memory_cache, detector)

    assert await service.translate("Der Hund ist in dem Haus", "en") == "Der Hund ist in dem Haus-x"
    assert detector.calls == ["Der Hund ist in dem Haus"]
    assert await memory_cache.get("Der Hund ist in dem Haus", "de", "en") == "Der Hund ist in dem Haus-x"


@pytest.mark.asyncio
async def test_detection_failure_falls_back_to_english(memory_cache):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)

    # Empty text cannot be detected, so it is treated as English.
    assert await service.translate("", "en") == ""
    assert await service.translate("", "de") == "-x"
    assert await memory_cache.get("", "en", "de") == "-x"


@pytest.mark.asyncio
async def test_failed_translation_is_not_cached(memory_cache):
    provider = FailingProvider(NetworkError("openai request failed"))
    service = _service(provider, memory_cache)

    with pytest.raises(NetworkError):
        await service.translate("Hola", "en", source_lang="es")
    with pytest.raises(NetworkError):
        await service.translate("Hola", "en", source_lang="es")

    assert provider.calls == ["Hola", "Hola"]
    assert await memory_cache.size() == 0


@pytest.mark.asyncio
async def test_batch_sends_only_cache_misses_in_order(memory_cache):
    provider = RecordingProvider(supports_batch=True)
    service = _service(provider, memory_cache)
    await memory_cache.set("b", "es", "en", "B-cached")

    result = await service.batch_translate(["a", "b", "c"], "en", source_lang="es")

    assert result == ["a-x", "B-cached", "c-x"]
    assert provider.batch_calls == [["a", "c"]]
    assert await memory_cache.get("c", "es", "en") == "c-x"


@pytest.mark.asyncio
async def test_batch_fully_cached_skips_provider(memory_cache):
    provider = RecordingProvider(supports_batch=True)
    service = _service(provider, memory_cache)

    await service.batch_translate(["a", "b"], "en", source_lang="es")
    assert await service.batch_translate(["b", "a"], "en", source_lang="es") == ["b-x", "a-x"]
    assert provider.batch_calls == [["a", "b"]]


@pytest.mark.asyncio
async def test_batch_same_language_and_empty_input(memory_cache):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)

    assert await service.batch_translate([], "de") == []
    assert await service.batch_translate(["uno", "dos"], "es", source_lang="es") == ["uno", "dos"]
    assert provider.calls == []


@pytest.mark.asyncio
async def test_batch_detects_source_once(memory_cache):
    provider = RecordingProvider()
    detector = CountingDetector()
    service = _service(provider, memory_cache, detector)

    await service.batch_translate(["Der Hund", "ist in dem Haus"], "en")

    assert detector.calls == ["Der Hund\nist in dem Haus"]
    assert await memory_cache.get("Der Hund", "de", "en") == "Der Hund-x"


@pytest.mark.asyncio
async def test_batch_failure_caches_nothing(memory_cache):
    provider = FailingProvider(ProviderError("boom", provider="openai"), fail_on="c")
    service = _service(provider, memory_cache)

    with pytest.raises(ProviderError):
        await service.batch_translate(["a", "b", "c"], "en", source_lang="es")
    assert await memory_cache.size() == 0


@pytest.mark.asyncio
async def test_concurrent_translations_share_cache(memory_cache):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)

    texts = [f"texto {index}" for index in range(10)]
    results = await asyncio.gather(*(service.translate(text, "en", source_lang="es") for text in texts))

    assert results == [f"{text}-x" for text in texts]
    assert await memory_cache.size() == 10


@pytest.mark.asyncio
async def test_stats_and_maintenance(memory_cache, clock):
    provider = RecordingProvider()
    service = _service(provider, memory_cache)
    await service.translate("Hola", "en", source_lang="es")
    await service.translate("Hola", "en", source_lang="es")

    stats = await service.get_stats()
    assert stats["cache_size"] == 1
    assert stats["cache_hits"] == 1
    assert stats["cache_misses"] == 1
    assert stats["cache"]["hit_rate"] == 50.0
    assert "ja" in stats["supported_languages"]

    clock.advance(days=31)
    assert await service.cleanup_cache() == 1

    await service.translate("Adiós", "en", source_lang="es")
    await service.clear_cache()
    assert await memory_cache.size() == 0


@pytest.mark.asyncio
async def test_from_config_wires_components(tmp_path):
    config = Config(
        default_provider="anthropic",
        cache_type="hybrid",
        cache_ttl_days=7,
        cache_max_entries=50,
        cache_db_path=str(tmp_path / "cache.db"),
        cache_dir=str(tmp_path / "files"),
    )
    service = TranslationService.from_config(config, static_resolver)

    assert isinstance(service.cache, TranslationCache)
    assert isinstance(service.cache.backend, HybridBackend)
    assert service.cache.ttl.days == 7
    assert service.cache.max_entries == 50
    assert isinstance(service.detector.remote, GoogleLanguageDetector)
    assert set(service.translator.providers) == {Provider.ANTHROPIC}
    await service.close()


@pytest.mark.asyncio
async def test_close_releases_translator_and_remote_detector(memory_cache):
    class ClosingRemote:
        closed = False

        async def detect(self, text):
            return "fi"

        async def close(self):
            self.closed = True

    provider = RecordingProvider()
    remote = ClosingRemote()
    service = _service(provider, memory_cache, LanguageDetector(remote=remote))

    await service.close()
    assert provider.closed
    assert remote.closed


@pytest.mark.asyncio
async def test_from_config_memory_cache_honours_max_entries(tmp_path):
    config = Config(
        cache_type="memory",
        cache_memory_size=2,
        cache_max_entries=4,
        cache_db_path=str(tmp_path / "cache.db"),
        cache_dir=str(tmp_path / "files"),
    )
    service = TranslationService.from_config(config, static_resolver)

    for index in range(6):
        await service.cache.set(f"texto {index}", "es", "en", f"text {index}")

    assert await service.cache.size() == 4
    await service.close()
