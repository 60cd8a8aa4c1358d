import logging
from datetime import timedelta
from typing import Any, Optional, Sequence

from translation_router.cache import CacheFactory, TranslationCache
from translation_router.config import ApiKeyResolver, Config
from translation_router.detection import GoogleLanguageDetector, LanguageDetector
from translation_router.errors import InvalidResponseError, TranslationError
from translation_router.languages import DEFAULT_LANGUAGE
from translation_router.services import Translator

logger = logging.getLogger(__name__)


class TranslationService:
    """Detect, cache and translate text.

    Owns one detector, one translator and one cache. Build it once at startup
    and hand it to whatever needs translations.
    """

    def __init__(
        self,
        detector: LanguageDetector,
        translator: Translator,
        cache: TranslationCache,
    ) -> None:
        self.detector = detector
        self.translator = translator
        self.cache = cache

    @classmethod
    def from_config(
        cls,
        config: Config,
        api_key_resolver: Optional[ApiKeyResolver] = None,
    ) -> "TranslationService":
        backend = CacheFactory.create_backend(
            config.cache_type,
            memory_size=config.cache_memory_size,
            db_path=config.cache_db_path,
            cache_dir=config.cache_dir,
        )
        cache = TranslationCache(
            backend,
            ttl=timedelta(days=config.cache_ttl_days),
            max_entries=config.cache_max_entries,
        )
        detector = LanguageDetector(remote=GoogleLanguageDetector(api_key_resolver))
        translator = Translator.from_config(config, api_key_resolver)
        logger.info(
            "event=service_init provider=%s cache_type=%s cache_ttl_days=%s",
            config.default_provider,
            config.cache_type,
            config.cache_ttl_days,
        )
        return cls(detector, translator, cache)

    async def _detect_source(self, text: str) -> str:
        try:
            return await self.detector.detect(text, allow_remote_fallback=False)
        except TranslationError as exc:
            logger.debug("Language detection failed, defaulting to %s: %s", DEFAULT_LANGUAGE, exc)
            return DEFAULT_LANGUAGE

    async def translate(
        self,
        text: str,
        target_lang: str,
        source_lang: Optional[str] = None,
        context_id: Optional[str] = None,
    ) -> str:
        """Translate ``text``, serving repeated requests from the cache.

        Translation failures propagate and are never cached.
        """
        if not source_lang:
            source_lang = await self._detect_source(text)

        if source_lang == target_lang:
            return text

        cached = await self.cache.get(text, source_lang, target_lang)
        if cached is not None:
            logger.debug("event=translation_cache_hit source=%s target=%s", source_lang, target_lang)
            return cached

        try:
            translated = await self.translator.translate(text, source_lang, target_lang, context_id)
        except TranslationError as exc:
            logger.error(
                "event=translation_failed source=%s target=%s error=%s",
                source_lang,
                target_lang,
                exc,
            )
            raise

        await self.cache.set(text, source_lang, target_lang, translated)
        return translated

    async def batch_translate(
        self,
        texts: Sequence[str],
        target_lang: str,
        source_lang: Optional[str] = None,
        context_id: Optional[str] = None,
    ) -> list[str]:
        """Translate texts in order, sending only cache misses to the provider.

        Any failure aborts the whole batch.
        """
        if not texts:
            return []

        if not source_lang:
            source_lang = await self._detect_source("\n".join(texts))

        if source_lang == target_lang:
            return list(texts)

        translations: dict[int, str] = {}
        pending: list[tuple[int, str]] = []
        for index, text in enumerate(texts):
            cached = await self.cache.get(text, source_lang, target_lang)
            if cached is not None:
                translations[index] = cached
            else:
                pending.append((index, text))

        logger.debug(
            "event=batch_partition source=%s target=%s cached=%s pending=%s",
            source_lang,
            target_lang,
            len(translations),
            len(pending),
        )

        if pending:
            try:
                results = await self.translator.batch_translate(
                    [text for _, text in pending],
                    source_lang,
                    target_lang,
                    context_id,
                )
            except TranslationError as exc:
                logger.error(
                    "event=batch_translation_failed source=%s target=%s items=%s error=%s",
                    source_lang,
                    target_lang,
                    len(pending),
                    exc,
                )
                raise
            if len(results) != len(pending):
                raise InvalidResponseError(f"expected {len(pending)} items, got {len(results)}")

            for (index, text), translated in zip(pending, results):
                translations[index] = translated
                await self.cache.set(text, source_lang, target_lang, translated)

        return [translations[index] for index in range(len(texts))]

    async def get_stats(self) -> dict[str, Any]:
        stats = await self.cache.get_stats()
        return {
            "cache": stats,
            "cache_size": stats["total"],
            "cache_hits": self.cache.hits,
            "cache_misses": self.cache.misses,
            "supported_languages": self.translator.supported_languages(),
        }

    async def clear_cache(self) -> None:
        await self.cache.clear_all()

    async def cleanup_cache(self) -> int:
        """Drop expired cache entries; meant for a daily external scheduler."""
        return await self.cache.cleanup_expired()

    async def close(self) -> None:
        await self.translator.close()
        if self.detector.remote is not None:
            await self.detector.remote.close()
