import logging
from abc import ABC, abstractmethod
from time import perf_counter
from typing import Optional

from asyncio_throttle import Throttler

from translation_router.errors import MissingAPIKeyError, ProviderError
from translation_router.languages import get_language_name

logger = logging.getLogger(__name__)


def build_translation_prompt(text: str, source_lang: str, target_lang: str) -> str:
    """Natural-language instruction shared by the LLM providers."""
    return (
        f"Translate the following text from {source_lang} to {get_language_name(target_lang)}. "
        f"Only provide the translation, no explanations:\n\n{text}"
    )


class TranslationProvider(ABC):
    """Abstract base class for remote translation providers."""

    name: str = ""
    supports_batch: bool = False
    default_timeout: float = 30.0

    def __init__(self, timeout: Optional[float] = None, rate_limit: int = 10) -> None:
        self.timeout = timeout or self.default_timeout
        self.throttler = Throttler(rate_limit=max(1, rate_limit), period=1.0)

    @abstractmethod
    async def _translate(self, text: str, source_lang: str, target_lang: str, api_key: str) -> str:
        """Perform one provider call."""

    async def _translate_many(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        api_key: str,
    ) -> list[str]:
        """Perform one native batch call. Only batch capable providers override this."""
        raise ProviderError("batch translation is not supported", provider=self.name)

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        api_key: Optional[str] = None,
    ) -> str:
        """Translate a single text."""
        api_key = self._require_api_key(api_key)
        throttle_start = perf_counter()
        async with self.throttler:
            self._log_throttle_wait(throttle_start)
            return await self._translate(text, source_lang, target_lang, api_key)

    async def translate_batch(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        api_key: Optional[str] = None,
    ) -> list[str]:
        """Translate many texts in one remote call."""
        api_key = self._require_api_key(api_key)
        throttle_start = perf_counter()
        async with self.throttler:
            self._log_throttle_wait(throttle_start)
            return await self._translate_many(texts, source_lang, target_lang, api_key)

    async def close(self) -> None:
        """Release network resources held by the provider."""

    def _require_api_key(self, api_key: Optional[str]) -> str:
        if not api_key or not api_key.strip():
            raise MissingAPIKeyError(self.name)
        return api_key

    def _log_throttle_wait(self, throttle_start: float) -> None:
        throttle_wait = perf_counter() - throttle_start
        if throttle_wait > 0.001:
            logger.debug("Provider %s throttled for %.3fs", self.name, throttle_wait)
