import asyncio
import logging
from typing import Any, Optional

from translation_router.errors import (
    InvalidResponseError,
    NetworkError,
    ProviderError,
    TranslationTimeoutError,
)
from translation_router.services.base import TranslationProvider

logger = logging.getLogger(__name__)

# DeepL rejects bare "EN"/"PT" as targets and calls Norwegian "NB".
_TARGET_CODES = {"en": "EN-US", "pt": "PT-BR", "no": "NB"}
_SOURCE_CODES = {"no": "NB"}


def deepl_source_code(code: str) -> str:
    return _SOURCE_CODES.get(code, code.upper())


def deepl_target_code(code: str) -> str:
    return _TARGET_CODES.get(code, code.upper())


class DeepLTranslationService(TranslationProvider):
    """DeepL translation service with native batch support."""

    name = "deepl"
    supports_batch = True
    default_timeout = 30.0

    def __init__(self, timeout: Optional[float] = None, rate_limit: int = 10) -> None:
        super().__init__(timeout, rate_limit)
        import deepl

        self._deepl = deepl
        self._translators: dict[str, Any] = {}

    def _get_translator(self, api_key: str) -> Any:
        translator = self._translators.get(api_key)
        if translator is None:
            translator = self._deepl.Translator(api_key)
            self._translators[api_key] = translator
        return translator

    async def _translate(self, text: str, source_lang: str, target_lang: str, api_key: str) -> str:
        return (await self._translate_many([text], source_lang, target_lang, api_key))[0]

    async def _translate_many(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        api_key: str,
    ) -> list[str]:
        """Translate texts using the DeepL API."""
        translator = self._get_translator(api_key)
        loop = asyncio.get_running_loop()
        try:
            result = await asyncio.wait_for(
                loop.run_in_executor(
                    None,
                    lambda: translator.translate_text(
                        texts,
                        source_lang=deepl_source_code(source_lang),
                        target_lang=deepl_target_code(target_lang),
                    ),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error("DeepL translation timed out after %ss", self.timeout)
            raise TranslationTimeoutError(f"DeepL request timed out after {self.timeout}s") from exc
        except self._deepl.ConnectionException as exc:
            logger.error("DeepL connection error: %s", exc)
            raise NetworkError(f"DeepL connection failed: {exc}") from exc
        except self._deepl.DeepLException as exc:
            logger.error("DeepL translation error: %s", exc)
            raise ProviderError(str(exc), provider=self.name) from exc

        results = result if isinstance(result, list) else [result]
        translations = [getattr(item, "text", None) for item in results]
        if len(translations) != len(texts) or not all(isinstance(item, str) for item in translations):
            logger.error("Invalid response from DeepL: %r", result)
            raise InvalidResponseError("Invalid response from DeepL")
        return translations
