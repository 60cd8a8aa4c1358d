import html
import logging
from typing import Optional

import httpx

from translation_router.errors import InvalidResponseError
from translation_router.services.http import HTTPTranslationProvider

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"


class GoogleTranslationService(HTTPTranslationProvider):
    """Google Cloud Translation (v2 REST) provider with native batch support.

    The API treats input as HTML by default, so returned text may carry HTML
    entities; they are decoded before results are handed back.
    """

    name = "google"
    supports_batch = True
    default_timeout = 30.0

    def __init__(
        self,
        timeout: Optional[float] = None,
        rate_limit: int = 10,
        client: Optional[httpx.AsyncClient] = None,
        api_url: str = GOOGLE_TRANSLATE_URL,
    ) -> None:
        super().__init__(timeout, rate_limit, client)
        self.api_url = api_url

    async def _translate(self, text: str, source_lang: str, target_lang: str, api_key: str) -> str:
        return (await self._translate_many([text], source_lang, target_lang, api_key))[0]

    async def _translate_many(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        api_key: str,
    ) -> list[str]:
        body = await self._request_json(
            "POST",
            self.api_url,
            params={"key": api_key},
            json={"q": texts, "source": source_lang, "target": target_lang},
        )
        try:
            translations = [
                html.unescape(item["translatedText"]) for item in body["data"]["translations"]
            ]
        except (KeyError, TypeError) as exc:
            logger.error("Invalid response from Google Translate: %r", body)
            raise InvalidResponseError("Invalid response from Google Translate") from exc

        if len(translations) != len(texts):
            raise InvalidResponseError(
                f"Google Translate returned {len(translations)} translations for {len(texts)} texts"
            )
        return translations
