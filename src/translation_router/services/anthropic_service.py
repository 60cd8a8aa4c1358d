import logging
import os
from typing import Optional

import httpx

from translation_router.errors import InvalidResponseError
from translation_router.services.base import build_translation_prompt
from translation_router.services.http import HTTPTranslationProvider

logger = logging.getLogger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicTranslationService(HTTPTranslationProvider):
    """Messages-API translation provider."""

    name = "anthropic"
    default_timeout = 60.0

    def __init__(
        self,
        timeout: Optional[float] = None,
        rate_limit: int = 10,
        client: Optional[httpx.AsyncClient] = None,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        api_url: str = ANTHROPIC_API_URL,
    ) -> None:
        super().__init__(timeout, rate_limit, client)
        self.model = model or os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307")
        self.max_tokens = max_tokens
        self.api_url = api_url

    async def _translate(self, text: str, source_lang: str, target_lang: str, api_key: str) -> str:
        body = await self._request_json(
            "POST",
            self.api_url,
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            json={
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": [
                    {"role": "user", "content": build_translation_prompt(text, source_lang, target_lang)},
                ],
            },
        )
        try:
            content = body["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Invalid response from Anthropic: %r", body)
            raise InvalidResponseError("Invalid response from Anthropic") from exc
        if not isinstance(content, str):
            raise InvalidResponseError("Invalid response from Anthropic")
        return content.strip()
