import logging
import os
from typing import Any, Optional

import openai

from translation_router.errors import (
    InvalidResponseError,
    NetworkError,
    ProviderError,
    TranslationTimeoutError,
)
from translation_router.services.base import TranslationProvider, build_translation_prompt

logger = logging.getLogger(__name__)


class OpenAITranslationService(TranslationProvider):
    """Chat-completion translation provider backed by the OpenAI SDK."""

    name = "openai"
    default_timeout = 60.0

    def __init__(
        self,
        timeout: Optional[float] = None,
        rate_limit: int = 10,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
    ) -> None:
        """
        Initialize OpenAI translation service.

        Args:
            timeout: Request timeout in seconds (default: 60)
            rate_limit: Maximum requests per second
            client: Optional AsyncOpenAI client for dependency injection (for testing)
            model: Optional model name (overrides OPENAI_MODEL env var)
            base_url: Optional API base URL (overrides OPENAI_API_BASE env var)
            temperature: Sampling temperature, kept low for faithful translations
        """
        super().__init__(timeout, rate_limit)
        self._client = client
        self._clients: dict[str, Any] = {}
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
        self.base_url = base_url or os.getenv("OPENAI_API_BASE")
        self.temperature = temperature

    def _get_client(self, api_key: str) -> Any:
        if self._client is not None:
            return self._client
        client = self._clients.get(api_key)
        if client is None:
            # Retries belong to the caller.
            client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
            self._clients[api_key] = client
        return client

    async def _create_completion(self, text: str, source_lang: str, target_lang: str, api_key: str):
        return await self._get_client(api_key).chat.completions.create(
            model=self.model,
            messages=[
                {"role": "user", "content": build_translation_prompt(text, source_lang, target_lang)},
            ],
            temperature=self.temperature,
            timeout=self.timeout,
        )

    async def _translate(self, text: str, source_lang: str, target_lang: str, api_key: str) -> str:
        """Translate text using OpenAI's chat completion API."""
        try:
            response = await self._create_completion(text, source_lang, target_lang, api_key)
        except openai.APITimeoutError as exc:
            logger.error("OpenAI translation timed out after %ss", self.timeout)
            raise TranslationTimeoutError(f"OpenAI request timed out after {self.timeout}s") from exc
        except openai.APIConnectionError as exc:
            logger.error("OpenAI connection error: %s", exc)
            raise NetworkError(f"OpenAI connection failed: {exc}") from exc
        except openai.APIStatusError as exc:
            logger.error("OpenAI translation error: %s", exc.message)
            raise ProviderError(exc.message, provider=self.name) from exc
        except openai.APIError as exc:
            logger.error("OpenAI translation error: %s", exc)
            raise ProviderError(str(exc), provider=self.name) from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            logger.error("Invalid response from OpenAI: %r", response)
            raise InvalidResponseError("Invalid response from OpenAI") from exc
        if not content:
            logger.error("OpenAI translation returned an empty response")
            raise InvalidResponseError("OpenAI translation returned an empty response.")
        return content.strip()

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
