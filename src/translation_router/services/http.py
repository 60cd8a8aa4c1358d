import logging
from typing import Any, Optional

import httpx

from translation_router.errors import (
    InvalidResponseError,
    NetworkError,
    ProviderError,
    TranslationTimeoutError,
)
from translation_router.services.base import TranslationProvider

logger = logging.getLogger(__name__)


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    provider: str,
    **kwargs: Any,
) -> dict[str, Any]:
    """Send a request and return its JSON object body.

    Transport failures become ``NetworkError`` / ``TranslationTimeoutError``,
    an ``error`` field in the body becomes ``ProviderError`` and anything that
    is not a JSON object becomes ``InvalidResponseError``.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        logger.error("%s request timed out: %s", provider, exc)
        raise TranslationTimeoutError(f"{provider} request timed out") from exc
    except httpx.HTTPError as exc:
        logger.error("%s request failed: %s", provider, exc)
        raise NetworkError(f"{provider} request failed: {exc}") from exc

    try:
        body = response.json()
    except ValueError as exc:
        if response.is_error:
            logger.error("%s returned HTTP %s", provider, response.status_code)
            raise ProviderError(f"HTTP {response.status_code}", provider=provider) from exc
        logger.error("%s returned a non-JSON body", provider)
        raise InvalidResponseError(f"Invalid response from {provider}") from exc

    if isinstance(body, dict) and body.get("error"):
        message = _error_message(body["error"])
        logger.error("%s translation error: %s", provider, message)
        raise ProviderError(message, provider=provider)
    if response.is_error:
        logger.error("%s returned HTTP %s", provider, response.status_code)
        raise ProviderError(f"HTTP {response.status_code}", provider=provider)
    if not isinstance(body, dict):
        raise InvalidResponseError(f"Invalid response from {provider}")
    return body


class HTTPTranslationProvider(TranslationProvider):
    """Provider talking to a JSON HTTP API through a shared httpx client."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        rate_limit: int = 10,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(timeout, rate_limit)
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client for connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        client = await self._get_client()
        return await request_json(client, method, url, self.name, timeout=self.timeout, **kwargs)

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
