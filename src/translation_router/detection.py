"""Heuristic language detection.

Text is classified by counting matches of per-language patterns: common
function words for Latin-alphabet languages and code point ranges for other
scripts. A language needs at least ``MIN_MATCHES`` hits to win; otherwise the
detector can ask a remote API or fall back to English.
"""

import logging
import re
from typing import Optional, Protocol, Union
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from translation_router.config import ApiKeyResolver, env_api_key_resolver
from translation_router.errors import (
    EmptyTextError,
    InvalidProviderError,
    InvalidResponseError,
    MissingAPIKeyError,
)
from translation_router.languages import DEFAULT_LANGUAGE
from translation_router.services.http import request_json

logger = logging.getLogger(__name__)

SAMPLE_LENGTH = 1000
MIN_MATCHES = 3

GOOGLE_DETECT_URL = "https://translation.googleapis.com/language/translate/v2/detect"

# Order matters for ties: pure Han text scores zh and ja equally and resolves
# to zh, while any kana tips the score to ja.
DEFAULT_PATTERNS: dict[str, str] = {
    "en": r"\b(the|is|are|was|were|have|has|had|do|does|did|will|would|can|could|should|may|might)\b",
    "es": r"\b(el|la|los|las|un|una|de|del|y|es|en|por|para|con|que|esto|esta)\b",
    "fr": r"\b(le|la|les|un|une|de|du|et|est|dans|pour|avec|que|ce|cette)\b",
    "de": r"\b(der|die|das|den|dem|ein|eine|und|ist|in|zu|mit|von|für|auf)\b",
    "it": r"\b(il|la|i|le|un|una|di|da|e|è|in|per|con|che|questo|questa)\b",
    "pt": r"\b(o|a|os|as|um|uma|de|da|e|é|em|por|para|com|que|isto|esta)\b",
    "ru": r"[а-яА-ЯёЁ]",
    "zh": r"[\u4e00-\u9fff]",
    "ja": r"[\u3040-\u309f\u30a0-\u30ff\u4e00-\u9fff]",
    "ko": r"[\uac00-\ud7af\u1100-\u11ff\u3130-\u318f]",
    "ar": r"[\u0600-\u06ff]",
}

_WORD_RE = re.compile(r"[^\W\d_]+(?:['-][^\W\d_]+)*")
_PATH_LANG_RE = re.compile(r"/([a-z]{2})/", re.IGNORECASE)
_SUBDOMAIN_LANG_RE = re.compile(r"^([a-z]{2})\.", re.IGNORECASE)


def strip_markup(text: str) -> str:
    """Return the visible text of an HTML fragment."""
    if "<" not in text:
        return text.strip()
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text(" ").strip()


def _compile(pattern: Union[str, "re.Pattern[str]"]) -> "re.Pattern[str]":
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise ValueError(f"Invalid language pattern {pattern!r}: {exc}") from exc


class RemoteLanguageDetector(Protocol):
    async def detect(self, text: str) -> str:
        ...

    async def close(self) -> None:
        ...


class GoogleLanguageDetector:
    """Remote language detection through the Google Translate v2 API."""

    name = "google"

    def __init__(
        self,
        api_key_resolver: Optional[ApiKeyResolver] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        api_url: str = GOOGLE_DETECT_URL,
    ) -> None:
        self.api_key_resolver = api_key_resolver or env_api_key_resolver
        self.timeout = timeout
        self.api_url = api_url
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def detect(self, text: str) -> str:
        api_key = self.api_key_resolver(self.name, None)
        if not api_key:
            raise MissingAPIKeyError(self.name)

        client = await self._get_client()
        body = await request_json(
            client,
            "POST",
            self.api_url,
            self.name,
            params={"key": api_key},
            json={"q": text},
            timeout=self.timeout,
        )
        try:
            detection = body["data"]["detections"][0][0]
            language = detection["language"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Invalid detection response from Google Translate: %r", body)
            raise InvalidResponseError("Invalid response from Google Translate") from exc

        logger.debug(
            "Language detected by API: %s (confidence: %s)",
            language,
            detection.get("confidence", 0),
        )
        return language

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


class LanguageDetector:
    """Classify text by counting per-language pattern matches."""

    def __init__(
        self,
        remote: Optional[RemoteLanguageDetector] = None,
        patterns: Optional[dict[str, Union[str, "re.Pattern[str]"]]] = None,
    ) -> None:
        self.remote = remote
        source = DEFAULT_PATTERNS if patterns is None else patterns
        self.patterns: dict[str, "re.Pattern[str]"] = {
            code: _compile(pattern) for code, pattern in source.items()
        }

    async def detect(self, text: str, allow_remote_fallback: bool = False) -> str:
        """Detect the language of ``text``.

        Raises ``EmptyTextError`` when no text remains after stripping markup.
        Without a confident local match this returns the remote detector's
        answer when ``allow_remote_fallback`` is set, and ``"en"`` otherwise.
        """
        sample = strip_markup(text)[:SAMPLE_LENGTH]
        if not sample:
            raise EmptyTextError()

        detected = self._detect_by_pattern(sample)
        if detected:
            logger.debug("Language detected by pattern: %s", detected)
            return detected

        if allow_remote_fallback:
            if self.remote is None:
                raise InvalidProviderError(
                    "remote-detection", "No remote language detector configured"
                )
            return await self.remote.detect(sample)

        return DEFAULT_LANGUAGE

    def _scores(self, text: str) -> dict[str, int]:
        return {code: len(pattern.findall(text)) for code, pattern in self.patterns.items()}

    def _detect_by_pattern(self, text: str) -> Optional[str]:
        ranked = sorted(self._scores(text).items(), key=lambda item: item[1], reverse=True)
        if ranked and ranked[0][1] >= MIN_MATCHES:
            return ranked[0][0]
        return None

    def detect_multiple(self, text: str) -> list[tuple[str, int]]:
        """Rank every language with at least one match by descending score."""
        scores = self._scores(strip_markup(text))
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        return [(code, score) for code, score in ranked if score > 0]

    def is_language(self, text: str, language: str, min_matches: int = MIN_MATCHES) -> bool:
        pattern = self.patterns.get(language)
        if pattern is None:
            return False
        return len(pattern.findall(strip_markup(text))) >= min_matches

    def get_confidence(self, text: str, language: str) -> float:
        """Share of words matching the language pattern, capped at 1."""
        pattern = self.patterns.get(language)
        if pattern is None:
            return 0.0
        text = strip_markup(text)
        total_words = len(_WORD_RE.findall(text))
        if total_words == 0:
            return 0.0
        return min(1.0, len(pattern.findall(text)) / total_words)

    def detect_from_url(self, url: str) -> Optional[str]:
        """Guess a language from a ``/xx/`` path segment or an ``xx.`` subdomain."""
        parsed = urlparse(url)
        match = _PATH_LANG_RE.search(parsed.path or "")
        if match and match.group(1).lower() in self.patterns:
            return match.group(1).lower()

        match = _SUBDOMAIN_LANG_RE.match(parsed.hostname or "")
        if match and match.group(1).lower() in self.patterns:
            return match.group(1).lower()
        return None

    def supported_languages(self) -> list[str]:
        return list(self.patterns)

    def register_pattern(self, lang_code: str, pattern: Union[str, "re.Pattern[str]"]) -> bool:
        """Add or replace the matcher for a language."""
        if not lang_code or not pattern:
            return False
        self.patterns[lang_code] = _compile(pattern)
        return True
