from translation_router.cache import TranslationCache
from translation_router.config import Config, env_api_key_resolver
from translation_router.detection import LanguageDetector
from translation_router.errors import (
    EmptyTextError,
    InvalidProviderError,
    InvalidResponseError,
    MissingAPIKeyError,
    NetworkError,
    ProviderError,
    TranslationError,
    TranslationTimeoutError,
    UnsupportedLanguageError,
)
from translation_router.orchestrator import TranslationService
from translation_router.services import Provider, Translator

__all__ = [
    "Config",
    "EmptyTextError",
    "InvalidProviderError",
    "InvalidResponseError",
    "LanguageDetector",
    "MissingAPIKeyError",
    "NetworkError",
    "Provider",
    "ProviderError",
    "TranslationCache",
    "TranslationError",
    "TranslationService",
    "TranslationTimeoutError",
    "Translator",
    "UnsupportedLanguageError",
    "env_api_key_resolver",
]
