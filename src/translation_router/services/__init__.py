from translation_router.services.anthropic_service import AnthropicTranslationService
from translation_router.services.base import TranslationProvider
from translation_router.services.deepl_service import DeepLTranslationService
from translation_router.services.factory import Provider, ProviderFactory
from translation_router.services.google_service import GoogleTranslationService
from translation_router.services.openai_service import OpenAITranslationService
from translation_router.services.translator import Translator

__all__ = [
    "AnthropicTranslationService",
    "DeepLTranslationService",
    "GoogleTranslationService",
    "OpenAITranslationService",
    "Provider",
    "ProviderFactory",
    "TranslationProvider",
    "Translator",
]
