from enum import Enum
from typing import Optional, Union

from translation_router.config import Config
from translation_router.errors import InvalidProviderError
from translation_router.services.anthropic_service import AnthropicTranslationService
from translation_router.services.base import TranslationProvider
from translation_router.services.deepl_service import DeepLTranslationService
from translation_router.services.google_service import GoogleTranslationService
from translation_router.services.openai_service import OpenAITranslationService


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    DEEPL = "deepl"

    @classmethod
    def parse(cls, name: Union[str, "Provider"]) -> "Provider":
        """Resolve a provider name or alias, raising ``InvalidProviderError``."""
        if isinstance(name, Provider):
            return name
        key = str(name).strip().lower()
        key = PROVIDER_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise InvalidProviderError(str(name)) from None


PROVIDER_ALIASES: dict[str, str] = {
    "gpt": "openai",  # Alias for backward compatibility
    "claude": "anthropic",
    "bulk-translate": "google",
    "google-translate": "google",
}


class ProviderFactory:
    """Factory for creating translation providers."""

    registry: dict[Provider, type[TranslationProvider]] = {
        Provider.OPENAI: OpenAITranslationService,
        Provider.ANTHROPIC: AnthropicTranslationService,
        Provider.GOOGLE: GoogleTranslationService,
        Provider.DEEPL: DeepLTranslationService,
    }

    @classmethod
    def create_provider(
        cls,
        name: Union[str, "Provider"],
        timeout: Optional[float] = None,
        rate_limit: int = 10,
        **kwargs,
    ) -> TranslationProvider:
        provider = Provider.parse(name)
        return cls.registry[provider](timeout=timeout, rate_limit=rate_limit, **kwargs)

    @classmethod
    def create_for_config(cls, config: Config) -> dict[Provider, TranslationProvider]:
        """Create every provider the config can route to, once, at startup."""
        names = [config.default_provider, *config.context_providers.values()]
        providers: dict[Provider, TranslationProvider] = {}
        for name in names:
            provider = Provider.parse(name)
            if provider in providers:
                continue
            kwargs: dict = {}
            if provider is Provider.OPENAI:
                kwargs = {"model": config.openai_model, "base_url": config.openai_base_url}
            elif provider is Provider.ANTHROPIC:
                kwargs = {"model": config.anthropic_model}
            providers[provider] = cls.create_provider(
                provider,
                timeout=config.request_timeout,
                rate_limit=config.requests_per_second,
                **kwargs,
            )
        return providers
