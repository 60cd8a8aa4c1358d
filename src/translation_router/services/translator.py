import logging
from typing import Mapping, Optional, Sequence, Union

from translation_router.config import ApiKeyResolver, Config, env_api_key_resolver
from translation_router.errors import (
    InvalidProviderError,
    InvalidResponseError,
    UnsupportedLanguageError,
)
from translation_router.languages import SUPPORTED_LANGUAGES, is_supported
from translation_router.services.base import TranslationProvider
from translation_router.services.factory import Provider, ProviderFactory

logger = logging.getLogger(__name__)


class Translator:
    """Dispatch translations to the provider configured for a context."""

    def __init__(
        self,
        providers: Mapping[Union[str, Provider], TranslationProvider],
        default_provider: Union[str, Provider] = Provider.OPENAI,
        context_providers: Optional[Mapping[str, str]] = None,
        api_key_resolver: Optional[ApiKeyResolver] = None,
    ) -> None:
        self.providers = {Provider.parse(name): provider for name, provider in providers.items()}
        self.default_provider = default_provider
        self.context_providers = dict(context_providers or {})
        self.api_key_resolver = api_key_resolver or env_api_key_resolver

    @classmethod
    def from_config(cls, config: Config, api_key_resolver: Optional[ApiKeyResolver] = None) -> "Translator":
        return cls(
            ProviderFactory.create_for_config(config),
            default_provider=config.default_provider,
            context_providers=config.context_providers,
            api_key_resolver=api_key_resolver,
        )

    def is_language_supported(self, code: str) -> bool:
        return is_supported(code)

    def supported_languages(self) -> dict[str, str]:
        return dict(SUPPORTED_LANGUAGES)

    def resolve_provider(self, context_id: Optional[str] = None) -> TranslationProvider:
        """Return the context override provider, else the default one."""
        name = self.context_providers.get(context_id) if context_id is not None else None
        name = name or self.default_provider
        provider_id = Provider.parse(name)
        provider = self.providers.get(provider_id)
        if provider is None:
            raise InvalidProviderError(
                provider_id.value, f"Translation provider '{provider_id.value}' is not configured"
            )
        return provider

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        context_id: Optional[str] = None,
    ) -> str:
        """Translate text with the provider selected for ``context_id``."""
        if not self.is_language_supported(target_lang):
            raise UnsupportedLanguageError(target_lang)

        provider = self.resolve_provider(context_id)
        api_key = self.api_key_resolver(provider.name, context_id)
        logger.debug(
            "Translating text provider=%s from=%s to=%s length=%s",
            provider.name,
            source_lang,
            target_lang,
            len(text),
        )
        return await provider.translate(text, source_lang, target_lang, api_key)

    async def batch_translate(
        self,
        texts: Sequence[str],
        source_lang: str,
        target_lang: str,
        context_id: Optional[str] = None,
    ) -> list[str]:
        """Translate texts in input order, aborting on the first failure."""
        if not texts:
            return []
        if not self.is_language_supported(target_lang):
            raise UnsupportedLanguageError(target_lang)

        provider = self.resolve_provider(context_id)
        api_key = self.api_key_resolver(provider.name, context_id)
        logger.debug(
            "Batch translating provider=%s from=%s to=%s items=%s native=%s",
            provider.name,
            source_lang,
            target_lang,
            len(texts),
            provider.supports_batch,
        )

        if provider.supports_batch:
            translations = await provider.translate_batch(list(texts), source_lang, target_lang, api_key)
            if len(translations) != len(texts):
                raise InvalidResponseError(
                    f"provider={provider.name} expected {len(texts)} items, got {len(translations)}"
                )
            return translations

        translations: list[str] = []
        for text in texts:
            translations.append(await provider.translate(text, source_lang, target_lang, api_key))
        return translations

    async def close(self) -> None:
        for provider in self.providers.values():
            await provider.close()
