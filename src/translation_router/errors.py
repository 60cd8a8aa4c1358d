from typing import Optional


class TranslationError(Exception):
    """Base class for every failure raised by the translation core."""


class EmptyTextError(TranslationError):
    """Raised when language detection receives no usable text."""

    def __init__(self, message: str = "Cannot detect language of empty text") -> None:
        super().__init__(message)


class UnsupportedLanguageError(TranslationError):
    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"Target language '{language}' is not supported")


class MissingAPIKeyError(TranslationError):
    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"{provider} API key not configured")


class ProviderError(TranslationError):
    """The remote API reported a failure."""

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        self.message = message
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class InvalidResponseError(TranslationError):
    """The remote API answered with an unexpected payload shape."""


class NetworkError(TranslationError):
    """The remote API could not be reached."""


class TranslationTimeoutError(NetworkError):
    """The remote API did not answer within the configured timeout."""


class InvalidProviderError(TranslationError):
    def __init__(self, name: str, message: Optional[str] = None) -> None:
        self.name = name
        super().__init__(message or f"Translation provider '{name}' is not valid")
