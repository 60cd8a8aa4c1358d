"""Languages the translator accepts as targets, with their English names."""

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "pl": "Polish",
    "tr": "Turkish",
    "el": "Greek",
}

DEFAULT_LANGUAGE = "en"


def is_supported(code: str) -> bool:
    return code in SUPPORTED_LANGUAGES


def get_language_name(code: str) -> str:
    """Return the English name for a code, or the code itself when unknown."""
    return SUPPORTED_LANGUAGES.get(code, code)
