from pathlib import Path

import pytest

import translation_router.config as config_module
from translation_router.config import Config, env_api_key_resolver, parse_context_providers


def test_config_sets_default_paths(monkeypatch):
    monkeypatch.setattr(
        config_module,
        "user_cache_dir",
        lambda *_args, **_kwargs: "/tmp/translation-cache",
    )

    config = Config(cache_db_path="", cache_dir="")

    assert config.cache_db_path == str(Path("/tmp/translation-cache") / "translation_cache.db")
    assert config.cache_dir == str(Path("/tmp/translation-cache") / "translation_cache")


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "DeepL")
    monkeypatch.setenv("TRANSLATION_CONTEXT_PROVIDERS", "campaign-42=anthropic, support=google")
    monkeypatch.setenv("TRANSLATION_CACHE_TYPE", "sqlite")
    monkeypatch.setenv("TRANSLATION_CACHE_TTL_DAYS", "7")
    monkeypatch.setenv("TRANSLATION_REQUEST_TIMEOUT", "12.5")
    monkeypatch.setenv("TRANSLATION_CACHE_DB_PATH", "/tmp/cache.db")

    config = Config.from_env()

    assert config.default_provider == "deepl"
    assert config.context_providers == {"campaign-42": "anthropic", "support": "google"}
    assert config.cache_type == "sqlite"
    assert config.cache_ttl_days == 7
    assert config.request_timeout == 12.5
    assert config.cache_db_path == "/tmp/cache.db"
    assert config.cache_max_entries == 10000


def test_parse_context_providers_rejects_invalid_items():
    assert parse_context_providers("") == {}
    assert parse_context_providers("a=OpenAI,") == {"a": "openai"}
    with pytest.raises(ValueError):
        parse_context_providers("missing-separator")
    with pytest.raises(ValueError):
        parse_context_providers("=openai")


def test_env_api_key_resolver_prefers_context_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "global-key")
    monkeypatch.setenv("OPENAI_API_KEY_CAMPAIGN_42", "campaign-key")
    monkeypatch.setenv("GOOGLE_TRANSLATE_API_KEY", "google-key")
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    assert env_api_key_resolver("openai", "campaign-42") == "campaign-key"
    assert env_api_key_resolver("openai", "other") == "global-key"
    assert env_api_key_resolver("openai") == "global-key"
    assert env_api_key_resolver("google") == "google-key"
    assert env_api_key_resolver("anthropic") is None
