"""Tests for domain-specific configuration."""

import pytest
from pydantic import SecretStr, ValidationError

from lumina.core.config import Settings
from lumina.core.settings import (
    AppConfig,
    BackendConfig,
    LLMConfig,
    ServerConfig,
    SessionConfig,
)


def _llm_config(**overrides: object) -> LLMConfig:
    values: dict[str, object] = {
        "provider": "google",
        "gemini_api_key": SecretStr("gk"),
        "gemini_model": "gemini-3-flash-preview",
        "openai_api_key": SecretStr(""),
        "openai_model": "gpt-4o-mini",
        "anthropic_api_key": SecretStr(""),
        "anthropic_model": "claude-sonnet-4-20250514",
    }
    values.update(overrides)
    return LLMConfig(**values)  # type: ignore[arg-type]


class TestLLMConfig:
    """LLMConfig frozen immutability and field access tests."""

    def test_frozen_immutability(self) -> None:
        config = _llm_config()
        with pytest.raises(ValidationError):
            config.provider = "openai"  # type: ignore[misc]

    def test_rejects_unknown_provider(self) -> None:
        with pytest.raises(ValidationError):
            _llm_config(provider="cohere")

    def test_field_access(self) -> None:
        config = _llm_config(provider="anthropic")
        assert config.provider == "anthropic"
        assert config.gemini_model == "gemini-3-flash-preview"
        assert config.gemini_api_key.get_secret_value() == "gk"


class TestAppConfig:
    """AppConfig frozen immutability and property tests."""

    def test_frozen_immutability(self) -> None:
        config = AppConfig(name="test", version="0.1.0", env="development", debug=True)
        with pytest.raises(ValidationError):
            config.name = "changed"  # type: ignore[misc]

    def test_is_development(self) -> None:
        config = AppConfig(name="app", version="0.1.0", env="development", debug=True)
        assert config.is_development is True
        assert config.is_production is False

    def test_is_production(self) -> None:
        config = AppConfig(name="app", version="0.1.0", env="production", debug=False)
        assert config.is_production is True
        assert config.is_development is False


class TestBackendConfig:
    """BackendConfig reports which credentials are missing."""

    def test_configured(self) -> None:
        config = BackendConfig(url="https://x.supabase.co", anon_key=SecretStr("k"))
        assert config.is_configured is True
        assert config.missing_settings == []

    def test_missing_both(self) -> None:
        config = BackendConfig(url="", anon_key=SecretStr(""))
        assert config.is_configured is False
        assert config.missing_settings == ["SUPABASE_URL", "SUPABASE_ANON_KEY"]

    def test_whitespace_counts_as_missing(self) -> None:
        config = BackendConfig(url="https://x.supabase.co", anon_key=SecretStr("  "))
        assert config.missing_settings == ["SUPABASE_ANON_KEY"]


class TestServerConfig:
    def test_display_url(self) -> None:
        config = ServerConfig(host="0.0.0.0", port=3000)
        assert config.display_url == "http://localhost:3000"


class TestSessionConfig:
    def test_frozen_immutability(self) -> None:
        config = SessionConfig(
            cookie_name="lumina_session",
            cookie_max_age_seconds=3600,
            cookie_secure=False,
            idle_timeout_seconds=3600,
            max_clients=10,
        )
        with pytest.raises(ValidationError):
            config.cookie_secure = True  # type: ignore[misc]


class TestSettings:
    """Settings loads flat env fields and exposes domain groups."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "LLM_PROVIDER", "PORT"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.server.port == 3000
        assert s.llm.provider == "google"
        assert s.session.cookie_name == "lumina_session"
        assert s.is_backend_configured is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("PORT", "8080")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.backend.url == "https://abc.supabase.co"
        assert s.backend.anon_key.get_secret_value() == "anon-key"
        assert s.llm.gemini_api_key.get_secret_value() == "gemini-key"
        assert s.server.port == 8080
        assert s.is_backend_configured is True

    def test_domain_groups_are_cached(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.backend is s.backend

    def test_invalid_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "70000")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]
