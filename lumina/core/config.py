"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from lumina import __version__
from lumina.core.settings import (
    AppConfig,
    BackendConfig,
    LLMConfig,
    ServerConfig,
    SessionConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.backend.url).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(
        default="",
        description="Supabase project URL",
    )
    supabase_anon_key: SecretStr = Field(
        default=SecretStr(""),
        description="Supabase anonymous (public) API key",
    )

    # LLM Provider
    llm_provider: Literal["google", "openai", "anthropic"] = Field(
        default="google",
        description="LLM provider to use",
    )

    # Google Gemini
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model name",
    )

    # OpenAI
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model name",
    )

    # Anthropic
    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Anthropic API key",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model name",
    )

    # App
    app_name: str = Field(
        default="lumina",
        description="Application name",
    )
    app_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port",
    )

    # Browser session
    session_cookie_name: str = Field(
        default="lumina_session",
        description="Cookie carrying the browser session id",
    )
    session_cookie_max_age_seconds: int = Field(
        default=60 * 60 * 24 * 7,
        ge=60,
        description="Browser session cookie lifetime in seconds",
    )
    session_cookie_secure: bool = Field(
        default=False,
        description="Send the session cookie over HTTPS only",
    )
    session_idle_timeout_seconds: int = Field(
        default=60 * 60,
        ge=60,
        description="Idle time after which a browser's chat client is dropped",
    )
    session_max_clients: int = Field(
        default=1000,
        ge=1,
        description="Chat clients kept in memory before the least recent is dropped",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            version=__version__,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def backend(self) -> BackendConfig:
        """Supabase connection configuration."""
        return BackendConfig(
            url=self.supabase_url,
            anon_key=self.supabase_anon_key,
        )

    @cached_property
    def llm(self) -> LLMConfig:
        """LLM provider configuration."""
        return LLMConfig(
            provider=self.llm_provider,
            gemini_api_key=self.gemini_api_key,
            gemini_model=self.gemini_model,
            openai_api_key=self.openai_api_key,
            openai_model=self.openai_model,
            anthropic_api_key=self.anthropic_api_key,
            anthropic_model=self.anthropic_model,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def session(self) -> SessionConfig:
        """Browser session cookie configuration."""
        return SessionConfig(
            cookie_name=self.session_cookie_name,
            cookie_max_age_seconds=self.session_cookie_max_age_seconds,
            cookie_secure=self.session_cookie_secure,
            idle_timeout_seconds=self.session_idle_timeout_seconds,
            max_clients=self.session_max_clients,
        )

    # --- Convenience properties (delegate to domain configs) ---

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development

    @property
    def is_backend_configured(self) -> bool:
        """Check if Supabase credentials are present."""
        return self.backend.is_configured


# Global settings instance
settings = Settings()
