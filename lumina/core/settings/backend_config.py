"""Backend-as-a-service (Supabase) connection configuration."""

from pydantic import BaseModel, SecretStr


class BackendConfig(BaseModel, frozen=True):
    """Supabase project settings."""

    url: str
    anon_key: SecretStr

    @property
    def missing_settings(self) -> list[str]:
        """Environment variable names that still need a value."""
        missing: list[str] = []
        if not self.url.strip():
            missing.append("SUPABASE_URL")
        if not self.anon_key.get_secret_value().strip():
            missing.append("SUPABASE_ANON_KEY")
        return missing

    @property
    def is_configured(self) -> bool:
        """Check if both the project URL and the anonymous key are set."""
        return not self.missing_settings
