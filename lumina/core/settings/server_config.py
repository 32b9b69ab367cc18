"""Server configuration."""

from pydantic import BaseModel


class ServerConfig(BaseModel, frozen=True):
    """HTTP server bind settings."""

    host: str
    port: int

    @property
    def display_url(self) -> str:
        """Local URL announced at start-up."""
        return f"http://localhost:{self.port}"
