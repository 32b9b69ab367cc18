"""Application environment configuration."""

from typing import Literal

from pydantic import BaseModel


class AppConfig(BaseModel, frozen=True):
    """Application identity and environment."""

    name: str
    version: str
    env: Literal["development", "production"]
    debug: bool

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"
