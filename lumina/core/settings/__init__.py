"""Domain-specific configuration models."""

from lumina.core.settings.app_config import AppConfig
from lumina.core.settings.backend_config import BackendConfig
from lumina.core.settings.llm_config import LLMConfig
from lumina.core.settings.server_config import ServerConfig
from lumina.core.settings.session_config import SessionConfig

__all__ = [
    "AppConfig",
    "BackendConfig",
    "LLMConfig",
    "ServerConfig",
    "SessionConfig",
]
