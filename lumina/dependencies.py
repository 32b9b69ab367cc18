"""Global dependencies for the application."""

from functools import lru_cache

from fastapi import Depends, Request
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from lumina.core.config import settings
from lumina.services.client_registry import ClientRegistry, LuminaClient


@lru_cache
def get_llm() -> BaseChatModel:
    """Get the LLM instance based on the configured provider."""
    llm_config = settings.llm
    match llm_config.provider:
        case "google":
            return ChatGoogleGenerativeAI(
                model=llm_config.gemini_model,
                google_api_key=llm_config.gemini_api_key,
            )
        case "openai":
            return ChatOpenAI(
                model=llm_config.openai_model,
                api_key=llm_config.openai_api_key,
            )
        case "anthropic":
            return ChatAnthropic(  # type: ignore[call-arg]
                model_name=llm_config.anthropic_model,
                api_key=llm_config.anthropic_api_key,
            )
        case _:
            raise ValueError(f"Unsupported LLM provider: {llm_config.provider}")


def get_client_registry(request: Request) -> ClientRegistry:
    """Get the registry created during application start-up."""
    return request.app.state.client_registry


def get_client_id(request: Request) -> str:
    """Session id resolved by ClientSessionMiddleware."""
    return request.state.client_id


async def get_lumina_client(
    registry: ClientRegistry = Depends(get_client_registry),
    client_id: str = Depends(get_client_id),
) -> LuminaClient:
    """Get (or create) the chat client bound to this browser session."""
    return await registry.get_or_create(client_id)
