"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fake_supabase import FakeDatabase, FakeSupabase
from httpx import ASGITransport, AsyncClient
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage
from pydantic import SecretStr

from lumina.core.settings import BackendConfig
from lumina.repositories.chat_repo import ChatRepository
from lumina.repositories.user_repo import UserRepository
from lumina.services.auth_service import AuthService
from lumina.services.chat_service import ChatService
from lumina.services.client_registry import ClientRegistry
from lumina.services.inference_service import InferenceService
from lumina.services.session_service import SessionService
from lumina.state.store import StateStore

# --- Fake backend ---


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Shared tables and accounts for every fake client in a test."""
    return FakeDatabase()


@pytest.fixture
def fake_supabase(fake_db: FakeDatabase) -> FakeSupabase:
    """Create a fake Supabase client over the shared database."""
    return FakeSupabase(fake_db)


@pytest.fixture
def backend_config() -> BackendConfig:
    return BackendConfig(
        url="https://project.supabase.test", anon_key=SecretStr("anon")
    )


# --- Repositories & services ---


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def user_repo(fake_supabase: FakeSupabase) -> UserRepository:
    return UserRepository(fake_supabase)  # type: ignore[arg-type]


@pytest.fixture
def chat_repo(fake_supabase: FakeSupabase) -> ChatRepository:
    return ChatRepository(fake_supabase)  # type: ignore[arg-type]


@pytest.fixture
def auth_service(
    fake_supabase: FakeSupabase, user_repo: UserRepository
) -> AuthService:
    return AuthService(fake_supabase, user_repo)  # type: ignore[arg-type]


@pytest.fixture
def session_service(
    store: StateStore,
    auth_service: AuthService,
    user_repo: UserRepository,
    chat_repo: ChatRepository,
) -> SessionService:
    return SessionService(store, auth_service, user_repo, chat_repo)


@pytest.fixture
def inference_service(mock_llm: MagicMock) -> InferenceService:
    return InferenceService(lambda: mock_llm)


@pytest.fixture
def chat_service(
    store: StateStore,
    chat_repo: ChatRepository,
    inference_service: InferenceService,
) -> ChatService:
    return ChatService(store, chat_repo, inference_service)


# --- Mock LLM ---


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock LLM for testing."""
    mock = MagicMock(spec=BaseChatModel)
    mock.ainvoke = AsyncMock(return_value=AIMessage(content="Test response"))
    return mock


# --- App client ---


@pytest.fixture
def client_registry(
    fake_db: FakeDatabase, backend_config: BackendConfig, mock_llm: MagicMock
) -> ClientRegistry:
    """Registry whose clients each get their own fake auth session."""

    async def backend_factory(config: BackendConfig) -> FakeSupabase:
        return FakeSupabase(fake_db)

    return ClientRegistry(
        backend_config,
        llm_factory=lambda: mock_llm,
        backend_factory=backend_factory,  # type: ignore[arg-type]
    )


@pytest.fixture
async def async_client(
    client_registry: ClientRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for async tests."""
    from lumina.main import app

    app.state.client_registry = client_registry
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await client_registry.close()
