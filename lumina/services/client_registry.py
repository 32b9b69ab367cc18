"""Per-browser chat clients and the registry that owns them."""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from langchain_core.language_models import BaseChatModel
from supabase import AsyncClient

from lumina.core.exceptions import ConfigurationRequiredError
from lumina.core.settings import BackendConfig
from lumina.core.supabase import create_backend_client
from lumina.repositories.chat_repo import ChatRepository
from lumina.repositories.user_repo import UserRepository
from lumina.services.auth_service import AuthService
from lumina.services.chat_service import ChatService
from lumina.services.inference_service import InferenceService
from lumina.services.session_service import SessionService
from lumina.state.events import AuthChanged, NoticeChanged
from lumina.state.store import ClientState, StateStore

logger = structlog.get_logger()

CONFIRMATION_NOTICE = "Check your email for the confirmation link!"

BackendClientFactory = Callable[[BackendConfig], Awaitable[AsyncClient]]


class LuminaClient:
    """One signed-in (or signing-in) browser: its backend session and state."""

    def __init__(
        self, backend: AsyncClient, llm_factory: Callable[[], BaseChatModel]
    ) -> None:
        self.store = StateStore()
        user_repo = UserRepository(backend)
        chat_repo = ChatRepository(backend)
        self.auth = AuthService(backend, user_repo)
        self.session = SessionService(self.store, self.auth, user_repo, chat_repo)
        self.chat = ChatService(self.store, chat_repo, InferenceService(llm_factory))

    @property
    def state(self) -> ClientState:
        return self.store.state

    async def start(self) -> Any:
        """Subscribe to auth changes and pick up an existing session."""
        subscription = self.session.start()
        await self.session.resolve_initial_session()
        return subscription

    async def close(self) -> None:
        """Stop listening and end the provider session held for this browser."""
        self.session.stop()
        if await self.auth.get_session() is not None:
            await self.auth.sign_out(scope="local")

    async def sign_in(self, email: str, password: str) -> None:
        self.store.dispatch(NoticeChanged(notice=None))
        await self.auth.authenticate(email, password)
        await self.session.settle()

    async def sign_up(self, email: str, password: str, username: str | None) -> None:
        self.store.dispatch(NoticeChanged(notice=None))
        needs_confirmation = await self.auth.register(email, password, username)
        await self.session.settle()
        # The sign-in notification can arrive before the profile row exists.
        if not needs_confirmation and not self.state.is_authenticated:
            await self.session.resolve_initial_session()
        if needs_confirmation:
            self.store.dispatch(NoticeChanged(notice=CONFIRMATION_NOTICE))

    async def sign_out(self) -> None:
        await self.auth.sign_out()
        await self.session.settle()
        self.store.dispatch(AuthChanged(user=None))

    async def select_conversation(self, conversation_id: str | None) -> None:
        await self.session.select_conversation(conversation_id)


class ClientRegistry:
    """Maps browser session ids to their LuminaClient instances.

    Clients idle for longer than ``idle_timeout_seconds`` are dropped, and the
    least recently used one goes when ``max_clients`` is reached. Dropped
    clients are closed, which ends any provider session they hold.
    """

    def __init__(
        self,
        backend_config: BackendConfig,
        llm_factory: Callable[[], BaseChatModel],
        backend_factory: BackendClientFactory = create_backend_client,
        idle_timeout_seconds: float = 60 * 60,
        max_clients: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend_config = backend_config
        self._llm_factory = llm_factory
        self._backend_factory = backend_factory
        self._idle_timeout = idle_timeout_seconds
        self._max_clients = max_clients
        self._clock = clock
        # Least recently used first.
        self._clients: OrderedDict[str, LuminaClient] = OrderedDict()
        self._last_seen: dict[str, float] = {}
        self._lock = asyncio.Lock()

    @property
    def missing_settings(self) -> list[str]:
        return self._backend_config.missing_settings

    def __len__(self) -> int:
        return len(self._clients)

    def get(self, client_id: str) -> LuminaClient | None:
        return self._clients.get(client_id)

    async def get_or_create(self, client_id: str) -> LuminaClient:
        """Return the client for a browser session, creating it on first use."""
        if not self._backend_config.is_configured:
            raise ConfigurationRequiredError(self.missing_settings)

        async with self._lock:
            now = self._clock()
            evicted = self._evict_idle(now, keep=client_id)
            client = self._clients.get(client_id)
            if client is None:
                evicted += self._evict_overflow()
                backend = await self._backend_factory(self._backend_config)
                client = LuminaClient(backend, self._llm_factory)
                await client.start()
                self._clients[client_id] = client
                logger.info("Chat client created", clients=len(self._clients))
            self._clients.move_to_end(client_id)
            self._last_seen[client_id] = now

        await self._close_all(evicted)
        return client

    def _evict_idle(self, now: float, keep: str) -> list[LuminaClient]:
        evicted: list[LuminaClient] = []
        for client_id in list(self._clients):
            if now - self._last_seen[client_id] <= self._idle_timeout:
                break
            if client_id != keep:
                evicted.append(self._pop(client_id))
        if evicted:
            logger.info("Idle chat clients dropped", count=len(evicted))
        return evicted

    def _evict_overflow(self) -> list[LuminaClient]:
        evicted: list[LuminaClient] = []
        while len(self._clients) >= self._max_clients:
            evicted.append(self._pop(next(iter(self._clients))))
        if evicted:
            logger.info("Chat client limit reached", count=len(evicted))
        return evicted

    def _pop(self, client_id: str) -> LuminaClient:
        del self._last_seen[client_id]
        return self._clients.pop(client_id)

    async def _close_all(self, clients: list[LuminaClient]) -> None:
        for client in clients:
            try:
                await client.close()
            except Exception:
                logger.warning("Chat client teardown failed", exc_info=True)

    async def close(self) -> None:
        """Close every client."""
        async with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
            self._last_seen.clear()
        await self._close_all(clients)
