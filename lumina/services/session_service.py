"""Session lifecycle: auth-state notifications, profile and list loading."""

import asyncio
from typing import Any

import structlog

from lumina.core.exceptions import StoreError
from lumina.repositories.chat_repo import ChatRepository
from lumina.repositories.user_repo import UserRepository
from lumina.services.auth_service import AuthService
from lumina.state.events import (
    AuthChanged,
    ConversationSelected,
    ConversationsLoaded,
    MessagesLoaded,
)
from lumina.state.store import StateStore

logger = structlog.get_logger()


class SessionService:
    """Keeps the state store in step with the provider's auth session.

    The provider calls back synchronously on sign-in, sign-out and token
    refresh. Each notification is scheduled as a task on the running loop;
    callers await ``settle()`` to observe its effect.
    """

    def __init__(
        self,
        store: StateStore,
        auth_service: AuthService,
        user_repo: UserRepository,
        chat_repo: ChatRepository,
    ) -> None:
        self._store = store
        self._auth = auth_service
        self._user_repo = user_repo
        self._chat_repo = chat_repo
        self._subscription: Any | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    def start(self) -> Any:
        """Subscribe to auth-state notifications and return the handle."""
        if self._subscription is None:
            self._subscription = self._auth.subscribe(self._on_auth_state_change)
        return self._subscription

    def stop(self) -> None:
        """Unsubscribe and cancel notifications still being handled."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()

    async def settle(self) -> None:
        """Wait until every scheduled notification has been handled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def resolve_initial_session(self) -> None:
        """Load the profile for a session that already exists at start-up.

        Any failure leaves the client unauthenticated.
        """
        try:
            session = await self._auth.get_session()
        except Exception:
            logger.warning("Initial session lookup failed", exc_info=True)
            return
        if session is not None and getattr(session, "user", None) is not None:
            await self.load_user(session.user.id)

    def _on_auth_state_change(self, event: str, session: Any | None) -> None:
        task = asyncio.get_running_loop().create_task(
            self.handle_auth_change(event, session)
        )
        self._tasks.add(task)
        task.add_done_callback(self._finish)

    def _finish(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Auth notification handling failed", exc_info=exc)

    async def handle_auth_change(self, event: str, session: Any | None) -> None:
        """React to one auth-state notification."""
        user = getattr(session, "user", None) if session is not None else None
        if user is None:
            logger.info("Auth session ended", auth_event=event)
            self._store.dispatch(AuthChanged(user=None))
            return
        logger.info("Auth session changed", auth_event=event, user_id=user.id)
        await self.load_user(user.id)

    async def load_user(self, user_id: str) -> None:
        """Resolve the profile, then the conversation list."""
        try:
            profile = await self._user_repo.find_by_id(user_id)
        except StoreError:
            return
        if profile is None:
            logger.warning("No profile for authenticated user", user_id=user_id)
            return
        self._store.dispatch(AuthChanged(user=profile))
        await self.refresh_conversations()

    async def refresh_conversations(self) -> None:
        user = self._store.state.user
        if user is None:
            return
        try:
            conversations = await self._chat_repo.find_conversations_by_user(user.id)
        except StoreError:
            return
        self._store.dispatch(ConversationsLoaded(conversations=tuple(conversations)))

    async def select_conversation(self, conversation_id: str | None) -> None:
        """Open a conversation and fetch its transcript; ``None`` closes it."""
        self._store.dispatch(ConversationSelected(conversation_id=conversation_id))
        if conversation_id is None:
            return
        if self._store.state.active_conversation_id != conversation_id:
            logger.info(
                "Unknown conversation selected", conversation_id=conversation_id
            )
            return
        try:
            messages = await self._chat_repo.find_messages_by_conversation_id(
                conversation_id
            )
        except StoreError:
            return
        self._store.dispatch(
            MessagesLoaded(conversation_id=conversation_id, messages=tuple(messages))
        )
