"""Conversation orchestration: sending messages and managing conversations."""

from collections.abc import Sequence

import structlog

from lumina.core.exceptions import StoreError
from lumina.models.conversation import Conversation
from lumina.models.message import Message, MessageRole
from lumina.repositories.chat_repo import ChatRepository
from lumina.services.inference_service import InferenceService
from lumina.state.events import (
    ConversationAdded,
    ConversationRemoved,
    ConversationSelected,
    MessageConfirmed,
    MessageFailed,
    MessagePending,
    SendFinished,
    SendStarted,
    TitleUpdated,
)
from lumina.state.store import StateStore

logger = structlog.get_logger()

NEW_CONVERSATION_TITLE = "New Lumina Chat"
PROVISIONAL_TITLE_LENGTH = 30


def provisional_title(text: str) -> str:
    """Title given to a conversation created by its first message."""
    return text[:PROVISIONAL_TITLE_LENGTH] + "..."


class ChatService:
    """Runs the send-message flow and conversation actions for one client."""

    def __init__(
        self,
        store: StateStore,
        chat_repo: ChatRepository,
        inference: InferenceService,
    ) -> None:
        self._store = store
        self._chat_repo = chat_repo
        self._inference = inference

    async def send_message(self, content: str) -> bool:
        """Send a user message and record the assistant reply.

        Returns:
            False when the send was rejected before starting.
        """
        state = self._store.state
        if not content.strip():
            logger.info("Send rejected", reason="blank input")
            return False
        if state.user is None:
            logger.info("Send rejected", reason="not authenticated")
            return False
        if state.is_sending:
            logger.info("Send rejected", reason="send in flight")
            return False

        self._store.dispatch(SendStarted())
        try:
            conversation = state.active_conversation
            if conversation is None:
                conversation = await self._open_conversation(
                    state.user.id, provisional_title(content)
                )
            history = self._store.state.confirmed_messages
            await self._exchange(conversation, content, history)
        except StoreError:
            logger.warning("Send aborted after store failure")
        except Exception:
            logger.exception("Send message failed")
        finally:
            self._store.dispatch(SendFinished())
        return True

    async def _exchange(
        self,
        conversation: Conversation,
        content: str,
        history: Sequence[Message],
    ) -> None:
        is_first_exchange = not history

        await self._append(conversation.id, "user", content)
        reply = await self._inference.generate_response(history, content)
        await self._append(conversation.id, "assistant", reply)
        logger.info(
            "Exchange completed",
            conversation_id=conversation.id,
            prior_messages=len(history),
        )

        if is_first_exchange:
            await self._regenerate_title(conversation.id, content, reply)

    async def _append(
        self, conversation_id: str, role: MessageRole, content: str
    ) -> None:
        """Show a message as pending, persist it, then confirm or fail it."""
        pending = Message.pending(conversation_id, role, content)
        self._store.dispatch(MessagePending(message=pending))
        try:
            stored = await self._chat_repo.create_message(
                conversation_id, role, content
            )
        except StoreError:
            self._store.dispatch(MessageFailed(local_id=pending.id))
            raise
        self._store.dispatch(MessageConfirmed(local_id=pending.id, message=stored))

    async def _regenerate_title(
        self, conversation_id: str, user_text: str, assistant_text: str
    ) -> None:
        if conversation_id in self._store.state.user_renamed:
            logger.info("Auto title skipped", conversation_id=conversation_id)
            return
        title = await self._inference.generate_title(user_text, assistant_text)
        # The user may have renamed it while the model was working.
        if conversation_id in self._store.state.user_renamed:
            logger.info("Auto title skipped", conversation_id=conversation_id)
            return
        await self._chat_repo.update_conversation_title(conversation_id, title)
        self._store.dispatch(
            TitleUpdated(conversation_id=conversation_id, title=title)
        )
        logger.info(
            "Conversation titled", conversation_id=conversation_id, title=title
        )

    async def _open_conversation(self, user_id: str, title: str) -> Conversation:
        conversation = await self._chat_repo.create_conversation(user_id, title)
        self._store.dispatch(ConversationAdded(conversation=conversation))
        self._store.dispatch(ConversationSelected(conversation_id=conversation.id))
        return conversation

    async def new_conversation(self) -> Conversation | None:
        """Start an empty conversation and open it."""
        user = self._store.state.user
        if user is None:
            return None
        try:
            return await self._open_conversation(user.id, NEW_CONVERSATION_TITLE)
        except StoreError:
            return None

    async def rename_conversation(self, conversation_id: str, title: str) -> bool:
        """Rename a conversation; blank titles are rejected without a store call."""
        title = title.strip()
        if not title:
            logger.info("Rename rejected", conversation_id=conversation_id)
            return False
        try:
            await self._chat_repo.update_conversation_title(conversation_id, title)
        except StoreError:
            return False
        self._store.dispatch(
            TitleUpdated(conversation_id=conversation_id, title=title, by_user=True)
        )
        return True

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation; a failed delete leaves everything as it was."""
        try:
            await self._chat_repo.delete_conversation(conversation_id)
        except StoreError:
            return False
        self._store.dispatch(ConversationRemoved(conversation_id=conversation_id))
        logger.info("Conversation deleted", conversation_id=conversation_id)
        return True
