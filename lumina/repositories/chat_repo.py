"""Chat repository for conversation and message store operations."""

from supabase import AsyncClient

from lumina.core.supabase import execute, first_row
from lumina.models.conversation import Conversation
from lumina.models.message import Message, MessageRole

CONVERSATIONS_TABLE = "conversations"
MESSAGES_TABLE = "messages"


class ChatRepository:
    """Encapsulates conversation and message queries against the store."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def find_conversations_by_user(self, user_id: str) -> list[Conversation]:
        """Fetch a user's conversations, newest first."""
        rows = await execute(
            self._client.table(CONVERSATIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
            action="list conversations",
        )
        return [Conversation.model_validate(row) for row in rows]

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        """Create a new conversation."""
        rows = await execute(
            self._client.table(CONVERSATIONS_TABLE).insert(
                {"user_id": user_id, "title": title}
            ),
            action="create conversation",
        )
        return Conversation.model_validate(first_row(rows, "create conversation"))

    async def update_conversation_title(
        self, conversation_id: str, title: str
    ) -> None:
        """Update the title of an existing conversation."""
        await execute(
            self._client.table(CONVERSATIONS_TABLE)
            .update({"title": title})
            .eq("id", conversation_id),
            action="rename conversation",
        )

    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete a conversation row.

        Its messages are left to the store's referential rules.
        """
        await execute(
            self._client.table(CONVERSATIONS_TABLE)
            .delete()
            .eq("id", conversation_id),
            action="delete conversation",
        )

    async def find_messages_by_conversation_id(
        self, conversation_id: str
    ) -> list[Message]:
        """Retrieve all messages for a conversation in chronological order."""
        rows = await execute(
            self._client.table(MESSAGES_TABLE)
            .select("*")
            .eq("conversation_id", conversation_id)
            .order("created_at", desc=False),
            action="list messages",
        )
        return [Message.model_validate(row) for row in rows]

    async def create_message(
        self,
        conversation_id: str,
        role: MessageRole,
        content: str,
    ) -> Message:
        """Append a single message to a conversation."""
        rows = await execute(
            self._client.table(MESSAGES_TABLE).insert(
                {
                    "conversation_id": conversation_id,
                    "role": role,
                    "content": content,
                }
            ),
            action="save message",
        )
        return Message.model_validate(first_row(rows, "save message"))
