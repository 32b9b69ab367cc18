"""Unit tests for ChatRepository."""

import pytest
from fake_supabase import FakeDatabase

from lumina.core.exceptions import StoreError
from lumina.repositories.chat_repo import ChatRepository


class TestConversations:
    """Conversation queries."""

    @pytest.mark.asyncio
    async def test_list_newest_first(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        user_id = fake_db.seed_user()
        fake_db.seed_conversation(user_id, "Older")
        fake_db.seed_conversation(user_id, "Newer")

        conversations = await chat_repo.find_conversations_by_user(user_id)

        assert [c.title for c in conversations] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_list_only_own_conversations(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        ada = fake_db.seed_user()
        bob = fake_db.seed_user(email="bob@example.com", username="bob")
        fake_db.seed_conversation(bob, "Bob's")

        assert await chat_repo.find_conversations_by_user(ada) == []

    @pytest.mark.asyncio
    async def test_create_conversation(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        user_id = fake_db.seed_user()

        conversation = await chat_repo.create_conversation(user_id, "New Lumina Chat")

        assert conversation.id
        assert conversation.user_id == user_id
        assert conversation.title == "New Lumina Chat"
        assert conversation.created_at is not None

    @pytest.mark.asyncio
    async def test_update_title(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        conversation_id = fake_db.seed_conversation(fake_db.seed_user(), "Draft")

        await chat_repo.update_conversation_title(conversation_id, "Final")

        assert fake_db.rows("conversations")[0]["title"] == "Final"

    @pytest.mark.asyncio
    async def test_delete_conversation(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        user_id = fake_db.seed_user()
        keep = fake_db.seed_conversation(user_id, "Keep")
        drop = fake_db.seed_conversation(user_id, "Drop")

        await chat_repo.delete_conversation(drop)

        assert [row["id"] for row in fake_db.rows("conversations")] == [keep]

    @pytest.mark.asyncio
    async def test_failure_raises_store_error(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        fake_db.fail("conversations", "select", message="timeout")

        with pytest.raises(StoreError, match="Failed to list conversations: timeout"):
            await chat_repo.find_conversations_by_user("u1")


class TestMessages:
    """Message queries."""

    @pytest.mark.asyncio
    async def test_list_oldest_first(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        conversation_id = fake_db.seed_conversation(fake_db.seed_user(), "Chat")
        fake_db.seed_message(conversation_id, "user", "Hi")
        fake_db.seed_message(conversation_id, "assistant", "Hello!")

        messages = await chat_repo.find_messages_by_conversation_id(conversation_id)

        assert [(m.role, m.content) for m in messages] == [
            ("user", "Hi"),
            ("assistant", "Hello!"),
        ]
        assert all(m.status == "sent" for m in messages)

    @pytest.mark.asyncio
    async def test_list_empty(self, chat_repo: ChatRepository) -> None:
        assert await chat_repo.find_messages_by_conversation_id("missing") == []

    @pytest.mark.asyncio
    async def test_create_message(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        conversation_id = fake_db.seed_conversation(fake_db.seed_user(), "Chat")

        message = await chat_repo.create_message(conversation_id, "user", "Hello")

        assert message.conversation_id == conversation_id
        assert message.role == "user"
        assert message.content == "Hello"
        assert message.is_confirmed

    @pytest.mark.asyncio
    async def test_create_message_failure(
        self, chat_repo: ChatRepository, fake_db: FakeDatabase
    ) -> None:
        fake_db.fail("messages", "insert")

        with pytest.raises(StoreError, match="save message"):
            await chat_repo.create_message("c1", "user", "Hello")
        assert fake_db.rows("messages") == []
