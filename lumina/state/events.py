"""Events that drive client state transitions."""

from dataclasses import dataclass

from lumina.models.conversation import Conversation
from lumina.models.message import Message
from lumina.models.user import User


@dataclass(frozen=True)
class AuthChanged:
    """Profile resolved for a session, or ``None`` after sign-out."""

    user: User | None


@dataclass(frozen=True)
class ConversationsLoaded:
    conversations: tuple[Conversation, ...]


@dataclass(frozen=True)
class ConversationAdded:
    conversation: Conversation


@dataclass(frozen=True)
class ConversationSelected:
    """Select a conversation, or deselect with ``None``."""

    conversation_id: str | None


@dataclass(frozen=True)
class ConversationRemoved:
    conversation_id: str


@dataclass(frozen=True)
class MessagesLoaded:
    conversation_id: str
    messages: tuple[Message, ...]


@dataclass(frozen=True)
class MessagePending:
    message: Message


@dataclass(frozen=True)
class MessageConfirmed:
    local_id: str
    message: Message


@dataclass(frozen=True)
class MessageFailed:
    local_id: str


@dataclass(frozen=True)
class TitleUpdated:
    conversation_id: str
    title: str
    by_user: bool = False


@dataclass(frozen=True)
class SendStarted:
    pass


@dataclass(frozen=True)
class SendFinished:
    pass


@dataclass(frozen=True)
class NoticeChanged:
    notice: str | None


Event = (
    AuthChanged
    | ConversationsLoaded
    | ConversationAdded
    | ConversationSelected
    | ConversationRemoved
    | MessagesLoaded
    | MessagePending
    | MessageConfirmed
    | MessageFailed
    | TitleUpdated
    | SendStarted
    | SendFinished
    | NoticeChanged
)
