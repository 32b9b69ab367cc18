"""Client state container with pure reducer transitions."""

from dataclasses import dataclass, field, replace

import structlog

from lumina.models.conversation import Conversation
from lumina.models.message import Message
from lumina.models.user import User
from lumina.state.events import (
    AuthChanged,
    ConversationAdded,
    ConversationRemoved,
    ConversationSelected,
    ConversationsLoaded,
    Event,
    MessageConfirmed,
    MessageFailed,
    MessagePending,
    MessagesLoaded,
    NoticeChanged,
    SendFinished,
    SendStarted,
    TitleUpdated,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class ClientState:
    """Everything one chat client shows: who is signed in and what is open."""

    user: User | None = None
    conversations: tuple[Conversation, ...] = ()
    active_conversation_id: str | None = None
    messages: tuple[Message, ...] = ()
    is_sending: bool = False
    user_renamed: frozenset[str] = field(default_factory=frozenset)
    notice: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def active_conversation(self) -> Conversation | None:
        if self.active_conversation_id is None:
            return None
        return next(
            (c for c in self.conversations if c.id == self.active_conversation_id),
            None,
        )

    @property
    def confirmed_messages(self) -> tuple[Message, ...]:
        """Transcript entries the store has acknowledged."""
        return tuple(m for m in self.messages if m.is_confirmed)


def _clear_selection(state: ClientState) -> ClientState:
    return replace(state, active_conversation_id=None, messages=())


def _retitle(
    conversations: tuple[Conversation, ...], conversation_id: str, title: str
) -> tuple[Conversation, ...]:
    return tuple(
        c.model_copy(update={"title": title}) if c.id == conversation_id else c
        for c in conversations
    )


def _swap_message(
    messages: tuple[Message, ...], local_id: str, new: Message
) -> tuple[Message, ...]:
    return tuple(new if m.id == local_id else m for m in messages)


def reduce(state: ClientState, event: Event) -> ClientState:
    """Apply one event and return the next state."""
    match event:
        case AuthChanged(user=None):
            return ClientState()
        case AuthChanged(user=user):
            if state.user is not None and state.user.id == user.id:
                return replace(state, user=user)
            return ClientState(user=user)

        case ConversationsLoaded(conversations=conversations):
            next_state = replace(state, conversations=conversations)
            if next_state.active_conversation_id is None:
                return next_state
            if next_state.active_conversation is None:
                return _clear_selection(next_state)
            return next_state

        case ConversationAdded(conversation=conversation):
            others = tuple(c for c in state.conversations if c.id != conversation.id)
            return replace(state, conversations=(conversation, *others))

        case ConversationSelected(conversation_id=None):
            return _clear_selection(state)
        case ConversationSelected(conversation_id=conversation_id):
            if conversation_id == state.active_conversation_id:
                return state
            if all(c.id != conversation_id for c in state.conversations):
                return state
            return replace(state, active_conversation_id=conversation_id, messages=())

        case ConversationRemoved(conversation_id=conversation_id):
            next_state = replace(
                state,
                conversations=tuple(
                    c for c in state.conversations if c.id != conversation_id
                ),
                user_renamed=state.user_renamed - {conversation_id},
            )
            if state.active_conversation_id == conversation_id:
                return _clear_selection(next_state)
            return next_state

        case MessagesLoaded(conversation_id=conversation_id, messages=messages):
            # Drop responses for a conversation that is no longer open.
            if conversation_id != state.active_conversation_id:
                return state
            return replace(state, messages=messages)

        case MessagePending(message=message):
            if message.conversation_id != state.active_conversation_id:
                return state
            return replace(state, messages=(*state.messages, message))

        case MessageConfirmed(local_id=local_id, message=message):
            return replace(
                state, messages=_swap_message(state.messages, local_id, message)
            )

        case MessageFailed(local_id=local_id):
            failed = tuple(
                m.model_copy(update={"status": "failed"}) if m.id == local_id else m
                for m in state.messages
            )
            return replace(state, messages=failed)

        case TitleUpdated(
            conversation_id=conversation_id, title=title, by_user=by_user
        ):
            renamed = (
                state.user_renamed | {conversation_id}
                if by_user
                else state.user_renamed
            )
            return replace(
                state,
                conversations=_retitle(state.conversations, conversation_id, title),
                user_renamed=renamed,
            )

        case SendStarted():
            return replace(state, is_sending=True)
        case SendFinished():
            return replace(state, is_sending=False)

        case NoticeChanged(notice=notice):
            return replace(state, notice=notice)

    raise TypeError(f"Unsupported event: {type(event).__name__}")


class StateStore:
    """Holds the current ClientState; every mutation goes through ``dispatch``."""

    def __init__(self, initial: ClientState | None = None) -> None:
        self._state = initial or ClientState()

    @property
    def state(self) -> ClientState:
        return self._state

    def dispatch(self, event: Event) -> ClientState:
        self._state = reduce(self._state, event)
        logger.debug("State event applied", state_event=type(event).__name__)
        return self._state
