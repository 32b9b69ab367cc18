"""Turns client state into the view the browser draws."""

from collections.abc import Sequence

from markdown_it import MarkdownIt

from lumina.models.message import Message
from lumina.schemas.view_schema import (
    ComposerView,
    SessionView,
    SidebarItem,
    ThreadMessage,
)
from lumina.state.store import ClientState

WELCOME_TITLE = "Welcome to Lumina"
COMPOSER_PLACEHOLDER = "Whisper to Lumina..."

# Raw HTML in model output is escaped, not passed through.
_markdown = MarkdownIt("commonmark", {"html": False}).enable("table")


def _thread_message(message: Message) -> ThreadMessage:
    is_reply = message.role == "assistant"
    return ThreadMessage(
        id=message.id,
        role=message.role,
        content=message.content,
        html=_markdown.render(message.content) if is_reply else None,
        created_at=message.created_at,
        status=message.status,
    )


def render_view(
    state: ClientState, missing_settings: Sequence[str] = ()
) -> SessionView:
    """Render the configuration, auth, or chat screen for ``state``."""
    if missing_settings:
        return SessionView(
            screen="configuration_required",
            missing_settings=list(missing_settings),
        )

    if state.user is None:
        return SessionView(screen="auth", notice=state.notice)

    active = state.active_conversation
    return SessionView(
        screen="chat",
        notice=state.notice,
        username=state.user.username,
        sidebar=[
            SidebarItem(
                id=c.id,
                title=c.title,
                is_active=c.id == state.active_conversation_id,
            )
            for c in state.conversations
        ],
        active_conversation_id=active.id if active else None,
        header_title=active.title if active else WELCOME_TITLE,
        thread=[_thread_message(m) for m in state.messages],
        is_thinking=state.is_sending,
        show_empty_state=not state.messages and not state.is_sending,
        composer=ComposerView(
            placeholder=COMPOSER_PLACEHOLDER,
            disabled=state.is_sending,
        ),
    )
