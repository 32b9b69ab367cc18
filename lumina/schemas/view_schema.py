"""View models rendered for the browser."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Screen = Literal["configuration_required", "auth", "chat"]


class SidebarItem(BaseModel):
    """One conversation entry in the sidebar history."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    is_active: bool = False


class ThreadMessage(BaseModel):
    """One bubble in the message thread."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Literal["user", "assistant"]
    content: str
    html: str | None = Field(
        default=None, description="Rendered Markdown for assistant replies"
    )
    created_at: datetime | None = Field(
        default=None, description="Shown in the browser's local time"
    )
    status: Literal["pending", "sent", "failed"] = "sent"


class ComposerView(BaseModel):
    """Message input state."""

    model_config = ConfigDict(frozen=True)

    placeholder: str
    disabled: bool = False


class SessionView(BaseModel):
    """Everything the browser needs to draw the current screen."""

    model_config = ConfigDict(frozen=True)

    screen: Screen
    missing_settings: list[str] = Field(default_factory=list)
    notice: str | None = None
    username: str | None = None
    sidebar: list[SidebarItem] = Field(default_factory=list)
    active_conversation_id: str | None = None
    header_title: str = ""
    thread: list[ThreadMessage] = Field(default_factory=list)
    is_thinking: bool = False
    show_empty_state: bool = False
    composer: ComposerView | None = None
