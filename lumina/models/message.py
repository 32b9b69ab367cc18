"""Chat message model."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

MessageRole = Literal["user", "assistant"]
MessageStatus = Literal["pending", "sent", "failed"]

LOCAL_ID_PREFIX = "local-"


class Message(BaseModel):
    """Transient copy of a row in the ``messages`` table.

    ``status`` never leaves the client: rows read from the store are
    ``sent``; entries shown before the store confirms them are ``pending``
    and turn ``failed`` if the insert does not go through.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    created_at: datetime | None = None
    status: MessageStatus = "sent"

    @classmethod
    def pending(
        cls, conversation_id: str, role: MessageRole, content: str
    ) -> "Message":
        """Build an unconfirmed entry with a client-side id."""
        return cls(
            id=f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}",
            conversation_id=conversation_id,
            role=role,
            content=content,
            status="pending",
        )

    @property
    def is_confirmed(self) -> bool:
        return self.status == "sent"
