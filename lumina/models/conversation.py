"""Conversation model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Conversation(BaseModel):
    """Transient copy of a row in the ``conversations`` table."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )

    id: str
    user_id: str
    title: str
    created_at: datetime | None = None
