"""User profile model."""

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """Profile row in the ``users`` table, keyed by the auth identity id."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", coerce_numbers_to_str=True
    )

    id: str
    username: str
