"""User profile repository."""

from supabase import AsyncClient

from lumina.core.supabase import execute, first_row
from lumina.models.user import User

USERS_TABLE = "users"


class UserRepository:
    """Encapsulates queries on the ``users`` profile table."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def find_by_id(self, user_id: str) -> User | None:
        """Find a profile by its auth identity id."""
        rows = await execute(
            self._client.table(USERS_TABLE).select("*").eq("id", user_id).limit(1),
            action="load profile",
        )
        return User.model_validate(rows[0]) if rows else None

    async def create(self, user_id: str, username: str) -> User:
        """Create the profile row for a freshly registered identity."""
        rows = await execute(
            self._client.table(USERS_TABLE).insert(
                {"id": user_id, "username": username}
            ),
            action="create profile",
        )
        return User.model_validate(first_row(rows, "create profile"))
