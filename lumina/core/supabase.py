"""Supabase client construction and query execution."""

from typing import Any

import httpx
import structlog
from supabase import AsyncClient, PostgrestAPIError, acreate_client

from lumina.core.exceptions import StoreError
from lumina.core.settings import BackendConfig

logger = structlog.get_logger()


async def create_backend_client(config: BackendConfig) -> AsyncClient:
    """Create a Supabase client holding its own auth session.

    Every browser session gets a separate client so that sign-in state is
    never shared between users of the same process.
    """
    return await acreate_client(config.url, config.anon_key.get_secret_value())


async def execute(query: Any, action: str) -> list[dict[str, Any]]:
    """Run a PostgREST query builder and return its rows.

    Raises StoreError on API or transport failure.
    """
    try:
        response = await query.execute()
    except PostgrestAPIError as exc:
        logger.warning(
            "Store query failed",
            action=action,
            code=exc.code,
            error=exc.message,
        )
        raise StoreError(message=f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        logger.warning("Store request failed", action=action, error=str(exc))
        raise StoreError(message=f"Failed to {action}: {exc}") from exc

    data = getattr(response, "data", None)
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)


def first_row(rows: list[dict[str, Any]], action: str) -> dict[str, Any]:
    """Return the single row an insert reported back, or raise StoreError."""
    if not rows:
        raise StoreError(message=f"Failed to {action}: no row returned")
    return rows[0]
