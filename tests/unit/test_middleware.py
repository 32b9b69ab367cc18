"""Tests for ClientSessionMiddleware."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from lumina.core.middleware import ClientSessionMiddleware
from lumina.core.settings import SessionConfig

EXISTING_ID = "0123456789abcdef0123456789abcdef"


def _app(secure: bool = False) -> FastAPI:
    app = FastAPI()
    app.add_middleware(
        ClientSessionMiddleware,
        config=SessionConfig(
            cookie_name="lumina_session",
            cookie_max_age_seconds=3600,
            cookie_secure=secure,
            idle_timeout_seconds=3600,
            max_clients=10,
        ),
    )

    @app.get("/api/v1/session/whoami")
    async def whoami(request: Request) -> dict:
        return {"client_id": request.state.client_id}

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestClientSessionMiddleware:
    async def test_issues_cookie(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/session/whoami")

        client_id = resp.json()["client_id"]
        assert len(client_id) == 32
        cookie = resp.headers["set-cookie"]
        assert cookie.startswith(f"lumina_session={client_id}")
        assert "HttpOnly" in cookie
        assert "samesite=lax" in cookie.lower()
        assert "Max-Age=3600" in cookie
        assert "Secure" not in cookie

    async def test_reuses_valid_cookie(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/v1/session/whoami",
            headers={"Cookie": f"lumina_session={EXISTING_ID}"},
        )

        assert resp.json()["client_id"] == EXISTING_ID
        assert "set-cookie" not in resp.headers

    async def test_replaces_malformed_cookie(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/api/v1/session/whoami",
            headers={"Cookie": "lumina_session=../../etc"},
        )

        assert resp.json()["client_id"] != "../../etc"
        assert "set-cookie" in resp.headers

    async def test_other_paths_untouched(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")

        assert resp.status_code == 200
        assert "set-cookie" not in resp.headers

    async def test_secure_flag(self) -> None:
        transport = ASGITransport(app=_app(secure=True))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/api/v1/session/whoami")

        assert "Secure" in resp.headers["set-cookie"]
