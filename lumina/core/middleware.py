"""ASGI middleware binding each browser to a chat client session id."""

import re
import uuid

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import cookie_parser
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from lumina.core.settings import SessionConfig

logger = structlog.get_logger()

SESSION_PATH_PREFIX = "/api/v1/session"

_CLIENT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class ClientSessionMiddleware:
    """Pure ASGI middleware that reads or issues the session cookie.

    Only session endpoints are touched; health checks and static assets pass
    straight through. The resolved id lands in ``request.state.client_id``.
    """

    def __init__(self, app: ASGIApp, config: SessionConfig) -> None:
        self.app = app
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(
            SESSION_PATH_PREFIX
        ):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        cookies = cookie_parser(headers.get(b"cookie", b"").decode("latin-1"))
        client_id = cookies.get(self.config.cookie_name, "")

        issued = not _CLIENT_ID_PATTERN.match(client_id)
        if issued:
            client_id = uuid.uuid4().hex
            logger.debug("Session cookie issued", path=scope["path"])

        scope.setdefault("state", {})
        scope["state"]["client_id"] = client_id

        if not issued:
            await self.app(scope, receive, send)
            return

        async def send_with_cookie(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                response_headers.append("set-cookie", self._cookie(client_id))
            await send(message)

        await self.app(scope, receive, send_with_cookie)

    def _cookie(self, client_id: str) -> str:
        """Render the Set-Cookie value the way starlette responses do."""
        response = Response()
        response.set_cookie(
            self.config.cookie_name,
            client_id,
            max_age=self.config.cookie_max_age_seconds,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite="lax",
        )
        return response.headers["set-cookie"]
