"""Authentication against the backend auth provider."""

from collections.abc import Callable
from typing import Any, Literal

import httpx
import structlog
from supabase import AsyncClient, AuthApiError

from lumina.core.exceptions import (
    AuthError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    StoreError,
    UserAlreadyExistsError,
)
from lumina.repositories.user_repo import UserRepository

logger = structlog.get_logger()

AuthStateCallback = Callable[[str, Any], None]

UNIQUE_VIOLATION = "23505"

SignOutScope = Literal["global", "local", "others"]

_CONFLICT_CODES = {"user_already_exists", "email_exists"}


def _to_auth_error(exc: AuthApiError) -> AuthError | UserAlreadyExistsError:
    """Translate a provider error into the application taxonomy."""
    code = getattr(exc, "code", None) or ""
    message = (exc.message or "").lower()
    if code == "email_not_confirmed" or "not confirmed" in message:
        return EmailNotConfirmedError()
    if code in _CONFLICT_CODES or "already registered" in message:
        return UserAlreadyExistsError()
    if code == "invalid_credentials" or "invalid login credentials" in message:
        return InvalidCredentialsError()
    return AuthError(message=exc.message or "Authentication failed")


def default_username(email: str) -> str:
    """Username used when sign-up leaves the field blank."""
    return email.split("@")[0]


class AuthService:
    """Signs users in and out, registers them, and relays auth-state changes."""

    def __init__(self, client: AsyncClient, user_repo: UserRepository) -> None:
        self._client = client
        self._user_repo = user_repo

    async def authenticate(self, email: str, password: str) -> Any:
        """Sign in with email and password and return the provider session."""
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            logger.info(
                "Sign-in rejected", email=email, code=getattr(exc, "code", None)
            )
            raise _to_auth_error(exc) from exc
        except httpx.HTTPError as exc:
            raise AuthError(message=f"Authentication failed: {exc}") from exc

        if response.session is None:
            raise InvalidCredentialsError
        logger.info("User signed in", email=email, user_id=response.user.id)
        return response.session

    async def register(
        self, email: str, password: str, username: str | None = None
    ) -> bool:
        """Create the auth identity and its profile row.

        Returns:
            True when the provider still waits for email confirmation.
        """
        try:
            response = await self._client.auth.sign_up(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            logger.info(
                "Sign-up rejected", email=email, code=getattr(exc, "code", None)
            )
            raise _to_auth_error(exc) from exc
        except httpx.HTTPError as exc:
            raise AuthError(message=f"Registration failed: {exc}") from exc

        user = response.user
        if user is None:
            raise AuthError(message="Registration failed")
        # An already-confirmed address comes back as a user without identities.
        if getattr(user, "identities", None) == []:
            raise UserAlreadyExistsError

        try:
            await self._user_repo.create(
                user_id=user.id,
                username=(username or "").strip() or default_username(email),
            )
        except StoreError as exc:
            cause = exc.__cause__
            if getattr(cause, "code", None) == UNIQUE_VIOLATION:
                raise UserAlreadyExistsError from exc
            raise

        needs_confirmation = response.session is None
        logger.info(
            "User registered",
            email=email,
            user_id=user.id,
            needs_confirmation=needs_confirmation,
        )
        return needs_confirmation

    async def sign_out(self, scope: SignOutScope = "global") -> None:
        """End the provider session.

        ``local`` ends only the session held by this client.
        """
        await self._client.auth.sign_out({"scope": scope})
        logger.info("User signed out", scope=scope)

    async def get_session(self) -> Any | None:
        """Return the current provider session, if any."""
        return await self._client.auth.get_session()

    def subscribe(self, callback: AuthStateCallback) -> Any:
        """Register for auth-state notifications.

        Returns:
            Subscription handle; call ``unsubscribe()`` on teardown.
        """
        return self._client.auth.on_auth_state_change(callback)
