"""Browser session cookie configuration."""

from pydantic import BaseModel


class SessionConfig(BaseModel, frozen=True):
    """Settings for the cookie that binds a browser to its chat client."""

    cookie_name: str
    cookie_max_age_seconds: int
    cookie_secure: bool
    idle_timeout_seconds: int
    max_clients: int
