"""Request schemas for browser session actions."""

from pydantic import BaseModel, EmailStr, Field, field_validator


class SignInRequest(BaseModel):
    """Email/password sign-in."""

    email: EmailStr = Field(description="User email address")
    password: str = Field(min_length=1, description="User password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class SignUpRequest(BaseModel):
    """New account registration."""

    email: EmailStr = Field(description="User email address")
    password: str = Field(
        min_length=6,
        max_length=128,
        description="Password (6-128 chars)",
    )
    username: str | None = Field(
        default=None,
        max_length=100,
        description="Display name; defaults to the email local part",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class RenameConversationRequest(BaseModel):
    """New conversation title. Blank titles are ignored."""

    title: str = Field(max_length=255)


class SendMessageRequest(BaseModel):
    """Composer submission."""

    content: str = Field(max_length=4000)
