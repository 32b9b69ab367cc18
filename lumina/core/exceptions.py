"""Application exception classes and handlers."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Authentication (401) ---


class AuthError(AppException):
    """Base authentication error."""

    def __init__(
        self, message: str = "Authentication failed", code: str = "AUTH_ERROR"
    ) -> None:
        super().__init__(message=message, code=code, status_code=401)


class InvalidCredentialsError(AuthError):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
        )


class EmailNotConfirmedError(AuthError):
    """Account exists but the confirmation link was never followed."""

    def __init__(self) -> None:
        super().__init__(
            message="Email not confirmed. Check your inbox for the confirmation link.",
            code="EMAIL_NOT_CONFIRMED",
        )


# --- Conflict (409) ---


class ConflictError(AppException):
    """Resource already exists."""

    def __init__(
        self, message: str = "Resource already exists", code: str = "CONFLICT"
    ) -> None:
        super().__init__(message=message, code=code, status_code=409)


class UserAlreadyExistsError(ConflictError):
    """User with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
        )


# --- Upstream services (502) ---


class StoreError(AppException):
    """Backend store query or transport failure."""

    def __init__(self, message: str = "Backend store request failed") -> None:
        super().__init__(message=message, code="STORE_ERROR", status_code=502)


class InferenceError(AppException):
    """Hosted model call failed."""

    def __init__(self, message: str = "Model request failed") -> None:
        super().__init__(message=message, code="INFERENCE_ERROR", status_code=502)


# --- Configuration (503) ---


class ConfigurationRequiredError(AppException):
    """Backend credentials are not configured."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            message=f"Configuration required: {', '.join(missing)}",
            code="CONFIGURATION_REQUIRED",
            status_code=503,
        )


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": exc.status_code,
            "message": exc.message,
            "code": exc.code,
        },
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Flatten request validation errors into the common error shape."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    detail = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={
            "status": 422,
            "message": f"{field}: {detail}" if field else detail,
            "code": "VALIDATION_ERROR",
        },
    )
