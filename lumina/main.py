"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from lumina import __version__
from lumina.api.v1.session_router import router as session_router
from lumina.core.config import settings
from lumina.core.exceptions import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
)
from lumina.core.middleware import ClientSessionMiddleware
from lumina.dependencies import get_llm
from lumina.schemas.response_schema import HealthResponse
from lumina.services.client_registry import ClientRegistry

logger = structlog.get_logger()

STATIC_DIR = Path(__file__).parent / "static"
INDEX_FILE = STATIC_DIR / "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        llm_provider=settings.llm.provider,
        url=settings.server.display_url,
    )
    if not settings.is_backend_configured:
        logger.warning(
            "Backend not configured",
            missing=settings.backend.missing_settings,
        )
    registry = ClientRegistry(
        settings.backend,
        get_llm,
        idle_timeout_seconds=settings.session.idle_timeout_seconds,
        max_clients=settings.session.max_clients,
    )
    app.state.client_registry = registry
    yield
    await registry.close()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Lumina - a chat client backed by a hosted store and LLM",
    version=__version__,
    lifespan=lifespan,
    debug=settings.app.debug,
)

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

app.add_middleware(ClientSessionMiddleware, config=settings.session)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "message": "Lumina backend running"}


# Register routers
app.include_router(session_router)

app.mount("/assets", StaticFiles(directory=STATIC_DIR), name="assets")


@app.get("/{full_path:path}", include_in_schema=False)
async def spa_fallback(full_path: str) -> FileResponse:
    """Serve the single-page app for any other path."""
    return FileResponse(INDEX_FILE)
