"""Run the Lumina server with uvicorn."""

import uvicorn

from lumina.core.config import settings


def main() -> None:
    uvicorn.run(
        "lumina.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.is_development,
    )


if __name__ == "__main__":
    main()
