"""StreamChat API application.

The chat page calls /api/chat from the server process through httpx, so no
cross-origin access is needed by default. Browser clients on other origins
can be allowed by listing them in CORS_ORIGINS (comma separated).
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamchat import __version__
from streamchat.api.routes import router as chat_router

logger = logging.getLogger(__name__)


def cors_origins_from_env() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info(f"StreamChat API {__version__} ready")
    yield
    logger.info("StreamChat API stopped")


def create_app(cors_origins: list[str] | None = None) -> FastAPI:
    """Build the API application.

    Args:
        cors_origins: Origins allowed to call the API from a browser. Read
            from CORS_ORIGINS when omitted; an empty list disables CORS.
    """
    application = FastAPI(
        title="StreamChat API",
        description="Relays a client-held conversation to a language model "
        "and streams the reply as server-sent events.",
        version=__version__,
        lifespan=lifespan,
    )

    origins = cors_origins_from_env() if cors_origins is None else cors_origins
    if origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["POST"],
            allow_headers=["Content-Type", "Accept"],
        )
        logger.info(f"CORS enabled for {', '.join(origins)}")

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "streamchat"}

    return application


app = create_app()
