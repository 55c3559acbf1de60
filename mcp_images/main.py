"""mcp-images HTTP API - FastAPI application over the same image service."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mcp_images.api.v1.health import router as health_root_router
from mcp_images.api.v1.router import v1_router
from mcp_images.config import Settings, settings as default_settings
from mcp_images.errors import ImageServiceError
from mcp_images.providers.factory import warn_missing_credentials
from mcp_images.service import ImageGenerationService

logger = logging.getLogger(__name__)


async def image_service_exception_handler(request: Request, exc: ImageServiceError):
    """Map domain errors onto their HTTP status with a JSON detail."""
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ImageGenerationService] = None,
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown logic."""
        app.state.service = service or ImageGenerationService(settings)
        warn_missing_credentials(settings)
        await app.state.service.start()
        logger.info("Starting mcp-images HTTP API on port %d", settings.http_port)

        yield

        logger.info("Shutting down mcp-images HTTP API")
        await app.state.service.stop()

    app = FastAPI(
        title="mcp-images",
        description="Batch image generation jobs backed by DALL-E 3 and Stability AI",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(ImageServiceError, image_service_exception_handler)

    # Mount routers
    app.include_router(health_root_router, tags=["health"])  # GET /health at root
    app.include_router(v1_router)  # All /api/v1/* endpoints
    return app


app = create_app()


def run_http(settings: Optional[Settings] = None) -> None:
    import uvicorn

    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(create_app(settings), host="127.0.0.1", port=settings.http_port)
