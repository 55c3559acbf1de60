"""Health check endpoint."""

import platform
import sys

from fastapi import APIRouter, Depends

from mcp_images.api.v1.deps import get_service
from mcp_images.service import ImageGenerationService

router = APIRouter()


@router.get("/health")
async def health_check(service: ImageGenerationService = Depends(get_service)):
    """Service health, configured providers and job counts."""
    return {
        **service.health(),
        "python_version": sys.version,
        "platform": platform.platform(),
    }
