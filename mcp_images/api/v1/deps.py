"""Request-scoped access to the service created in the app lifespan."""

from fastapi import HTTPException, Request

from mcp_images.service import ImageGenerationService


def get_service(request: Request) -> ImageGenerationService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Image service not initialized")
    return service
