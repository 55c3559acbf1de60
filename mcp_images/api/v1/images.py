"""Generated image listing and deletion."""

from typing import Optional

from fastapi import APIRouter, Depends

from mcp_images.api.v1.deps import get_service
from mcp_images.service import ImageGenerationService

router = APIRouter()


@router.get("/images")
async def list_images(
    pattern: Optional[str] = None,
    service: ImageGenerationService = Depends(get_service),
):
    images = service.list_images(pattern)
    return {
        "images": [info.model_dump(mode="json") for info in images],
        "count": len(images),
    }


@router.delete("/images/{filename}")
async def delete_image(filename: str, service: ImageGenerationService = Depends(get_service)):
    return service.delete_image(filename)
