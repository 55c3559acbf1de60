"""Job API — start generation batches and poll their status."""

from fastapi import APIRouter, Depends

from mcp_images.api.v1.deps import get_service
from mcp_images.schemas import GenerateImagesArgs
from mcp_images.service import ImageGenerationService

router = APIRouter()


@router.post("/images/generate")
async def generate_images(
    request: GenerateImagesArgs,
    service: ImageGenerationService = Depends(get_service),
):
    """Start a batch (default) or, with async=false, run it to completion."""
    return await service.generate_images(
        words=request.words,
        provider=request.provider,
        style=request.style,
        background=request.background,
        size=request.size,
        quality=request.quality,
        run_async=request.run_async,
    )


@router.get("/jobs/{job_id}")
async def get_job_status(job_id: str, service: ImageGenerationService = Depends(get_service)):
    """Current progress of a job; results once it has completed."""
    view = await service.check_status(job_id)
    return view.to_wire()
