"""Image generation service: the tool surface shared by the MCP server and HTTP API."""

import asyncio
import functools
import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from mcp_images.config import Settings
from mcp_images.errors import ConfigurationError
from mcp_images.jobs.dispatcher import JobDispatcher
from mcp_images.jobs.in_process import InProcessDispatcher
from mcp_images.jobs.models import GenerationOptions, JobRecord
from mcp_images.jobs.registry import JobRegistry
from mcp_images.jobs.runner import BatchRunner, ProviderFactory
from mcp_images.jobs.status import StatusView, report
from mcp_images.prompting import STYLES, parse_quality, parse_size, parse_words
from mcp_images.providers.base import ProviderName
from mcp_images.providers.factory import configured_providers, create_provider
from mcp_images.storage.images import ImageInfo, ImageStore

logger = logging.getLogger(__name__)


class ImageGenerationService:
    """Owns the job registry, runner and dispatcher for one process."""

    def __init__(
        self,
        settings: Settings,
        provider_factory: Optional[ProviderFactory] = None,
        dispatcher: Optional[JobDispatcher] = None,
    ):
        if settings.default_style not in STYLES:
            raise ConfigurationError(
                f"DEFAULT_STYLE '{settings.default_style}' is not one of {list(STYLES)}"
            )
        self.settings = settings
        self.store = ImageStore(settings.image_dir)
        self.registry = JobRegistry(
            max_completed=settings.max_retained_jobs,
            ttl_hours=settings.job_result_ttl_hours,
        )

        self._client: Optional[httpx.AsyncClient] = None
        if provider_factory is None:
            self._client = httpx.AsyncClient()
            provider_factory = functools.partial(create_provider, settings=settings, client=self._client)

        self.runner = BatchRunner(provider_factory, self.store, default_style=settings.default_style)
        self.dispatcher = dispatcher or InProcessDispatcher(self.registry, self.runner)

    async def start(self) -> None:
        self.store.ensure_directory()
        await self.dispatcher.start()
        logger.info("Image directory: %s", self.store.base_dir)

    async def stop(self) -> None:
        await self.dispatcher.stop()
        if self._client is not None:
            await self._client.aclose()

    async def generate_images(
        self,
        words: str,
        provider: str = "dalle3",
        style: str = "realistic",
        background: str = "white",
        size: str = "1024x1024",
        quality: str = "standard",
        run_async: bool = True,
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Validate arguments and either start a background job or run the batch inline."""
        word_list = parse_words(words)
        width, height = parse_size(size)
        provider_name = ProviderName.parse(provider)
        options = GenerationOptions(
            provider=provider_name.value,
            style=style,
            background=background,
            width=width,
            height=height,
            quality=parse_quality(quality),
        )
        self.store.ensure_directory()

        if not run_async:
            return await self._generate_inline(word_list, options)

        job = self.registry.create(len(word_list), options)
        await self.dispatcher.submit(job, word_list)
        return {
            "jobId": job.id,
            "status": job.status.value,
            "message": (
                f"Started generating {len(word_list)} images using {provider_name.value}. "
                "Use checkStatus with jobId to monitor progress."
            ),
            "totalItems": len(word_list),
        }

    async def _generate_inline(self, word_list: List[str], options: GenerationOptions) -> List[Dict[str, Any]]:
        # Unregistered record: same runner, nothing left behind in the registry
        job = JobRecord(total_items=len(word_list), options=options)
        logger.info(
            "Starting synchronous generation of %d images using %s", len(word_list), options.provider
        )
        await self.runner.run(job, word_list)
        return [r.to_wire() for r in job.results]

    async def check_status(self, job_id: str) -> StatusView:
        job = await self.dispatcher.get_status(job_id)
        return report(job)

    async def wait_for(self, job_id: str) -> StatusView:
        """Block until a job's runner finishes, then report it."""
        task = self.dispatcher.running_task(job_id)
        if task is not None:
            # runner crashes are recorded on the job by the dispatcher
            await asyncio.gather(task, return_exceptions=True)
        return await self.check_status(job_id)

    def list_images(self, pattern: Optional[str] = None) -> List[ImageInfo]:
        return self.store.list_images(pattern)

    def delete_image(self, filename: str) -> Dict[str, Any]:
        self.store.delete(filename)
        logger.info("Deleted image %s", filename)
        return {"success": True, "message": f"Deleted {filename}"}

    def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "image_dir": self.store.base_dir,
            "configured_providers": configured_providers(self.settings),
            "retained_jobs": len(self.registry),
            "active_jobs": self.registry.active_count(),
        }
