"""Batch runner: drives one job through its word list, one item at a time.

Each word gets exactly one provider call and exactly one ItemResult, appended in
input order. Provider failures (missing credential, non-2xx, timeout, malformed
payload) are recorded on the item and never abort the batch.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from mcp_images.errors import ImageServiceError, JobCancelledError, ProviderTimeoutError
from mcp_images.jobs.models import ItemResult, JobRecord, JobStatus, utcnow
from mcp_images.prompting import DEFAULT_STYLE, build_prompt
from mcp_images.providers.base import ImageProvider, ProviderName
from mcp_images.storage.images import ImageStore, batch_timestamp

logger = logging.getLogger(__name__)

# Resolves a validated provider name to a ready adapter
ProviderFactory = Callable[[ProviderName], ImageProvider]


class BatchRunner:
    """Processes words sequentially, recording outcomes into a JobRecord."""

    def __init__(
        self,
        provider_factory: ProviderFactory,
        store: ImageStore,
        default_style: str = DEFAULT_STYLE,
    ):
        self._provider_factory = provider_factory
        self._store = store
        self._default_style = default_style

    async def run(
        self,
        job: JobRecord,
        words: List[str],
        cancel: Optional[asyncio.Event] = None,
    ) -> JobRecord:
        options = job.options
        provider = self._provider_factory(ProviderName(options.provider))
        timestamp = batch_timestamp()
        total = len(words)

        for index, word in enumerate(words):
            job.status = JobStatus.GENERATING
            job.current_item = word
            logger.info(
                "Generating image %d/%d for: %s using %s", index + 1, total, word, options.provider
            )

            if cancel is not None and cancel.is_set():
                result = ItemResult.failure(word, JobCancelledError().message)
            else:
                result = await self._generate_one(provider, job, word, index, timestamp, cancel)

            # append + counter update happen with no await in between
            job.results.append(result)
            job.completed_items = index + 1

        job.status = JobStatus.COMPLETED
        job.current_item = None
        job.completed_at = utcnow()

        succeeded = sum(1 for r in job.results if r.succeeded)
        logger.info("Job %s complete: generated %d/%d images", job.id, succeeded, total)
        return job

    async def _generate_one(
        self,
        provider: ImageProvider,
        job: JobRecord,
        word: str,
        index: int,
        timestamp: str,
        cancel: Optional[asyncio.Event],
    ) -> ItemResult:
        options = job.options
        prompt = build_prompt(word, options.style, options.background, self._default_style)
        path = self._store.output_path(word, timestamp, job_tag(job), index + 1)
        try:
            data = await call_with_budget(
                provider.synthesize(prompt, options.width, options.height, options.quality, provider.timeout),
                provider.timeout,
                provider.label,
                cancel,
            )
            self._store.write(path, data)
        except (ImageServiceError, OSError) as exc:
            message = getattr(exc, "message", None) or str(exc)
            logger.error('Failed to generate image for "%s": %s', word, message)
            return ItemResult.failure(word, message)
        except Exception as exc:
            logger.exception('Unexpected error generating image for "%s"', word)
            return ItemResult.failure(word, f"{type(exc).__name__}: {exc}")

        logger.info("Generated: %s", path)
        return ItemResult.success(word, path, options)


async def call_with_budget(coro, timeout: float, label: str, cancel: Optional[asyncio.Event] = None):
    """Await `coro` for at most `timeout` seconds, aborting early when `cancel` is set."""
    call = asyncio.ensure_future(coro)
    waiters = {call}
    stopper = None
    if cancel is not None:
        stopper = asyncio.ensure_future(cancel.wait())
        waiters.add(stopper)

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in waiters:
            if not task.done():
                task.cancel()

    if call in done:
        return call.result()
    if stopper is not None and stopper in done:
        raise JobCancelledError()
    raise ProviderTimeoutError(f"{label} request timed out after {timeout:g} seconds")


def job_tag(job: JobRecord) -> str:
    """Short per-job filename component so batches never share a path."""
    return job.id.replace("-", "")[:8]


def abandon(job: JobRecord, words: List[str], reason: str) -> JobRecord:
    """Complete a job whose runner stopped early, failing every unprocessed word."""
    for index in range(len(job.results), len(words)):
        job.results.append(ItemResult.failure(words[index], reason))
        job.completed_items = index + 1
    job.status = JobStatus.COMPLETED
    job.current_item = None
    if job.completed_at is None:
        job.completed_at = utcnow()
    return job
