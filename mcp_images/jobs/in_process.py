"""In-process job dispatcher: one detached asyncio task per job.

Jobs run concurrently with each other; items within a job run sequentially in
the BatchRunner. Each task is the only writer of its job's record.
No external dependencies (Redis, Celery) needed.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from mcp_images.errors import JobCancelledError
from mcp_images.jobs.dispatcher import JobDispatcher
from mcp_images.jobs.models import JobRecord
from mcp_images.jobs.registry import JobRegistry
from mcp_images.jobs.runner import BatchRunner, abandon

logger = logging.getLogger(__name__)


class InProcessDispatcher(JobDispatcher):
    """Fire-and-forget runner tasks keyed by job id, each with a cancel token."""

    def __init__(self, registry: JobRegistry, runner: BatchRunner):
        self._registry = registry
        self._runner = runner
        self._tasks: Dict[str, asyncio.Task] = {}
        self._cancel: Dict[str, asyncio.Event] = {}
        self._running = False

    async def submit(self, job: JobRecord, words: List[str]) -> str:
        if not self._running:
            raise RuntimeError("Job dispatcher not started")
        if job.id in self._tasks:
            raise RuntimeError(f"Job {job.id} already has a running task")
        cancel = asyncio.Event()
        task = asyncio.create_task(self._runner.run(job, words, cancel), name=f"job-{job.id}")
        self._tasks[job.id] = task
        self._cancel[job.id] = cancel
        task.add_done_callback(lambda t, job=job, words=words: self._on_done(job, words, t))
        logger.info("Started job %s with %d item(s) using %s", job.id, len(words), job.options.provider)
        return job.id

    async def get_status(self, job_id: str) -> JobRecord:
        return self._registry.get(job_id)

    def cancel(self, job_id: str) -> bool:
        event = self._cancel.get(job_id)
        if event is None:
            return False
        event.set()
        return True

    def running_task(self, job_id: str) -> Optional[asyncio.Task]:
        return self._tasks.get(job_id)

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False
        tasks = list(self._tasks.values())
        for job_id in list(self._cancel):
            self.cancel(job_id)
        if tasks:
            logger.info("Waiting for %d running job(s) to stop", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)

    def _on_done(self, job: JobRecord, words: List[str], task: asyncio.Task) -> None:
        self._tasks.pop(job.id, None)
        self._cancel.pop(job.id, None)
        if task.cancelled():
            logger.warning("Job %s task was cancelled", job.id)
            abandon(job, words, JobCancelledError().message)
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Job %s runner crashed: %s", job.id, exc, exc_info=exc)
            abandon(job, words, f"{type(exc).__name__}: {exc}")
