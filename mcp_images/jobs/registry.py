"""In-memory job registry with bounded retention of completed jobs."""

import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable, List

from mcp_images.errors import NotFoundError
from mcp_images.jobs.models import GenerationOptions, JobRecord, utcnow

logger = logging.getLogger(__name__)


class JobRegistry:
    """Maps job ids to live JobRecords for the lifetime of the process.

    - Records are inserted by create() and mutated only by the runner driving them
    - Completed jobs older than the TTL are reaped on every create()
    - At most max_completed completed jobs are kept, oldest evicted first
    - Jobs that have not completed are never evicted
    """

    def __init__(
        self,
        max_completed: int = 100,
        ttl_hours: float = 2,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._jobs: "OrderedDict[str, JobRecord]" = OrderedDict()
        self._max_completed = max_completed
        self._ttl = timedelta(hours=ttl_hours)
        self._clock = clock

    def create(self, total_items: int, options: GenerationOptions) -> JobRecord:
        """Allocate, store and return a fresh record in the started state."""
        self.reap()
        job = JobRecord(total_items=total_items, options=options, started_at=self._clock())
        self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> JobRecord:
        job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError(f"Job not found: {job_id}")
        return job

    def reap(self) -> int:
        """Drop expired completed jobs, then trim to the retention cap."""
        now = self._clock()
        removed = 0
        for job_id, job in list(self._jobs.items()):
            if job.completed_at is not None and now - job.completed_at > self._ttl:
                del self._jobs[job_id]
                removed += 1

        completed = self._completed_ids()
        while len(completed) > self._max_completed:
            del self._jobs[completed.pop(0)]
            removed += 1

        if removed:
            logger.info("Reaped %d completed job(s), %d retained", removed, len(self._jobs))
        return removed

    def active_count(self) -> int:
        return sum(1 for job in self._jobs.values() if not job.is_completed)

    def _completed_ids(self) -> List[str]:
        done = [job for job in self._jobs.values() if job.completed_at is not None]
        done.sort(key=lambda job: job.completed_at)
        return [job.id for job in done]

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)
