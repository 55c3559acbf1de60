"""Job dispatcher interface."""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from mcp_images.jobs.models import JobRecord


class JobDispatcher(ABC):
    """Abstract interface for launching and tracking batch jobs."""

    @abstractmethod
    async def submit(self, job: JobRecord, words: List[str]) -> str:
        """Start processing a job without waiting for it. Returns job_id."""
        ...

    @abstractmethod
    async def get_status(self, job_id: str) -> JobRecord:
        """Current record of a job. Raises NotFoundError if unknown."""
        ...

    @abstractmethod
    def cancel(self, job_id: str) -> bool:
        """Signal a running job to stop. Returns False if it is not running."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the dispatcher."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Cancel running jobs and wait for their tasks to finish."""
        ...

    @abstractmethod
    def running_task(self, job_id: str) -> Optional[asyncio.Task]:
        """The background task driving a job, while it runs."""
        ...
