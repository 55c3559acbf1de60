"""Read-only projection of a JobRecord into a status response."""

from datetime import datetime
from typing import List, Optional

from mcp_images.jobs.models import ItemResult, JobRecord, JobStatus, WireModel


class StatusView(WireModel):
    job_id: str
    status: JobStatus
    total_items: int
    completed_items: int
    progress: str
    current_item: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    results: Optional[List[ItemResult]] = None
    success_count: Optional[int] = None
    failure_count: Optional[int] = None


def report(job: JobRecord) -> StatusView:
    """Snapshot a job; results and counts are included only once it has completed."""
    view = StatusView(
        job_id=job.id,
        status=job.status,
        total_items=job.total_items,
        completed_items=job.completed_items,
        progress=f"{job.completed_items}/{job.total_items}",
        current_item=job.current_item if job.status == JobStatus.GENERATING else None,
        started_at=job.started_at,
    )

    if job.status == JobStatus.COMPLETED:
        results = [r.model_copy() for r in job.results]
        succeeded = sum(1 for r in results if r.succeeded)
        view.completed_at = job.completed_at
        view.results = results
        view.success_count = succeeded
        view.failure_count = len(results) - succeeded

    return view
