from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from price_queue.application.exceptions import NotFoundError
from price_queue.domain.entities.job import PriceJob
from price_queue.domain.value_objects.enums import JobKind, JobStatus


@dataclass(slots=True)
class TrackedJob:
    job_id: UUID
    kind: JobKind
    app_id: int
    item_name: str
    status: JobStatus = JobStatus.PENDING
    price: int | None = None


class JobTracker:
    """Outcome of jobs submitted over the API, kept for the process lifetime."""

    def __init__(self) -> None:
        self._jobs: dict[UUID, TrackedJob] = {}

    def track(self, job: PriceJob) -> TrackedJob:
        tracked = TrackedJob(
            job_id=job.job_id,
            kind=job.kind,
            app_id=job.app_id,
            item_name=job.item_name,
        )
        self._jobs[job.job_id] = tracked
        return tracked

    def complete(self, job_id: UUID, price: int) -> None:
        tracked = self._jobs.get(job_id)
        if tracked is not None:
            tracked.status = JobStatus.COMPLETED
            tracked.price = price

    def drop(self, job: PriceJob) -> None:
        tracked = self._jobs.get(job.job_id)
        if tracked is not None:
            tracked.status = JobStatus.DROPPED

    def get(self, job_id: UUID) -> TrackedJob:
        tracked = self._jobs.get(job_id)
        if tracked is None:
            raise NotFoundError(f"Price job {job_id} not found")
        return tracked
