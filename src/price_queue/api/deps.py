"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from price_queue.services.job_tracker import JobTracker
from price_queue.services.price_queue import PriceJobQueue


def get_price_queue(request: Request) -> PriceJobQueue:
    return request.app.state.price_queue


def get_job_tracker(request: Request) -> JobTracker:
    return request.app.state.job_tracker


PriceQueueDep = Annotated[PriceJobQueue, Depends(get_price_queue)]
JobTrackerDep = Annotated[JobTracker, Depends(get_job_tracker)]
