from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, status

from price_queue.api.deps import JobTrackerDep, PriceQueueDep
from price_queue.api.v1.schemas.price_job import (
    PriceJobRequest,
    PriceJobResponse,
    QueueStatusResponse,
)
from price_queue.services import price_job_service

router = APIRouter(prefix="/api/v1", tags=["price-jobs"])


@router.post(
    "/price-jobs",
    response_model=PriceJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_price_job(
    body: PriceJobRequest,
    queue: PriceQueueDep,
    tracker: JobTrackerDep,
) -> PriceJobResponse:
    tracked = price_job_service.submit_price_job(
        queue,
        tracker,
        body.kind,
        body.app_id,
        body.item_name,
        asset_id=body.asset_id,
        context_id=body.context_id,
        listing_id=body.listing_id,
        order_id=body.order_id,
    )
    return PriceJobResponse.model_validate(tracked)


@router.get("/price-jobs/{job_id}", response_model=PriceJobResponse)
async def get_price_job(job_id: UUID, tracker: JobTrackerDep) -> PriceJobResponse:
    return PriceJobResponse.model_validate(tracker.get(job_id))


@router.get("/price-queue", response_model=QueueStatusResponse)
async def get_queue_status(queue: PriceQueueDep) -> QueueStatusResponse:
    return QueueStatusResponse(
        is_active=queue.is_active,
        pending=len(queue),
        cached_prices=len(queue.cache),
        success_delay_ms=queue.success_delay_ms,
        failure_delay_ms=queue.failure_delay_ms,
        location=queue.location,
    )
