from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from price_queue.domain.value_objects.enums import JobKind, JobStatus


class PriceJobRequest(BaseModel):
    kind: JobKind
    app_id: int = Field(gt=0)
    item_name: str = Field(min_length=1)
    asset_id: str | None = None
    context_id: str | None = None
    listing_id: str | None = None
    order_id: str | None = None


class PriceJobResponse(BaseModel):
    job_id: UUID
    kind: JobKind
    app_id: int
    item_name: str
    status: JobStatus
    price: int | None = None

    model_config = {"from_attributes": True}


class QueueStatusResponse(BaseModel):
    is_active: bool
    pending: int
    cached_prices: int
    success_delay_ms: int
    failure_delay_ms: int
    location: str
