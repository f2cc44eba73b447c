from __future__ import annotations

import uuid
from typing import Any

from price_queue.application.exceptions import ValidationError
from price_queue.domain.entities.job import ItemPriceJob, MyBuyOrderJob, MyListingJob, PriceJob
from price_queue.domain.value_objects.enums import JobKind
from price_queue.services.job_tracker import JobTracker, TrackedJob
from price_queue.services.price_queue import PriceJobQueue


def build_tracked_job(
    kind: JobKind,
    app_id: int,
    item_name: str,
    tracker: JobTracker,
    *,
    asset_id: str | None = None,
    context_id: str | None = None,
    listing_id: str | None = None,
    order_id: str | None = None,
) -> PriceJob:
    """Build the job variant for ``kind`` whose completion is recorded in ``tracker``."""
    job_id = uuid.uuid4()

    # Every callback shape passes the price second.
    def _record(*args: Any) -> None:
        tracker.complete(job_id, args[1])

    if kind == JobKind.MY_BUY_ORDER:
        return MyBuyOrderJob(
            job_id=job_id, app_id=app_id, item_name=item_name,
            order_id=order_id, on_complete=_record,
        )
    if kind == JobKind.MY_LISTING:
        if not listing_id:
            raise ValidationError("listing_id is required for my-listing jobs")
        return MyListingJob(
            job_id=job_id, app_id=app_id, item_name=item_name,
            listing_id=listing_id, on_complete=_record,
        )
    return ItemPriceJob(
        job_id=job_id, kind=kind, app_id=app_id, item_name=item_name,
        asset_id=asset_id, context_id=context_id, on_complete=_record,
    )


def submit_price_job(
    queue: PriceJobQueue,
    tracker: JobTracker,
    kind: JobKind,
    app_id: int,
    item_name: str,
    **extra: str | None,
) -> TrackedJob:
    job = build_tracked_job(kind, app_id, item_name, tracker, **extra)
    tracked = tracker.track(job)
    queue.enqueue(job)
    queue.kick()
    return tracked
