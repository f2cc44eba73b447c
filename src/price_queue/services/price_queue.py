"""Single-flight price lookup queue.

Jobs are drained one at a time. Each drain either answers from the in-memory
cache or asks the marketplace, then schedules the next drain after a delay
that depends on the outcome. Failed jobs go back to the tail of the queue
until their retry budget runs out.
"""
from __future__ import annotations

import dataclasses
import inspect
import logging
from collections import deque
from typing import Callable

from price_queue.application.exceptions import PriceSourceError, ValidationError
from price_queue.application.ports.clock import Clock, SystemClock
from price_queue.application.ports.market import PriceSource
from price_queue.application.ports.scheduler import Scheduler
from price_queue.application.ports.store import KeyValueStore
from price_queue.config import settings
from price_queue.domain.entities.job import JOB_TYPES, PriceJob
from price_queue.domain.value_objects.enums import FailureReason, PriceSourceKind
from price_queue.services.activity_ledger import SharedActivityLedger
from price_queue.services.job_cache import JobCache

logger = logging.getLogger(__name__)

SUCCESS_DELAY_KEY = "realTimePricesFreqSuccess"
FAILURE_DELAY_KEY = "realTimePricesFreqFailure"


def _noop() -> None:
    pass


class PriceJobQueue:
    def __init__(
        self,
        source: PriceSource,
        store: KeyValueStore,
        scheduler: Scheduler,
        *,
        location: str,
        clock: Clock | None = None,
        ledger: SharedActivityLedger | None = None,
        cache: JobCache | None = None,
        max_retries: int = settings.PRICE_QUEUE_MAX_RETRIES,
        success_delay_ms: int = settings.PRICE_QUEUE_SUCCESS_DELAY_MS,
        failure_delay_ms: int = settings.PRICE_QUEUE_FAILURE_DELAY_MS,
        on_job_dropped: Callable[[PriceJob], None] | None = None,
    ) -> None:
        self._source = source
        self._store = store
        self._scheduler = scheduler
        self._location = location
        self._clock = clock or SystemClock()
        self._ledger = ledger or SharedActivityLedger(
            store,
            ownership_window_seconds=settings.PRICE_QUEUE_OWNERSHIP_WINDOW_SECONDS,
        )
        self._cache = cache or JobCache()
        self._max_retries = max_retries
        self._on_job_dropped = on_job_dropped or (lambda _job: None)

        self.success_delay_ms = success_delay_ms
        self.failure_delay_ms = failure_delay_ms

        self._pending: deque[PriceJob] = deque()
        self._is_active = False
        self._on_all_drained: Callable[[], None] = _noop

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def pending(self) -> tuple[PriceJob, ...]:
        return tuple(self._pending)

    @property
    def cache(self) -> JobCache:
        return self._cache

    @property
    def location(self) -> str:
        return self._location

    def __len__(self) -> int:
        return len(self._pending)

    async def configure(self, on_all_drained: Callable[[], None] | None = None) -> None:
        """Load the inter-job delays from the shared store and start draining."""
        values = await self._store.get([SUCCESS_DELAY_KEY, FAILURE_DELAY_KEY])
        self.success_delay_ms = int(values.get(SUCCESS_DELAY_KEY, self.success_delay_ms))
        self.failure_delay_ms = int(values.get(FAILURE_DELAY_KEY, self.failure_delay_ms))
        self._on_all_drained = on_all_drained or _noop
        logger.info(
            "Price queue configured (success=%dms, failure=%dms, location=%s)",
            self.success_delay_ms,
            self.failure_delay_ms,
            self._location,
        )
        self.kick()

    def enqueue(self, job: PriceJob) -> None:
        if not isinstance(job, JOB_TYPES):
            raise ValidationError(f"Not a price job: {job!r}")
        self._pending.append(job)

    def kick(self) -> None:
        """Schedule a drain on the next loop iteration."""
        self._scheduler.call_later(0, self.drain)

    async def drain(self) -> None:
        if self._is_active:
            return
        if not self._pending:
            on_all_drained, self._on_all_drained = self._on_all_drained, _noop
            on_all_drained()
            return

        self._is_active = True
        job = self._pending.popleft()
        try:
            await self._process(job)
        except Exception:
            logger.exception("Unexpected error while processing job %s", job.job_id)
            self._fail(job, FailureReason.UNEXPECTED)

    async def _process(self, job: PriceJob) -> None:
        now = self._clock.now()
        record = await self._ledger.read()
        if not self._ledger.allows(record, now, self._location):
            self._fail(job, FailureReason.OTHER_ACTIVE_QUEUE)
            return

        if job.retry_count >= self._max_retries:
            logger.warning(
                "Dropping %s job for %s after %d attempts",
                job.kind, job.item_name, job.retry_count,
            )
            self._reschedule(0)
            try:
                self._on_job_dropped(job)
            except Exception:
                logger.exception("Drop hook failed for job %s", job.job_id)
            return

        cached = self._cache.get(job)
        if cached is not None:
            await self._complete(job, cached)
            self._reschedule(0)
            return

        try:
            price = await self._fetch(job)
        except PriceSourceError as exc:
            if exc.reason != FailureReason.EMPTY_LISTINGS:
                self._fail(job, exc.reason, exc)
                return
            logger.debug("No listings for %s, nothing to price", job.item_name)
        else:
            self._cache.put(job, price)
            await self._complete(job, price)

        self._reschedule(self.success_delay_ms)
        try:
            await self._ledger.record_use(self._clock.now(), self._location)
        except Exception:
            logger.exception("Failed to record price queue activity")

    async def _fetch(self, job: PriceJob) -> int:
        if job.source == PriceSourceKind.HIGHEST_BUY_ORDER:
            return await self._source.fetch_highest_buy_order(job.app_id, job.item_name)
        return await self._source.fetch_lowest_listing_price(job.app_id, job.item_name)

    async def _complete(self, job: PriceJob, price: int) -> None:
        try:
            result = job.complete(price)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Completion callback failed for job %s", job.job_id)

    def _fail(
        self,
        job: PriceJob,
        reason: FailureReason,
        error: PriceSourceError | None = None,
    ) -> None:
        logger.info(
            "%s job for %s failed (%s), requeued as attempt %d",
            job.kind, job.item_name, error or reason.value, job.retry_count + 1,
        )
        self._pending.append(dataclasses.replace(job, retry_count=job.retry_count + 1))
        self._reschedule(self.failure_delay_ms)

    def _reschedule(self, delay_ms: int) -> None:
        self._scheduler.call_later(delay_ms / 1000, self._resume)

    async def _resume(self) -> None:
        self._is_active = False
        await self.drain()
