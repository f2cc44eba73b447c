"""Shared test fixtures."""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import pytest

from price_queue.application.exceptions import PriceSourceError
from price_queue.application.ports.scheduler import ScheduledCallback
from price_queue.domain.entities.job import ItemPriceJob, MyBuyOrderJob, MyListingJob
from price_queue.domain.value_objects.enums import FailureReason, JobKind
from price_queue.services.price_queue import PriceJobQueue

LOCATION = "tab-1"


@dataclass
class FakeClock:
    current: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    )

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@dataclass
class ManualScheduler:
    """Virtual-time scheduler: callbacks run only when the test advances it."""

    clock: FakeClock
    delays: list[float] = field(default_factory=list)
    _heap: list[tuple[float, int, ScheduledCallback]] = field(default_factory=list)
    _elapsed: float = 0.0
    _seq: Any = field(default_factory=itertools.count)

    def call_later(self, delay: float, callback: ScheduledCallback) -> None:
        self.delays.append(delay)
        heapq.heappush(self._heap, (self._elapsed + delay, next(self._seq), callback))

    @property
    def idle(self) -> bool:
        return not self._heap

    async def run_next(self) -> None:
        due, _, callback = heapq.heappop(self._heap)
        self.clock.advance(due - self._elapsed)
        self._elapsed = due
        await callback()

    async def run_all(self, limit: int = 100) -> None:
        for _ in range(limit):
            if self.idle:
                return
            await self.run_next()
        raise AssertionError("scheduler did not settle")


@dataclass
class FakeStore:
    data: dict[str, Any] = field(default_factory=dict)
    writes: list[dict[str, Any]] = field(default_factory=list)

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        return {k: self.data[k] for k in keys if k in self.data}

    async def set(self, values: dict[str, Any]) -> None:
        self.writes.append(dict(values))
        self.data.update(values)


@dataclass
class FakePriceSource:
    """Answers from ``prices``.

    ``failures`` holds reasons raised once each, in order, before an item
    resolves; ``always_fail`` makes an item fail on every call.
    """

    prices: dict[str, int] = field(default_factory=dict)
    failures: dict[str, list[FailureReason]] = field(default_factory=dict)
    always_fail: dict[str, FailureReason] = field(default_factory=dict)
    calls: list[tuple[str, int, str]] = field(default_factory=list)

    async def fetch_highest_buy_order(self, app_id: int, item_name: str) -> int:
        self.calls.append(("buy_order", app_id, item_name))
        return self._answer(item_name)

    async def fetch_lowest_listing_price(self, app_id: int, item_name: str) -> int:
        self.calls.append(("listing", app_id, item_name))
        return self._answer(item_name)

    def _answer(self, item_name: str) -> int:
        if item_name in self.always_fail:
            raise PriceSourceError(self.always_fail[item_name])
        pending = self.failures.get(item_name)
        if pending:
            raise PriceSourceError(pending.pop(0))
        return self.prices[item_name]


@dataclass
class QueueHarness:
    queue: PriceJobQueue
    source: FakePriceSource
    store: FakeStore
    scheduler: ManualScheduler
    clock: FakeClock
    dropped: list[Any] = field(default_factory=list)


@pytest.fixture
def harness() -> QueueHarness:
    clock = FakeClock()
    scheduler = ManualScheduler(clock)
    store = FakeStore()
    source = FakePriceSource()
    dropped: list[Any] = []
    queue = PriceJobQueue(
        source,
        store,
        scheduler,
        location=LOCATION,
        clock=clock,
        success_delay_ms=1500,
        failure_delay_ms=5000,
        on_job_dropped=dropped.append,
    )
    return QueueHarness(queue, source, store, scheduler, clock, dropped)


def make_item_job(
    results: list[tuple],
    *,
    kind: JobKind = JobKind.INVENTORY_STARTING_AT,
    item_name: str = "AK-47 | Redline (Field-Tested)",
    app_id: int = 730,
    asset_id: str | None = "111",
    context_id: str | None = "2",
) -> ItemPriceJob:
    return ItemPriceJob(
        kind=kind,
        app_id=app_id,
        item_name=item_name,
        asset_id=asset_id,
        context_id=context_id,
        on_complete=lambda *args: results.append(args),
    )


def make_listing_job(results: list[tuple], *, item_name: str, listing_id: str) -> MyListingJob:
    return MyListingJob(
        app_id=730,
        item_name=item_name,
        listing_id=listing_id,
        on_complete=lambda *args: results.append(args),
    )


def make_buy_order_job(results: list[tuple], *, item_name: str) -> MyBuyOrderJob:
    return MyBuyOrderJob(
        app_id=730,
        item_name=item_name,
        order_id="order-1",
        on_complete=lambda *args: results.append(args),
    )
