"""Price lookup jobs.

Each variant carries the completion callback shape its callers expect, so the
queue only ever calls ``job.complete(price)``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, ClassVar
from uuid import UUID, uuid4

from price_queue.application.exceptions import ValidationError
from price_queue.domain.value_objects.enums import SOURCE_BY_KIND, JobKind, PriceSourceKind

CacheKey = tuple[int, str, JobKind]

# Callbacks may be plain functions or coroutine functions.
CallbackResult = Awaitable[Any] | None


class _JobMixin:
    __slots__ = ()

    kind: JobKind
    app_id: int
    item_name: str

    @property
    def source(self) -> PriceSourceKind:
        return SOURCE_BY_KIND[self.kind]

    @property
    def cache_key(self) -> CacheKey:
        return (self.app_id, self.item_name, self.kind)


@dataclass(frozen=True, slots=True, kw_only=True)
class MyBuyOrderJob(_JobMixin):
    app_id: int
    item_name: str
    on_complete: Callable[[MyBuyOrderJob, int], CallbackResult]
    order_id: str | None = None
    retry_count: int = 0
    job_id: UUID = field(default_factory=uuid4)

    kind: ClassVar[JobKind] = JobKind.MY_BUY_ORDER

    def complete(self, price: int) -> CallbackResult:
        return self.on_complete(self, price)


@dataclass(frozen=True, slots=True, kw_only=True)
class MyListingJob(_JobMixin):
    app_id: int
    item_name: str
    listing_id: str
    on_complete: Callable[[str, int], CallbackResult]
    retry_count: int = 0
    job_id: UUID = field(default_factory=uuid4)

    kind: ClassVar[JobKind] = JobKind.MY_LISTING

    def complete(self, price: int) -> CallbackResult:
        return self.on_complete(self.listing_id, price)


ITEM_PRICE_KINDS = frozenset({
    JobKind.INVENTORY_INSTANT_SELL,
    JobKind.INVENTORY_STARTING_AT,
    JobKind.OFFER_HIGHEST_ORDER,
    JobKind.OFFER_STARTING_AT,
})


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemPriceJob(_JobMixin):
    """Inventory and trade-offer lookups, keyed by asset."""

    kind: JobKind
    app_id: int
    item_name: str
    on_complete: Callable[[str, int, int, str | None, str | None], CallbackResult]
    asset_id: str | None = None
    context_id: str | None = None
    retry_count: int = 0
    job_id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.kind not in ITEM_PRICE_KINDS:
            raise ValidationError(f"Unsupported item price job kind: {self.kind!r}")
        object.__setattr__(self, "kind", JobKind(self.kind))

    def complete(self, price: int) -> CallbackResult:
        return self.on_complete(
            self.item_name, price, self.app_id, self.asset_id, self.context_id,
        )


PriceJob = MyBuyOrderJob | MyListingJob | ItemPriceJob

JOB_TYPES: tuple[type, ...] = (MyBuyOrderJob, MyListingJob, ItemPriceJob)
