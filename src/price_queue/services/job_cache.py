from __future__ import annotations

from price_queue.domain.entities.job import CacheKey, PriceJob


class JobCache:
    """Resolved prices for the lifetime of a queue. Entries never expire."""

    def __init__(self) -> None:
        self._prices: dict[CacheKey, int] = {}

    def get(self, job: PriceJob) -> int | None:
        return self._prices.get(job.cache_key)

    def put(self, job: PriceJob, price: int) -> None:
        self._prices[job.cache_key] = price

    def __len__(self) -> int:
        return len(self._prices)
