"""Price feed worker: periodically refreshes bulk prices and exchange rates."""
from __future__ import annotations

import asyncio
import logging

import httpx
import redis.asyncio as aioredis

from price_queue.application.ports.store import KeyValueStore
from price_queue.config import settings
from price_queue.infrastructure.feed.client import PriceFeedClient
from price_queue.infrastructure.store.redis_store import RedisKeyValueStore
from price_queue.services.price_feed import PriceFeed, update_exchange_rates, update_prices

logger = logging.getLogger(__name__)


async def refresh_once(store: KeyValueStore, feed: PriceFeed) -> None:
    try:
        await update_prices(store, feed)
    except Exception:
        logger.exception("Price update failed")
    try:
        await update_exchange_rates(store, feed)
    except Exception:
        logger.exception("Exchange rate update failed")


async def run_price_feed_worker() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    store = RedisKeyValueStore(redis, settings.STORE_KEY_PREFIX)
    feed = PriceFeedClient(http, base_url=settings.PRICES_BASE_URL)

    logger.info(
        "Price feed worker started (interval=%ds, source=%s)",
        settings.PRICE_FEED_INTERVAL_SECONDS,
        settings.PRICES_BASE_URL,
    )

    try:
        while True:
            await refresh_once(store, feed)
            await asyncio.sleep(settings.PRICE_FEED_INTERVAL_SECONDS)
    finally:
        await http.aclose()
        await redis.aclose()


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_price_feed_worker())


if __name__ == "__main__":
    main()
