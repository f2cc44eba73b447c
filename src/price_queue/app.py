from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from price_queue.api.v1.routers import health, price_jobs
from price_queue.application.exceptions import NotFoundError, ValidationError
from price_queue.config import settings
from price_queue.infrastructure.market.buy_orders import HistogramBuyOrderChannel
from price_queue.infrastructure.market.client import SteamMarketClient
from price_queue.infrastructure.market.wallet import StaticWalletContext
from price_queue.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler
from price_queue.infrastructure.store.redis_store import RedisKeyValueStore
from price_queue.services.job_tracker import JobTracker
from price_queue.services.price_queue import PriceJobQueue

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    scheduler = AsyncioScheduler()
    tracker = JobTracker()

    source = SteamMarketClient(
        http,
        StaticWalletContext(settings.MARKET_CURRENCY_ID),
        HistogramBuyOrderChannel(http, base_url=settings.MARKET_BASE_URL),
        base_url=settings.MARKET_BASE_URL,
    )
    queue = PriceJobQueue(
        source,
        RedisKeyValueStore(app.state.redis, settings.STORE_KEY_PREFIX),
        scheduler,
        location=settings.queue_location,
        on_job_dropped=tracker.drop,
    )
    await queue.configure()
    app.state.price_queue = queue
    app.state.job_tracker = tracker

    yield

    await scheduler.aclose()
    await http.aclose()
    await app.state.redis.aclose()
    logger.info("Price queue stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Price Queue Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(price_jobs.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
