"""Bulk price feed published by the pricing backend."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from price_queue.application.exceptions import PriceFeedError

logger = logging.getLogger(__name__)


class PriceFeedClient:
    def __init__(self, http: httpx.AsyncClient, *, base_url: str = "https://prices.csgotrader.app") -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def fetch_provider_prices(self, provider: str) -> dict[str, Any]:
        return await self._get_json(f"/latest/{provider}.json")

    async def fetch_exchange_rates(self) -> dict[str, float]:
        return await self._get_json("/latest/exchange_rates.json")

    async def _get_json(self, path: str) -> dict[str, Any]:
        url = self._base_url + path
        try:
            response = await self._http.get(url, headers={"Accept-Encoding": "gzip"})
        except httpx.HTTPError as exc:
            raise PriceFeedError(f"{url}: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Error code: %d Status: %s", response.status_code, response.reason_phrase,
            )
            raise PriceFeedError(f"{url}: HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise PriceFeedError(f"{url}: invalid JSON") from exc
        if not isinstance(data, dict):
            raise PriceFeedError(f"{url}: expected an object, got {type(data).__name__}")
        return data
