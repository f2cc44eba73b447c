"""Steam Community Market price lookups."""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from price_queue.application.exceptions import PriceSourceError
from price_queue.application.ports.market import BuyOrderChannel, WalletContext
from price_queue.domain.value_objects.enums import FailureReason

logger = logging.getLogger(__name__)


class SteamMarketClient:
    """Implements application.ports.market.PriceSource.

    Prices are returned in the wallet currency's minor unit.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        wallet: WalletContext,
        buy_orders: BuyOrderChannel,
        *,
        base_url: str = "https://steamcommunity.com",
    ) -> None:
        self._http = http
        self._wallet = wallet
        self._buy_orders = buy_orders
        self._base_url = base_url.rstrip("/")

    async def fetch_highest_buy_order(self, app_id: int, item_name: str) -> int:
        currency_id = self._wallet.currency_id()
        try:
            price = await self._buy_orders.request_highest_buy_order(
                app_id, currency_id, item_name,
            )
        except PriceSourceError as exc:
            raise PriceSourceError(FailureReason.ERROR) from exc
        if price is None:
            raise PriceSourceError(FailureReason.PRICE_UNDEFINED)
        return price

    async def fetch_lowest_listing_price(self, app_id: int, item_name: str) -> int:
        url = f"{self._base_url}/market/listings/{app_id}/{quote(item_name, safe='')}/render/"
        data = await self._get_json(url, {
            "query": "",
            "start": 0,
            "count": 3,
            "country": "US",
            "language": "english",
            "currency": self._wallet.currency_id(),
        })

        listing_info = data.get("listinginfo")
        if not isinstance(listing_info, (dict, list)):
            raise PriceSourceError(FailureReason.NO_LISTING_DATA)
        # Steam sends an empty list rather than an empty object when nothing is listed.
        listings = list(listing_info.values()) if isinstance(listing_info, dict) else listing_info
        if not listings:
            raise PriceSourceError(FailureReason.EMPTY_LISTINGS)

        for listing in listings:
            if not isinstance(listing, dict):
                continue
            price, fee = listing.get("converted_price"), listing.get("converted_fee")
            if price is not None and fee is not None:
                return int(price) + int(fee)
        raise PriceSourceError(FailureReason.NO_PRICES_ON_LISTINGS)

    async def get_price_overview(self, app_id: int, item_name: str) -> dict[str, Any]:
        return await self._get_json(f"{self._base_url}/market/priceoverview/", {
            "appid": app_id,
            "country": "US",
            "currency": self._wallet.currency_id(),
            "market_hash_name": item_name,
        })

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Market request to %s failed: %s", url, exc)
            raise PriceSourceError(FailureReason.NETWORK_ERROR) from exc

        if not response.is_success:
            logger.warning(
                "Error code: %d Status: %s", response.status_code, response.reason_phrase,
            )
            raise PriceSourceError(
                FailureReason.HTTP_ERROR,
                status=response.status_code,
                status_text=response.reason_phrase,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise PriceSourceError(FailureReason.MALFORMED_RESPONSE) from exc

        if not isinstance(data, dict) or data.get("success") is not True:
            raise PriceSourceError(FailureReason.SUCCESS_FALSE)
        return data
