"""Highest buy order lookups through the market order histogram."""
from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx

from price_queue.application.exceptions import PriceSourceError
from price_queue.domain.value_objects.enums import FailureReason

logger = logging.getLogger(__name__)

_NAME_ID_RE = re.compile(r"Market_LoadOrderSpread\(\s*(\d+)\s*\)")


class HistogramBuyOrderChannel:
    """Implements application.ports.market.BuyOrderChannel.

    The histogram endpoint is keyed by Steam's internal item name id, which is
    only exposed in the listing page markup; ids are memoised per item.
    """

    def __init__(self, http: httpx.AsyncClient, *, base_url: str = "https://steamcommunity.com") -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._name_ids: dict[tuple[int, str], str] = {}

    async def request_highest_buy_order(
        self, app_id: int, currency_id: int, item_name: str,
    ) -> int | None:
        name_id = await self._item_name_id(app_id, item_name)
        try:
            response = await self._http.get(
                f"{self._base_url}/market/itemordershistogram",
                params={
                    "country": "US",
                    "language": "english",
                    "currency": currency_id,
                    "item_nameid": name_id,
                    "two_factor": 0,
                },
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Order histogram request for %s failed: %s", item_name, exc)
            raise PriceSourceError(FailureReason.ERROR) from exc

        if not isinstance(data, dict) or data.get("success") != 1:
            raise PriceSourceError(FailureReason.ERROR)
        highest = data.get("highest_buy_order")
        return int(highest) if highest is not None else None

    async def _item_name_id(self, app_id: int, item_name: str) -> str:
        key = (app_id, item_name)
        if key in self._name_ids:
            return self._name_ids[key]

        try:
            response = await self._http.get(
                f"{self._base_url}/market/listings/{app_id}/{quote(item_name, safe='')}",
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Listing page request for %s failed: %s", item_name, exc)
            raise PriceSourceError(FailureReason.ERROR) from exc

        match = _NAME_ID_RE.search(response.text)
        if match is None:
            logger.warning("No item name id on listing page for %s", item_name)
            raise PriceSourceError(FailureReason.ERROR)
        self._name_ids[key] = match.group(1)
        return match.group(1)
