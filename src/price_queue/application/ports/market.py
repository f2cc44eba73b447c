from __future__ import annotations

from typing import Protocol


class PriceSource(Protocol):
    async def fetch_highest_buy_order(self, app_id: int, item_name: str) -> int: ...

    async def fetch_lowest_listing_price(self, app_id: int, item_name: str) -> int: ...


class BuyOrderChannel(Protocol):
    async def request_highest_buy_order(
        self, app_id: int, currency_id: int, item_name: str,
    ) -> int | None: ...


class WalletContext(Protocol):
    def currency_id(self) -> int: ...
