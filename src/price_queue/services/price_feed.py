from __future__ import annotations

import logging
from typing import Any, Protocol

from price_queue.application.exceptions import ValidationError
from price_queue.application.ports.store import KeyValueStore
from price_queue.domain.value_objects.enums import PricingProvider

logger = logging.getLogger(__name__)

_MODE_KEYED = {PricingProvider.STEAM, PricingProvider.BITSKINS, PricingProvider.SKINCAY}
_FLAT = {PricingProvider.LOOTFARM, PricingProvider.CSGOTM}
_WITH_DOPPLER = {PricingProvider.CSMONEY, PricingProvider.CSGOTRADER}

_BITSKINS_MODE_FIELDS = {
    "bitskins": "price",
    "instant_sale": "instant_sale_price",
}


class PriceFeed(Protocol):
    async def fetch_provider_prices(self, provider: str) -> dict[str, Any]: ...

    async def fetch_exchange_rates(self) -> dict[str, float]: ...


def normalize_prices(provider: str, mode: str | None, raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Reduce a provider's feed to ``{item_name: {"price": ..., "doppler"?: ...}}``."""
    try:
        provider = PricingProvider(provider)
    except ValueError:
        raise ValidationError(f"Unknown pricing provider: {provider!r}") from None

    prices: dict[str, dict[str, Any]] = {}
    if provider in _MODE_KEYED:
        field = mode
        if provider == PricingProvider.BITSKINS:
            field = _BITSKINS_MODE_FIELDS.get(mode or "", mode)
        for name, entry in raw.items():
            value = entry.get(field) if isinstance(entry, dict) else None
            if value is None:
                logger.debug("No %s price for %s", field, name)
            prices[name] = {"price": value}
    elif provider in _FLAT:
        for name, value in raw.items():
            prices[name] = {"price": value}
    elif provider in _WITH_DOPPLER:
        for name, entry in raw.items():
            entry = entry if isinstance(entry, dict) else {}
            prices[name] = {"price": entry.get("price")}
            if entry.get("doppler") is not None:
                prices[name]["doppler"] = entry["doppler"]
    return prices


async def update_prices(store: KeyValueStore, feed: PriceFeed) -> int | None:
    """Refresh the ``prices`` key from the configured provider.

    Returns the number of priced items, or None when item pricing is disabled.
    """
    options = await store.get(["itemPricing", "pricingProvider", "pricingMode"])
    if not options.get("itemPricing"):
        logger.debug("Item pricing disabled, skipping price update")
        return None

    provider = options.get("pricingProvider") or PricingProvider.CSGOTRADER.value
    raw = await feed.fetch_provider_prices(provider)
    prices = normalize_prices(provider, options.get("pricingMode"), raw)
    await store.set({"prices": prices})
    logger.info("Updated %d prices from %s", len(prices), provider)
    return len(prices)


async def update_exchange_rates(store: KeyValueStore, feed: PriceFeed) -> dict[str, float]:
    rates = await feed.fetch_exchange_rates()
    currency = (await store.get(["currency"])).get("currency")
    await store.set({
        "exchangeRates": rates,
        "exchangeRate": rates.get(currency) if currency else None,
    })
    logger.info("Updated %d exchange rates", len(rates))
    return rates
