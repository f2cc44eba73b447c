from __future__ import annotations

from enum import StrEnum


class JobKind(StrEnum):
    MY_BUY_ORDER = "my-buy-order"
    MY_LISTING = "my-listing"
    INVENTORY_INSTANT_SELL = "inventory-instant-sell"
    INVENTORY_STARTING_AT = "inventory-starting-at"
    OFFER_HIGHEST_ORDER = "offer-highest-order"
    OFFER_STARTING_AT = "offer-starting-at"


class PriceSourceKind(StrEnum):
    HIGHEST_BUY_ORDER = "highest-buy-order"
    LOWEST_LISTING = "lowest-listing"


SOURCE_BY_KIND: dict[JobKind, PriceSourceKind] = {
    JobKind.MY_BUY_ORDER: PriceSourceKind.HIGHEST_BUY_ORDER,
    JobKind.INVENTORY_INSTANT_SELL: PriceSourceKind.HIGHEST_BUY_ORDER,
    JobKind.OFFER_HIGHEST_ORDER: PriceSourceKind.HIGHEST_BUY_ORDER,
    JobKind.MY_LISTING: PriceSourceKind.LOWEST_LISTING,
    JobKind.INVENTORY_STARTING_AT: PriceSourceKind.LOWEST_LISTING,
    JobKind.OFFER_STARTING_AT: PriceSourceKind.LOWEST_LISTING,
}


class FailureReason(StrEnum):
    EMPTY_LISTINGS = "empty_listings_array"
    NO_PRICES_ON_LISTINGS = "no_prices_on_listings"
    NO_LISTING_DATA = "no listing data"
    SUCCESS_FALSE = "success:false"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"
    PRICE_UNDEFINED = "price_undefined"
    ERROR = "error"
    OTHER_ACTIVE_QUEUE = "other_active_pricequeue"
    UNEXPECTED = "unexpected_error"


class JobStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    DROPPED = "dropped"


class PricingProvider(StrEnum):
    STEAM = "steam"
    BITSKINS = "bitskins"
    SKINCAY = "skincay"
    LOOTFARM = "lootfarm"
    CSGOTM = "csgotm"
    CSMONEY = "csmoney"
    CSGOTRADER = "csgotrader"
