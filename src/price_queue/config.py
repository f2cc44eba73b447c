from __future__ import annotations

import os
import socket

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_KEY_PREFIX: str = "pricequeue:"

    MARKET_BASE_URL: str = "https://steamcommunity.com"
    PRICES_BASE_URL: str = "https://prices.csgotrader.app"
    MARKET_CURRENCY_ID: int = 1
    HTTP_TIMEOUT_SECONDS: float = 10.0

    PRICE_QUEUE_LOCATION: str | None = None
    PRICE_QUEUE_SUCCESS_DELAY_MS: int = 1500
    PRICE_QUEUE_FAILURE_DELAY_MS: int = 5000
    PRICE_QUEUE_MAX_RETRIES: int = 5
    PRICE_QUEUE_OWNERSHIP_WINDOW_SECONDS: float = 10.0

    PRICE_FEED_INTERVAL_SECONDS: int = 8 * 3600

    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    @property
    def queue_location(self) -> str:
        """Identifier written to the shared activity ledger by this process."""
        if self.PRICE_QUEUE_LOCATION:
            return self.PRICE_QUEUE_LOCATION
        return f"{socket.gethostname()}:{os.getpid()}"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
