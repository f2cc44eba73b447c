"""Entrypoint: python -m price_queue"""
from __future__ import annotations

import uvicorn

from price_queue.config import settings


def main() -> None:
    uvicorn.run(
        "price_queue.app:create_app",
        factory=True,
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
