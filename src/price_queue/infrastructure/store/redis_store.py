"""Redis-backed shared key-value store."""
from __future__ import annotations

import json
from typing import Any, Iterable

import redis.asyncio as aioredis


class RedisKeyValueStore:
    """Implements application.ports.store.KeyValueStore.

    Values are JSON documents stored under ``prefix + key``.
    """

    def __init__(self, redis: aioredis.Redis, prefix: str = "") -> None:
        self._redis = redis
        self._prefix = prefix

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        raw_values = await self._redis.mget([self._prefix + key for key in keys])
        return {
            key: json.loads(raw)
            for key, raw in zip(keys, raw_values)
            if raw is not None
        }

    async def set(self, values: dict[str, Any]) -> None:
        if not values:
            return
        await self._redis.mset(
            {self._prefix + key: json.dumps(value) for key, value in values.items()}
        )
