"""Cross-process activity ledger.

Every process driving a price queue records when, and from where, it last
talked to the marketplace. A queue only proceeds when the ledger is stale or
was written by itself. This is an advisory throttle: two processes can read
and then write the record in the same instant and both proceed.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from price_queue.application.ports.clock import from_epoch_ms, to_epoch_ms
from price_queue.application.ports.store import KeyValueStore
from price_queue.domain.entities.activity import ActivityRecord

logger = logging.getLogger(__name__)

ACTIVITY_KEY = "priceQueueActivity"


class SharedActivityLedger:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        ownership_window_seconds: float = 10.0,
    ) -> None:
        self._store = store
        self._window = ownership_window_seconds

    async def read(self) -> ActivityRecord | None:
        values = await self._store.get([ACTIVITY_KEY])
        return _decode(values.get(ACTIVITY_KEY))

    async def record_use(self, now: datetime, location: str) -> None:
        await self._store.set({
            ACTIVITY_KEY: {
                "lastUsed": to_epoch_ms(now),
                "usedAt": location,
            },
        })

    def allows(self, record: ActivityRecord | None, now: datetime, location: str) -> bool:
        if record is None:
            return True
        seconds_since_last_use = (now - record.last_used).total_seconds()
        return seconds_since_last_use > self._window or record.used_at == location


def _decode(raw: Any) -> ActivityRecord | None:
    if raw is None:
        return None
    try:
        return ActivityRecord(last_used=from_epoch_ms(raw["lastUsed"]), used_at=str(raw["usedAt"]))
    except (KeyError, TypeError, ValueError, OverflowError, OSError):
        logger.warning("Ignoring malformed %s record: %r", ACTIVITY_KEY, raw)
        return None
