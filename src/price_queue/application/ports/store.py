from __future__ import annotations

from typing import Any, Iterable, Protocol


class KeyValueStore(Protocol):
    """Persisted store shared by every process driving a price queue.

    ``get`` omits keys that have never been written.
    """

    async def get(self, keys: Iterable[str]) -> dict[str, Any]: ...

    async def set(self, values: dict[str, Any]) -> None: ...
