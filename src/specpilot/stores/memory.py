"""Process-local store used by tests and the ``memory`` backend."""

from __future__ import annotations

import asyncio
import copy

from specpilot.stores.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict]] = {}
        self._lock = asyncio.Lock()

    async def get(self, namespace: str, key: str) -> dict | None:
        value = self._data.get(namespace, {}).get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, namespace: str, key: str, value: dict) -> None:
        async with self._lock:
            self._data.setdefault(namespace, {})[key] = copy.deepcopy(value)

    async def list(self, namespace: str) -> list[dict]:
        return [copy.deepcopy(v) for v in self._data.get(namespace, {}).values()]

    async def delete(self, namespace: str, key: str) -> bool:
        async with self._lock:
            return self._data.get(namespace, {}).pop(key, None) is not None
