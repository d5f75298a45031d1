"""Abstract storage for namespaced JSON documents."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Async document store keyed by ``(namespace, key)``.

    Values are plain JSON-compatible dicts. Implementations hand out copies,
    so callers may mutate what they get back without touching stored state.
    """

    @abstractmethod
    async def get(self, namespace: str, key: str) -> dict | None:
        """Return the stored document or ``None``."""
        ...

    @abstractmethod
    async def set(self, namespace: str, key: str, value: dict) -> None:
        """Insert or replace a document."""
        ...

    @abstractmethod
    async def list(self, namespace: str) -> list[dict]:
        """Return every document in a namespace."""
        ...

    @abstractmethod
    async def delete(self, namespace: str, key: str) -> bool:
        """Remove a document. Returns True if it existed."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None
