"""Persistence backends for specs and integration settings."""

from specpilot.stores.base import KeyValueStore
from specpilot.stores.memory import InMemoryStore
from specpilot.stores.sql import SqlStore

__all__ = ["InMemoryStore", "KeyValueStore", "SqlStore"]
