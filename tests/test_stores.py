"""Key-value store backends: in-memory and SQLite via SQLAlchemy."""

import pytest

from specpilot.db.engine import create_db_engine, create_session_factory, create_tables
from specpilot.stores.memory import InMemoryStore
from specpilot.stores.sql import SqlStore


@pytest.fixture
async def sql_store():
    """SqlStore over an in-memory SQLite database."""
    engine = create_db_engine("sqlite+aiosqlite:///")
    await create_tables(engine)
    store = SqlStore(create_session_factory(engine), engine=engine)
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
async def any_store(request, sql_store):
    if request.param == "memory":
        return InMemoryStore()
    return sql_store


@pytest.mark.asyncio
async def test_get_missing_returns_none(any_store):
    assert await any_store.get("specs", "nope") is None


@pytest.mark.asyncio
async def test_set_then_get(any_store):
    await any_store.set("specs", "a", {"title": "A", "nested": {"n": 1}})
    assert await any_store.get("specs", "a") == {"title": "A", "nested": {"n": 1}}


@pytest.mark.asyncio
async def test_set_replaces(any_store):
    await any_store.set("specs", "a", {"v": 1})
    await any_store.set("specs", "a", {"v": 2})
    assert await any_store.get("specs", "a") == {"v": 2}
    assert len(await any_store.list("specs")) == 1


@pytest.mark.asyncio
async def test_namespaces_are_isolated(any_store):
    await any_store.set("specs", "k", {"kind": "spec"})
    await any_store.set("integrations", "k", {"kind": "integration"})
    assert await any_store.get("specs", "k") == {"kind": "spec"}
    assert await any_store.list("integrations") == [{"kind": "integration"}]


@pytest.mark.asyncio
async def test_delete(any_store):
    await any_store.set("specs", "a", {"v": 1})
    assert await any_store.delete("specs", "a") is True
    assert await any_store.delete("specs", "a") is False
    assert await any_store.get("specs", "a") is None


@pytest.mark.asyncio
async def test_memory_store_returns_copies():
    store = InMemoryStore()
    value = {"items": [1]}
    await store.set("specs", "a", value)
    value["items"].append(2)
    fetched = await store.get("specs", "a")
    fetched["items"].append(3)
    assert await store.get("specs", "a") == {"items": [1]}
