"""SQLAlchemy-backed store over the ``kv_records`` table."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from specpilot.db.models.kv_record import KeyValueRow
from specpilot.stores.base import KeyValueStore

logger = logging.getLogger(__name__)


class SqlStore(KeyValueStore):
    """One short-lived session per operation, committed immediately."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self.session_factory = session_factory
        self.engine = engine

    async def get(self, namespace: str, key: str) -> dict | None:
        async with self.session_factory() as session:
            row = await session.get(KeyValueRow, (namespace, key))
            return dict(row.value) if row is not None else None

    async def set(self, namespace: str, key: str, value: dict) -> None:
        async with self.session_factory() as session:
            row = await session.get(KeyValueRow, (namespace, key))
            if row is None:
                session.add(KeyValueRow(namespace=namespace, key=key, value=value))
            else:
                row.value = value
            await session.commit()

    async def list(self, namespace: str) -> list[dict]:
        async with self.session_factory() as session:
            stmt = (
                select(KeyValueRow)
                .where(KeyValueRow.namespace == namespace)
                .order_by(KeyValueRow.created_at)
            )
            result = await session.execute(stmt)
            return [dict(row.value) for row in result.scalars().all()]

    async def delete(self, namespace: str, key: str) -> bool:
        async with self.session_factory() as session:
            stmt = delete(KeyValueRow).where(
                KeyValueRow.namespace == namespace,
                KeyValueRow.key == key,
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount > 0

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("SQL store engine disposed")
