"""Namespaced JSON document table backing the SQL store."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from specpilot.db.base import Base, TimestampMixin


class KeyValueRow(Base, TimestampMixin):
    __tablename__ = "kv_records"

    namespace: Mapped[str] = mapped_column(String(128), primary_key=True)
    key: Mapped[str] = mapped_column(String(256), primary_key=True)
    value: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
