"""ORM models; importing this package registers every table on Base.metadata."""

from specpilot.db.models.kv_record import KeyValueRow

__all__ = ["KeyValueRow"]
