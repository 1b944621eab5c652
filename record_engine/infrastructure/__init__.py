"""
Infrastructure package for the CRM Record Engine.

Centralizes record store transports (PostgreSQL over asyncpg, in-memory) and
database connectivity for schema management. Keep this layer focused on I/O
and resource management, decoupled from the engines and the repository's
mapping logic.
"""

from record_engine.infrastructure.abstract import (
    AbstractRecordStore,
    RecordStore,
    StoreItemResult,
)
from record_engine.infrastructure.db_factory import (
    build_dsn,
    create_record_store,
    ensure_schema,
    get_sync_connection,
)
from record_engine.infrastructure.memory_store import InMemoryRecordStore
from record_engine.infrastructure.postgres_store import PostgresRecordStore

__all__ = [
    "AbstractRecordStore",
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "RecordStore",
    "StoreItemResult",
    "build_dsn",
    "create_record_store",
    "ensure_schema",
    "get_sync_connection",
]
