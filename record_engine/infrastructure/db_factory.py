"""
Database and record store factory utilities for the CRM Record Engine.

Provides the DSN builder, a retrying synchronous psycopg connection used for
schema management, and `create_record_store`, which picks the configured
record store backend.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from record_engine.config import Settings, get_settings
from record_engine.infrastructure.abstract import RecordStore
from record_engine.infrastructure.fixtures import SAMPLE_COLLECTIONS
from record_engine.infrastructure.memory_store import InMemoryRecordStore
from record_engine.infrastructure.postgres_store import (
    SCHEMA_SQL,
    PostgresRecordStore,
    validate_table_name,
)
from record_engine.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    return (settings or get_settings()).dsn


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> psycopg.Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def apply_statement_timeout(cur: psycopg.Cursor, timeout_ms: int) -> None:
    """Set a per-session statement timeout; 0 leaves the server default."""
    if timeout_ms > 0:
        cur.execute(f"SET statement_timeout = {int(timeout_ms)}")


def ensure_schema(dsn: Optional[str] = None, table: Optional[str] = None) -> str:
    """
    Create the record table and its index if they do not exist.

    Returns
    -------
    str
        The table name that was ensured.
    """
    settings = get_settings()
    table = validate_table_name(table or settings.store_table)
    conn = get_sync_connection(dsn)
    try:
        with conn.cursor() as cur:
            apply_statement_timeout(cur, settings.db_statement_timeout_ms)
            cur.execute(SCHEMA_SQL.format(table=table))
        conn.commit()
    finally:
        conn.close()
    log.info("Record table ready", extra={"table": table})
    return table


def create_record_store(settings: Optional[Settings] = None) -> RecordStore:
    """
    Build the record store named by `STORE_BACKEND` ("postgres" or "memory").

    The memory backend is seeded with the sample collections.
    """
    settings = settings or get_settings()
    backend = settings.store_backend.lower()
    if backend == "memory":
        return InMemoryRecordStore(seed=SAMPLE_COLLECTIONS)
    if backend == "postgres":
        return PostgresRecordStore(
            dsn=settings.dsn,
            table=settings.store_table,
            pool_min_size=settings.store_pool_min_size,
            pool_max_size=settings.store_pool_max_size,
            connect_attempts=settings.store_connect_attempts,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )
    raise ValueError(f"Unknown store backend '{settings.store_backend}'. Available: memory, postgres")


__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "create_record_store",
    "ensure_schema",
    "get_sync_connection",
]
