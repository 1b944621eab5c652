"""
Pytest configuration for the CRM Record Engine.

Provides fixtures for:
- Settings override and cache reset between tests
- Record repositories over the in-memory store
- Database connection management for integration tests
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncIterator, Generator

import psycopg
import pytest
import pytest_asyncio

from record_engine.config import Settings, get_settings
from record_engine.infrastructure.fixtures import SAMPLE_COLLECTIONS
from record_engine.infrastructure.memory_store import InMemoryRecordStore
from record_engine.repository import RecordRepository


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """
    Clear the cached settings so env overrides made by a test never leak.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "crm"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="function")
def store_table(test_dsn: str, db_connection_available: bool) -> Generator[str, None, None]:
    """
    Create a throwaway record table for one integration test and drop it after.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    from record_engine.infrastructure.db_factory import ensure_schema

    table = f"crm_records_test_{uuid.uuid4().hex[:8]}"
    ensure_schema(dsn=test_dsn, table=table)
    try:
        yield table
    finally:
        with psycopg.connect(test_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"DROP TABLE IF EXISTS public.{table};")
            conn.commit()


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """
    In-memory store seeded with the sample collections.
    """
    return InMemoryRecordStore(seed=SAMPLE_COLLECTIONS)


@pytest_asyncio.fixture
async def repo(memory_store: InMemoryRecordStore) -> AsyncIterator[RecordRepository]:
    """
    Repository over the seeded in-memory store, closed after the test.
    """
    async with RecordRepository(lambda: memory_store) as repository:
        yield repository


@pytest_asyncio.fixture
async def empty_repo() -> AsyncIterator[RecordRepository]:
    """
    Repository over an empty in-memory store.
    """
    async with RecordRepository(InMemoryRecordStore) as repository:
        yield repository
