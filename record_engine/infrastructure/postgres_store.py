"""
PostgreSQL record store backed by an asyncpg pool.

All entity collections share one table: `(entity_type, id BIGSERIAL, fields
JSONB)`. The database assigns identifiers, so they are unique per collection.
Each write item runs as its own statement; a failing item is reported in its
result and never aborts the rest of the batch.

Note: asyncpg is used for the async store because it is the native async driver;
synchronous schema management stays on psycopg (see `db_factory`).
"""

from __future__ import annotations

import asyncio
import json
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import asyncpg
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from record_engine.config import get_settings
from record_engine.domain.errors import TransportFailure
from record_engine.infrastructure.abstract import (
    AbstractRecordStore,
    StoreItemResult,
    failed,
    ok,
)
from record_engine.utils.logging import get_logger

log = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_TRANSIENT_CONNECT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    ConnectionError,
    asyncpg.CannotConnectNowError,
    asyncpg.TooManyConnectionsError,
)

_ITEM_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, TypeError, ValueError)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS public.{table} (
    id BIGSERIAL PRIMARY KEY,
    entity_type TEXT NOT NULL,
    fields JSONB NOT NULL DEFAULT '{{}}'::jsonb
);
CREATE INDEX IF NOT EXISTS {table}_entity_idx ON public.{table} (entity_type, id);
"""


def validate_table_name(table: str) -> str:
    if not _IDENTIFIER_RE.match(table):
        raise ValueError(f"Invalid store table name '{table}'")
    return table


class PostgresRecordStore(AbstractRecordStore):
    """
    Store collections as JSONB rows, one table for all entity types.

    The pool is created on first use. Concurrent first calls may each build a
    pool; the first one assigned wins and the others are closed.
    """

    name: str = "postgres"

    def __init__(
        self,
        dsn: Optional[str] = None,
        table: Optional[str] = None,
        pool_min_size: Optional[int] = None,
        pool_max_size: Optional[int] = None,
        connect_attempts: Optional[int] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self._dsn = dsn or settings.dsn
        self.table = validate_table_name(table or settings.store_table)
        self.pool_min_size = pool_min_size or settings.store_pool_min_size
        self.pool_max_size = pool_max_size or settings.store_pool_max_size
        self.connect_attempts = max(1, connect_attempts or settings.store_connect_attempts)
        self.statement_timeout_ms = (
            settings.db_statement_timeout_ms
            if statement_timeout_ms is None
            else statement_timeout_ms
        )
        self._pool: Any = None

    async def _create_pool(self) -> Any:
        server_settings = None
        if self.statement_timeout_ms > 0:
            server_settings = {"statement_timeout": str(self.statement_timeout_ms)}
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.connect_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(_TRANSIENT_CONNECT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    return await asyncpg.create_pool(
                        dsn=self._dsn,
                        min_size=self.pool_min_size,
                        max_size=self.pool_max_size,
                        server_settings=server_settings,
                    )
        except (*_TRANSIENT_CONNECT_ERRORS, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            raise TransportFailure(
                f"Could not connect to record store: {exc}", operation="connect"
            ) from exc

    async def _get_pool(self) -> Any:
        if self._pool is None:
            pool = await self._create_pool()
            if self._pool is None:
                self._pool = pool
            else:
                await pool.close()
        return self._pool

    @asynccontextmanager
    async def _connection(self, entity_type: str, operation: str) -> AsyncIterator[Any]:
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                yield conn
        except (
            asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError
        ) as exc:
            raise TransportFailure(
                f"{operation} on '{entity_type}' failed: {exc}",
                entity_type=entity_type,
                operation=operation,
            ) from exc

    @staticmethod
    def _row_to_item(row: Any) -> Dict[str, Any]:
        fields = row["fields"]
        if isinstance(fields, (str, bytes)):
            fields = json.loads(fields)
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise ValueError(f"fields of row {row['id']} is not a JSON object")
        item = dict(fields)
        item["Id"] = row["id"]
        return item

    def _written_item(self, entity_type: str, row: Any) -> Dict[str, Any]:
        # The write already happened; an undecodable row is acknowledged by id.
        try:
            return self._row_to_item(row)
        except ValueError as exc:
            log.warning(
                "Store returned undecodable fields",
                extra={"entity": entity_type, "id": row["id"], "error": str(exc)},
            )
            return {"Id": row["id"]}

    async def fetch_records(self, entity_type: str) -> List[Dict[str, Any]]:
        sql = f"SELECT id, fields FROM public.{self.table} WHERE entity_type = $1 ORDER BY id"
        async with self._connection(entity_type, "fetch") as conn:
            rows = await conn.fetch(sql, entity_type)
        items: List[Dict[str, Any]] = []
        for row in rows:
            try:
                items.append(self._row_to_item(row))
            except ValueError as exc:
                log.warning(
                    "Skipping undecodable store row",
                    extra={"entity": entity_type, "id": row["id"], "error": str(exc)},
                )
        return items

    async def create_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        sql = (
            f"INSERT INTO public.{self.table} (entity_type, fields) "
            "VALUES ($1, $2::jsonb) RETURNING id, fields"
        )
        results: List[StoreItemResult] = []
        async with self._connection(entity_type, "create") as conn:
            for item in items:
                payload = {key: value for key, value in item.items() if key != "Id"}
                try:
                    row = await conn.fetchrow(sql, entity_type, json.dumps(payload, default=str))
                except _ITEM_ERRORS as exc:
                    log.warning(
                        "Store rejected create item",
                        extra={"entity": entity_type, "error": str(exc)},
                    )
                    results.append(failed(str(exc)))
                    continue
                results.append(ok(self._written_item(entity_type, row)))
        return results

    async def update_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        sql = (
            f"UPDATE public.{self.table} SET fields = fields || $3::jsonb "
            "WHERE entity_type = $1 AND id = $2 RETURNING id, fields"
        )
        results: List[StoreItemResult] = []
        async with self._connection(entity_type, "update") as conn:
            for item in items:
                record_id = item.get("Id")
                payload = {key: value for key, value in item.items() if key != "Id"}
                try:
                    row = await conn.fetchrow(
                        sql, entity_type, record_id, json.dumps(payload, default=str)
                    )
                except _ITEM_ERRORS as exc:
                    log.warning(
                        "Store rejected update item",
                        extra={"entity": entity_type, "id": record_id, "error": str(exc)},
                    )
                    results.append(failed(str(exc)))
                    continue
                if row is None:
                    results.append(failed(f"Record {record_id} not found", missing=True))
                else:
                    results.append(ok(self._written_item(entity_type, row)))
        return results

    async def delete_records(
        self, entity_type: str, ids: Sequence[int]
    ) -> List[StoreItemResult]:
        sql = (
            f"DELETE FROM public.{self.table} "
            "WHERE entity_type = $1 AND id = $2 RETURNING id, fields"
        )
        results: List[StoreItemResult] = []
        async with self._connection(entity_type, "delete") as conn:
            for record_id in ids:
                try:
                    row = await conn.fetchrow(sql, entity_type, record_id)
                except _ITEM_ERRORS as exc:
                    log.warning(
                        "Store rejected delete item",
                        extra={"entity": entity_type, "id": record_id, "error": str(exc)},
                    )
                    results.append(failed(str(exc)))
                    continue
                if row is None:
                    results.append(failed(f"Record {record_id} not found", missing=True))
                else:
                    results.append(ok(self._written_item(entity_type, row)))
        return results

    async def close(self) -> None:
        if self._pool is not None:
            pool, self._pool = self._pool, None
            await pool.close()


__all__ = ["PostgresRecordStore", "SCHEMA_SQL", "validate_table_name"]
