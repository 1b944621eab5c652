"""
In-memory record store.

Holds each entity collection as a list of store-shaped field maps. Identifiers
come from a per-collection counter that never goes back, so the id of a
deleted record is never handed out again. An optional per-call latency
simulates network round trips.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence

from record_engine.infrastructure.abstract import (
    AbstractRecordStore,
    StoreItemResult,
    failed,
    ok,
)


class InMemoryRecordStore(AbstractRecordStore):
    """
    Dictionary-backed store; safe to share between coroutines on one event loop.
    """

    name: str = "memory"

    def __init__(
        self,
        seed: Optional[Mapping[str, Sequence[Mapping[str, Any]]]] = None,
        latency_seconds: float = 0.0,
    ) -> None:
        self._collections: Dict[str, List[Dict[str, Any]]] = {
            entity: [dict(row) for row in rows] for entity, rows in (seed or {}).items()
        }
        self._last_ids: Dict[str, int] = {
            entity: max((row["Id"] for row in rows), default=0)
            for entity, rows in self._collections.items()
        }
        self.latency_seconds = latency_seconds
        self.closed = False

    async def _delay(self) -> None:
        await asyncio.sleep(self.latency_seconds)

    def _rows(self, entity_type: str) -> List[Dict[str, Any]]:
        return self._collections.setdefault(entity_type, [])

    def _next_id(self, entity_type: str) -> int:
        highest = max((row["Id"] for row in self._rows(entity_type)), default=0)
        next_id = max(highest, self._last_ids.get(entity_type, 0)) + 1
        self._last_ids[entity_type] = next_id
        return next_id

    def _find(self, entity_type: str, record_id: Any) -> Optional[Dict[str, Any]]:
        for row in self._rows(entity_type):
            if row["Id"] == record_id:
                return row
        return None

    async def fetch_records(self, entity_type: str) -> List[Dict[str, Any]]:
        await self._delay()
        return copy.deepcopy(self._rows(entity_type))

    async def create_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        await self._delay()
        results: List[StoreItemResult] = []
        for item in items:
            if not isinstance(item, Mapping):
                results.append(failed("item must be a field map"))
                continue
            row = {key: copy.deepcopy(value) for key, value in item.items() if key != "Id"}
            row["Id"] = self._next_id(entity_type)
            self._rows(entity_type).append(row)
            results.append(ok(copy.deepcopy(row)))
        return results

    async def update_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        await self._delay()
        results: List[StoreItemResult] = []
        for item in items:
            row = self._find(entity_type, item.get("Id"))
            if row is None:
                results.append(failed(f"Record {item.get('Id')} not found", missing=True))
                continue
            row.update({key: copy.deepcopy(value) for key, value in item.items() if key != "Id"})
            results.append(ok(copy.deepcopy(row)))
        return results

    async def delete_records(
        self, entity_type: str, ids: Sequence[int]
    ) -> List[StoreItemResult]:
        await self._delay()
        results: List[StoreItemResult] = []
        rows = self._rows(entity_type)
        for record_id in ids:
            row = self._find(entity_type, record_id)
            if row is None:
                results.append(failed(f"Record {record_id} not found", missing=True))
                continue
            rows.remove(row)
            results.append(ok(row))
        return results

    async def close(self) -> None:
        self.closed = True


__all__ = ["InMemoryRecordStore"]
