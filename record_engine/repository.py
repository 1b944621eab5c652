"""
Record repository: async CRUD facade over a record store.

Reads always fetch whole collections. Writes are always batches and report an
outcome for every submitted item; nothing is rolled back and nothing is
dropped. The repository is the only component that represents failure
explicitly, and only at batch-item granularity.

Usage:
    from record_engine.repository import RecordRepository
    from record_engine.infrastructure import create_record_store

    async with RecordRepository(create_record_store) as repo:
        deals = await repo.list_all("deals")
        result = await repo.create_batch("deals", [{"title": "New", "value": "50", "stage": "Lead"}])
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from itertools import zip_longest
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from record_engine.domain.errors import TransportFailure, ValidationFailure
from record_engine.domain.models import (
    BatchFailure,
    BatchResult,
    FailureKind,
    FieldSpec,
    LookupReference,
    Record,
    Schema,
    SemanticType,
)
from record_engine.domain.registry import get_schema
from record_engine.engines.formatter import lookup_name, parse_timestamp
from record_engine.infrastructure.abstract import RecordStore, StoreItemResult
from record_engine.utils.logging import get_logger
from record_engine.validation import validate_payload

log = get_logger(__name__)

CREATED_KEY = "CreatedOn"
UPDATED_KEY = "ModifiedOn"
_TIMESTAMP_KEYS = frozenset({CREATED_KEY, UPDATED_KEY})

StoreFactory = Callable[[], RecordStore]
SchemaLookup = Callable[[str], Schema]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _record_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int) and value > 0:
        return value
    return None


class RecordRepository:
    """
    CRUD facade for all registered entity types.

    Parameters
    ----------
    store_factory : callable
        Builds the record store on first use. Called at most once per open
        repository; a repository instance can be shared by concurrent callers.
    schemas : callable
        Schema lookup, `get_schema` by default.
    clock : callable
        Source of write timestamps, UTC now by default.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        schemas: SchemaLookup = get_schema,
        clock: Clock = _utcnow,
    ) -> None:
        self._store_factory = store_factory
        self._schemas = schemas
        self._clock = clock
        self._store: Optional[RecordStore] = None

    async def __aenter__(self) -> "RecordRepository":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def initialize(self) -> RecordStore:
        """Build the store on first call; later calls return the same store."""
        # No await between check and set: one event loop never builds two stores.
        if self._store is None:
            self._store = self._store_factory()
        return self._store

    @property
    def store(self) -> RecordStore:
        return self.initialize()

    async def close(self) -> None:
        if self._store is not None:
            store, self._store = self._store, None
            await store.close()

    # ------------------------------------------------------------------ mapping

    @staticmethod
    def _inbound(spec: FieldSpec, value: Any) -> Any:
        if spec.semantic_type is SemanticType.LOOKUP and isinstance(value, Mapping):
            ref_id = _record_id(value.get("Id", value.get("id")))
            if ref_id is not None:
                return LookupReference(id=ref_id, name=lookup_name(value) or None)
        return value

    @staticmethod
    def _outbound(value: Any) -> Any:
        if isinstance(value, LookupReference):
            return value.id
        if isinstance(value, datetime):
            return value.isoformat()
        return value

    def _to_record(self, schema: Schema, row: Mapping[str, Any]) -> Optional[Record]:
        record_id = _record_id(row.get("Id"))
        if record_id is None:
            return None
        fields: Dict[str, Any] = {}
        for spec in schema.fields:
            # Older rows may carry the plain key instead of the storage key.
            raw = row.get(spec.store_key, row.get(spec.key))
            fields[spec.key] = self._inbound(spec, raw)
        return Record(
            id=record_id,
            fields=fields,
            created_at=parse_timestamp(row.get(CREATED_KEY)),
            updated_at=parse_timestamp(row.get(UPDATED_KEY)),
        )

    def _to_store(self, schema: Schema, cleaned: Mapping[str, Any]) -> Dict[str, Any]:
        item: Dict[str, Any] = {}
        for spec in schema.fields:
            # Timestamps are written by the repository only.
            if spec.store_key in _TIMESTAMP_KEYS:
                continue
            if spec.key in cleaned:
                item[spec.store_key] = self._outbound(cleaned[spec.key])
        return item

    def _rows_to_records(self, schema: Schema, rows: Sequence[Mapping[str, Any]]) -> List[Record]:
        records: List[Record] = []
        for row in rows:
            record = self._to_record(schema, row)
            if record is None:
                log.warning(
                    "Skipping store row without a valid Id",
                    extra={"entity": schema.entity_type},
                )
                continue
            records.append(record)
        return records

    # -------------------------------------------------------------------- reads

    async def list_all(self, entity_type: str) -> List[Record]:
        """
        Fetch the whole collection of `entity_type`.

        A transport failure is logged and degrades to an empty list.
        """
        schema = self._schemas(entity_type)
        try:
            rows = await self.store.fetch_records(entity_type)
        except TransportFailure:
            log.exception(
                "Record store unavailable; returning empty collection",
                extra={"entity": entity_type},
            )
            return []
        records = self._rows_to_records(schema, rows)
        log.debug("Fetched collection", extra={"entity": entity_type, "rows": len(records)})
        return records

    async def get_by_id(self, entity_type: str, record_id: int) -> Optional[Record]:
        """Return the record with `record_id`, or None when it does not exist."""
        for record in await self.list_all(entity_type):
            if record.id == record_id:
                return record
        return None

    async def resolve_lookups(
        self, entity_type: str, records: Sequence[Record]
    ) -> List[Record]:
        """
        Replace bare foreign-key ids with `LookupReference`s.

        Target collections are loaded concurrently. Ids with no matching target
        become references without a name; existing references are kept as is.
        """
        schema = self._schemas(entity_type)
        specs = [spec for spec in schema.lookup_fields if spec.target]
        if not specs or not records:
            return list(records)

        targets = sorted({spec.target for spec in specs if spec.target})
        collections = await asyncio.gather(*(self.list_all(target) for target in targets))
        names: Dict[str, Dict[int, str]] = {}
        for target, collection in zip(targets, collections):
            target_schema = self._schemas(target)
            names[target] = {rec.id: target_schema.display_name(rec) for rec in collection}

        resolved: List[Record] = []
        for record in records:
            fields = dict(record.fields)
            changed = False
            for spec in specs:
                ref_id = _record_id(fields.get(spec.key))
                if ref_id is None:
                    continue
                name = names[spec.target].get(ref_id) or None
                fields[spec.key] = LookupReference(id=ref_id, name=name)
                changed = True
            resolved.append(record.model_copy(update={"fields": fields}) if changed else record)
        return resolved

    # ------------------------------------------------------------------- writes

    def _submit_failures(
        self,
        result: BatchResult,
        pending: Sequence[Tuple[Any, Any]],
        exc: TransportFailure,
    ) -> BatchResult:
        for original, _ in pending:
            result.failed.append(
                BatchFailure(input=original, reason=str(exc), kind=FailureKind.TRANSPORT)
            )
        return result

    def _collect(
        self,
        schema: Schema,
        pending: Sequence[Tuple[Any, Any]],
        outcomes: Sequence[StoreItemResult],
        result: BatchResult,
        fallback: Optional[Callable[[Any], Optional[Record]]] = None,
    ) -> BatchResult:
        for entry, outcome in zip_longest(pending, outcomes):
            if entry is None:
                log.warning(
                    "Store returned more results than submitted items",
                    extra={"entity": schema.entity_type},
                )
                break
            original, submitted = entry
            if outcome is None:
                result.failed.append(
                    BatchFailure(
                        input=original,
                        reason="no result returned by record store",
                        kind=FailureKind.TRANSPORT,
                    )
                )
                continue
            if not outcome.get("success"):
                kind = FailureKind.NOT_FOUND if outcome.get("missing") else FailureKind.REJECTED
                result.failed.append(
                    BatchFailure(
                        input=original,
                        reason=outcome.get("message") or "rejected by record store",
                        kind=kind,
                    )
                )
                continue
            data = outcome.get("data")
            record = self._to_record(schema, data) if data else None
            if record is None and fallback is not None:
                record = fallback(submitted)
            if record is None:
                result.failed.append(
                    BatchFailure(
                        input=original,
                        reason="record store returned a malformed record",
                        kind=FailureKind.REJECTED,
                    )
                )
                continue
            result.succeeded.append(record)
        return result

    def _log_batch(self, operation: str, entity_type: str, result: BatchResult) -> None:
        extra = {
            "entity": entity_type,
            "operation": operation,
            "succeeded": len(result.succeeded),
            "failed": len(result.failed),
        }
        if result.failed:
            log.warning(
                f"[BATCH {operation.upper()}] {len(result.failed)} item(s) failed",
                extra={**extra, "reasons": [failure.reason for failure in result.failed]},
            )
        else:
            log.info(f"[BATCH {operation.upper()}] ok", extra=extra)

    async def create_batch(
        self, entity_type: str, payloads: Sequence[Mapping[str, Any]]
    ) -> BatchResult:
        """
        Create one record per payload.

        Payloads are keyed by schema key. Numeric fields are coerced before
        submission; an item that fails validation is reported and skipped.
        The repository sets both timestamps.
        """
        schema = self._schemas(entity_type)
        result = BatchResult()
        pending: List[Tuple[Any, Dict[str, Any]]] = []
        now = self._clock().isoformat()

        for payload in payloads:
            try:
                cleaned = validate_payload(schema, payload)
            except ValidationFailure as exc:
                result.failed.append(
                    BatchFailure(input=payload, reason=str(exc), kind=FailureKind.VALIDATION)
                )
                continue
            item = self._to_store(schema, cleaned)
            item[CREATED_KEY] = now
            item[UPDATED_KEY] = now
            pending.append((payload, item))

        if pending:
            try:
                outcomes = await self.store.create_records(
                    entity_type, [item for _, item in pending]
                )
            except TransportFailure as exc:
                log.exception("Create batch could not be submitted", extra={"entity": entity_type})
                self._submit_failures(result, pending, exc)
            else:
                self._collect(schema, pending, outcomes, result)

        self._log_batch("create", entity_type, result)
        return result

    async def update_batch(
        self, entity_type: str, payloads: Sequence[Mapping[str, Any]]
    ) -> BatchResult:
        """
        Apply partial updates; each payload carries the target `id`.

        Only the fields present are changed. `updated_at` is refreshed,
        `created_at` is left untouched.
        """
        schema = self._schemas(entity_type)
        result = BatchResult()
        pending: List[Tuple[Any, Dict[str, Any]]] = []
        now = self._clock().isoformat()

        for payload in payloads:
            try:
                if not isinstance(payload, Mapping):
                    raise ValidationFailure("payload", "must be a mapping of field values")
                record_id = _record_id(payload.get("id", payload.get("Id")))
                if record_id is None:
                    raise ValidationFailure("id", "a positive integer id is required")
                cleaned = validate_payload(schema, payload, partial=True)
            except ValidationFailure as exc:
                result.failed.append(
                    BatchFailure(input=payload, reason=str(exc), kind=FailureKind.VALIDATION)
                )
                continue
            item = self._to_store(schema, cleaned)
            item["Id"] = record_id
            item[UPDATED_KEY] = now
            pending.append((payload, item))

        if pending:
            try:
                outcomes = await self.store.update_records(
                    entity_type, [item for _, item in pending]
                )
            except TransportFailure as exc:
                log.exception("Update batch could not be submitted", extra={"entity": entity_type})
                self._submit_failures(result, pending, exc)
            else:
                self._collect(schema, pending, outcomes, result)

        self._log_batch("update", entity_type, result)
        return result

    async def delete_batch(self, entity_type: str, ids: Sequence[int]) -> BatchResult:
        """
        Delete records by id.

        `succeeded` holds the deleted records as last stored; when the store
        only acknowledges the id, the record carries the id alone.
        """
        schema = self._schemas(entity_type)
        result = BatchResult()
        pending: List[Tuple[Any, int]] = []

        for raw_id in ids:
            record_id = _record_id(raw_id)
            if record_id is None:
                result.failed.append(
                    BatchFailure(
                        input=raw_id,
                        reason="id: a positive integer id is required",
                        kind=FailureKind.VALIDATION,
                    )
                )
                continue
            pending.append((raw_id, record_id))

        if pending:
            try:
                outcomes = await self.store.delete_records(
                    entity_type, [record_id for _, record_id in pending]
                )
            except TransportFailure as exc:
                log.exception("Delete batch could not be submitted", extra={"entity": entity_type})
                self._submit_failures(result, pending, exc)
            else:
                self._collect(
                    schema,
                    pending,
                    outcomes,
                    result,
                    fallback=lambda record_id: Record(id=record_id),
                )

        self._log_batch("delete", entity_type, result)
        return result


__all__ = ["RecordRepository", "StoreFactory"]
