"""
Record store interface and per-item result contract.

A record store is reached by entity-scoped calls. Reads return whole
collections of flat field maps carrying an `Id`; writes take a list of one or
more items and answer with one `StoreItemResult` per submitted item, in order.
Store field names (`title_c`, `Name`, ...) are opaque at this level.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional, Protocol, Sequence, TypedDict, runtime_checkable


class StoreItemResult(TypedDict, total=False):
    """
    Outcome of one submitted item.

    `data` holds the stored field map (with `Id`) on success. `missing` marks a
    failure caused by an unknown identifier.
    """

    success: bool
    data: Optional[Dict[str, Any]]
    message: Optional[str]
    missing: bool


@runtime_checkable
class RecordStore(Protocol):
    """
    Common interface every record store must implement.

    Implementations raise `TransportFailure` when the store cannot be reached
    at all; a problem with one item is reported in that item's result instead.
    """

    name: str

    async def fetch_records(self, entity_type: str) -> List[Dict[str, Any]]:
        ...

    async def create_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        ...

    async def update_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:
        ...

    async def delete_records(
        self, entity_type: str, ids: Sequence[int]
    ) -> List[StoreItemResult]:
        ...

    async def close(self) -> None:
        ...


class AbstractRecordStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses set `name` and implement the four record operations.
    """

    name: str

    @abc.abstractmethod
    async def fetch_records(self, entity_type: str) -> List[Dict[str, Any]]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def create_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def update_records(
        self, entity_type: str, items: Sequence[Dict[str, Any]]
    ) -> List[StoreItemResult]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_records(
        self, entity_type: str, ids: Sequence[int]
    ) -> List[StoreItemResult]:  # pragma: no cover
        raise NotImplementedError

    async def close(self) -> None:
        """Release transport resources. No-op by default."""


def ok(data: Dict[str, Any]) -> StoreItemResult:
    return StoreItemResult(success=True, data=data, message=None, missing=False)


def failed(message: str, missing: bool = False) -> StoreItemResult:
    return StoreItemResult(success=False, data=None, message=message, missing=missing)


__all__ = [
    "AbstractRecordStore",
    "RecordStore",
    "StoreItemResult",
    "failed",
    "ok",
]
