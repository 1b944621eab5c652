"""
Dashboard loading: concurrent collection reads joined into an aggregate snapshot.

Usage:
    snapshot = await load_dashboard(repo)
    print(snapshot.total_revenue, snapshot.win_rate)
"""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List

from record_engine.domain.errors import UnknownEntityType
from record_engine.domain.models import AggregateSnapshot, Record
from record_engine.engines.aggregation import aggregate
from record_engine.repository import RecordRepository
from record_engine.utils.logging import get_logger

log = get_logger(__name__)

DASHBOARD_ENTITIES = ("deals", "contacts", "companies", "leads")


async def load_collections(
    repo: RecordRepository, entity_types: Iterable[str]
) -> Dict[str, List[Record]]:
    """
    Read several collections concurrently and join once all have finished.

    `list_all` already degrades transport failures to an empty list. Any other
    unexpected error from one read is logged and also degrades to an empty
    list, so one failing read never blocks or masks the others. Unknown entity
    types are programming errors and are raised.
    """
    names = list(entity_types)
    outcomes = await asyncio.gather(
        *(repo.list_all(name) for name in names), return_exceptions=True
    )
    collections: Dict[str, List[Record]] = {}
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, UnknownEntityType):
            raise outcome
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Exception):
            log.error(
                "Collection read failed; using empty collection",
                exc_info=outcome,
                extra={"entity": name},
            )
            collections[name] = []
            continue
        collections[name] = outcome
    return collections


async def load_dashboard(repo: RecordRepository) -> AggregateSnapshot:
    """Compute a fresh snapshot from the current unfiltered collections."""
    collections = await load_collections(repo, DASHBOARD_ENTITIES)
    snapshot = aggregate(
        deals=collections["deals"],
        contacts=collections["contacts"],
        companies=collections["companies"],
        leads=collections["leads"],
    )
    log.info(
        "Dashboard snapshot computed",
        extra={"total_revenue": snapshot.total_revenue, "win_rate": snapshot.win_rate},
    )
    return snapshot


__all__ = ["DASHBOARD_ENTITIES", "load_collections", "load_dashboard"]
