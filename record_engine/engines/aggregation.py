"""
Dashboard aggregates computed from raw (unfiltered) record collections.

Every call recomputes from scratch; nothing is cached between calls. Items may
be `Record` instances or plain field mappings, and malformed items contribute
nothing rather than raising.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence, Union

from record_engine.domain.models import AggregateSnapshot, Record
from record_engine.domain.registry import CLOSED_LOST, CLOSED_WON
from record_engine.engines.formatter import to_number

Item = Union[Record, Mapping[str, Any]]


def _field(item: Item, key: str) -> Any:
    if isinstance(item, Record):
        return item.fields.get(key)
    if isinstance(item, Mapping):
        return item.get(key)
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def total_revenue(deals: Iterable[Item]) -> float:
    """Sum of `value` over deals in the Closed Won stage."""
    total = 0.0
    for deal in deals:
        if _field(deal, "stage") != CLOSED_WON:
            continue
        total += to_number(_field(deal, "value")) or 0.0
    return total


def win_rate(deals: Iterable[Item]) -> int:
    """
    Percentage of closed deals that were won, rounded half up.

    Deals in other stages are ignored. Returns 0 when no deal is closed.
    """
    won = lost = 0
    for deal in deals:
        stage = _field(deal, "stage")
        if stage == CLOSED_WON:
            won += 1
        elif stage == CLOSED_LOST:
            lost += 1
    closed = won + lost
    if closed == 0:
        return 0
    return _round_half_up(100 * won / closed)


def win_rate_variant(rate: int) -> str:
    if rate >= 70:
        return "success"
    if rate >= 40:
        return "warning"
    return "danger"


def count_related(records: Iterable[Item], key: str, target_id: int) -> int:
    """Count records whose `key` points at `target_id` (bare id or lookup)."""
    count = 0
    for record in records:
        value = _field(record, key)
        ref_id = getattr(value, "id", None)
        if ref_id is None and isinstance(value, Mapping):
            ref_id = value.get("id", value.get("Id"))
        if ref_id is None:
            ref_id = value
        if ref_id == target_id:
            count += 1
    return count


def aggregate(
    deals: Sequence[Item],
    contacts: Sequence[Item] = (),
    companies: Sequence[Item] = (),
    leads: Sequence[Item] = (),
) -> AggregateSnapshot:
    """Build a fresh `AggregateSnapshot` from the current collections."""
    return AggregateSnapshot(
        total_revenue=total_revenue(deals),
        total_count=len(deals),
        win_rate=win_rate(deals),
        total_deals=len(deals),
        total_contacts=len(contacts),
        total_companies=len(companies),
        total_leads=len(leads),
    )


__all__ = [
    "aggregate",
    "count_related",
    "total_revenue",
    "win_rate",
    "win_rate_variant",
]
