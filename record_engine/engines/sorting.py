"""
Stable column sort for record collections.

Values are ranked by kind so mixed columns still have a total order:
numbers, then timestamps, then text, then missing values. Descending order is
the exact mirror of ascending; `sorted(..., reverse=True)` keeps tied records
in their original relative order, so ties never reshuffle between directions.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple, Union

from record_engine.domain.models import Record, SortDirection
from record_engine.engines.formatter import lookup_name, parse_timestamp

_RANK_NUMBER = 0
_RANK_TIMESTAMP = 1
_RANK_TEXT = 2
_RANK_MISSING = 3


def sort_key(value: Any) -> Tuple[Any, ...]:
    """Build a totally ordered key for one raw field value."""
    if value is None:
        return (_RANK_MISSING,)
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        if isinstance(value, float) and math.isnan(value):
            return (_RANK_MISSING,)
        if isinstance(value, Decimal) and value.is_nan():
            return (_RANK_MISSING,)
        return (_RANK_NUMBER, value)
    if isinstance(value, bool):
        return (_RANK_NUMBER, int(value))
    if isinstance(value, (datetime, date)):
        return (_RANK_TIMESTAMP, parse_timestamp(value).timestamp())
    name = lookup_name(value)
    text = name if name is not None else str(value)
    if name is None and isinstance(value, str):
        timestamp = _iso_timestamp(value)
        if timestamp is not None:
            return (_RANK_TIMESTAMP, timestamp)
    return (_RANK_TEXT, text.casefold(), text)


def _iso_timestamp(text: str) -> Optional[float]:
    # Only strings shaped like YYYY-MM-DD... are treated as dates.
    if len(text) < 10 or text[4] != "-" or text[7] != "-":
        return None
    parsed = parse_timestamp(text)
    return parsed.timestamp() if parsed is not None else None


def sort_records(
    records: Sequence[Record],
    key: Optional[str],
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> List[Record]:
    """
    Return a new list of `records` ordered by `record.fields[key]`.

    Parameters
    ----------
    records : sequence of Record
        Input collection; never modified.
    key : str | None
        Field key to order by. None returns an unchanged copy.
    direction : SortDirection | str
        "asc" or "desc". Unknown values sort ascending.

    Returns
    -------
    list[Record]
        Ordered copy. Records missing the field sort last when ascending.
    """
    if not key:
        return list(records)
    descending = direction == SortDirection.DESC
    return sorted(
        records,
        key=lambda record: sort_key(record.fields.get(key)),
        reverse=descending,
    )


__all__ = ["sort_key", "sort_records"]
