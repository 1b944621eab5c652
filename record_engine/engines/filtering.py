"""
Free-text filter over a record collection.

A record matches when the lower-cased query is a substring of the lower-cased
searchable text: the canonical string form of every searchable, non-null field
joined with single spaces. The space join lets "ada lovelace" match a first and
last name stored in separate fields.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from record_engine.domain.models import Record, Schema
from record_engine.engines.formatter import canonical_text


def searchable_text(record: Record, keys: Iterable[str]) -> str:
    parts = []
    for key in keys:
        value = record.fields.get(key)
        if value is None:
            continue
        parts.append(canonical_text(value))
    return " ".join(parts).lower()


def filter_records(
    records: Sequence[Record], schema: Schema, query: str | None
) -> Sequence[Record]:
    """
    Return the records whose searchable fields contain `query`.

    An empty or whitespace-only query returns `records` itself. Matches keep
    their original order; the input is never modified.
    """
    if query is None or not query.strip():
        return records
    needle = query.lower()
    keys = schema.searchable_keys
    matched: List[Record] = [
        record for record in records if needle in searchable_text(record, keys)
    ]
    return matched


__all__ = ["filter_records", "searchable_text"]
