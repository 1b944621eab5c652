"""
Engines package for the CRM Record Engine.

Pure, synchronous functions over record collections: formatting, filtering,
sorting and dashboard aggregation. Nothing here performs I/O or mutates its
inputs.
"""

from record_engine.engines.aggregation import (
    aggregate,
    count_related,
    total_revenue,
    win_rate,
    win_rate_variant,
)
from record_engine.engines.filtering import filter_records
from record_engine.engines.formatter import (
    PLACEHOLDER,
    format_record,
    format_value,
)
from record_engine.engines.sorting import sort_records

__all__ = [
    # Formatting
    "PLACEHOLDER",
    "format_record",
    "format_value",
    # Filtering / sorting
    "filter_records",
    "sort_records",
    # Aggregation
    "aggregate",
    "count_related",
    "total_revenue",
    "win_rate",
    "win_rate_variant",
]
