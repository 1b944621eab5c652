"""
Ephemeral filter/sort state owned by the calling context.

The toggle policy lives here rather than in the sort engine: choosing the
current sort key again flips the direction, choosing a new key resets to
ascending.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel

from record_engine.domain.models import Record, Schema, SortDirection
from record_engine.engines.filtering import filter_records
from record_engine.engines.sorting import sort_records


class ViewState(BaseModel):
    query: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC

    model_config = {"frozen": True}

    def toggle_sort(self, key: str) -> "ViewState":
        if key == self.sort_key:
            flipped = (
                SortDirection.DESC
                if self.sort_direction is SortDirection.ASC
                else SortDirection.ASC
            )
            return self.model_copy(update={"sort_direction": flipped})
        return self.model_copy(update={"sort_key": key, "sort_direction": SortDirection.ASC})

    def with_query(self, query: str) -> "ViewState":
        return self.model_copy(update={"query": query})

    def apply(self, records: Sequence[Record], schema: Schema) -> List[Record]:
        """Filter, then sort, returning the visible slice as a new list."""
        visible = filter_records(records, schema, self.query)
        return sort_records(visible, self.sort_key, self.sort_direction)


__all__ = ["ViewState"]
