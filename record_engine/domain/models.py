"""
Domain models for the CRM Record Engine.

Defines the universal `Record`, the schema descriptors that type each entity's
fields, and the value objects produced by the engines and the repository
(`Badge`, `BatchResult`, `AggregateSnapshot`).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from record_engine.domain.errors import PartialBatchFailure


class SemanticType(str, Enum):
    """Display/validation category of a field."""

    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    ENUM_BADGE = "enum-badge"
    LOOKUP = "lookup"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class LookupReference(BaseModel):
    """
    Denormalized `{id, name}` snapshot of another record.

    Not refreshed when the referenced record is renamed.
    """

    id: int = Field(..., description="Identifier of the referenced record.")
    name: Optional[str] = Field(None, description="Display name at snapshot time.")

    model_config = {"frozen": True}


class Record(BaseModel):
    """
    One entity instance: a store-assigned identifier plus an ordered field map.
    """

    id: int = Field(..., gt=0, description="Store-assigned identifier.")
    fields: Dict[str, Any] = Field(default_factory=dict, description="Field key to value.")
    created_at: Optional[datetime] = Field(None, description="Set on create.")
    updated_at: Optional[datetime] = Field(None, description="Refreshed on every update.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


BadgeClassifier = Callable[[Any], str]


class FieldSpec(BaseModel):
    """
    Descriptor of one schema field.

    `storage_key` is the record store's name for the field; it defaults to `key`.
    """

    key: str
    label: str
    semantic_type: SemanticType = SemanticType.TEXT
    sortable: bool = True
    searchable: bool = False
    storage_key: Optional[str] = None
    required: bool = False
    numeric: bool = False
    unit: Optional[str] = Field(None, description="Suffix appended to rendered values.")
    target: Optional[str] = Field(None, description="Entity type a lookup points at.")
    badge: Optional[BadgeClassifier] = Field(None, description="Enum value to badge variant.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @property
    def store_key(self) -> str:
        return self.storage_key or self.key


class Schema(BaseModel):
    """
    Ordered field descriptors of one entity type.
    """

    entity_type: str
    label: str
    fields: Tuple[FieldSpec, ...]
    display_keys: Tuple[str, ...] = Field(
        ..., description="Fields joined with a space to name a record in lookups."
    )

    model_config = {"frozen": True}

    @property
    def keys(self) -> List[str]:
        return [spec.key for spec in self.fields]

    @property
    def searchable_keys(self) -> List[str]:
        return [spec.key for spec in self.fields if spec.searchable]

    @property
    def lookup_fields(self) -> List[FieldSpec]:
        return [spec for spec in self.fields if spec.semantic_type is SemanticType.LOOKUP]

    def field(self, key: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.key == key:
                return spec
        return None

    def display_name(self, record: Record) -> str:
        parts = [str(record.get(key)) for key in self.display_keys if record.get(key)]
        return " ".join(parts).strip()


class Badge(BaseModel):
    """Tagged renderable for enum-badge cells."""

    kind: Literal["badge"] = "badge"
    text: str
    variant: str = "default"

    model_config = {"frozen": True}


class FailureKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    REJECTED = "rejected"


class BatchFailure(BaseModel):
    """One failed batch item with the input that was submitted."""

    input: Any
    reason: str
    kind: FailureKind = FailureKind.REJECTED


class BatchResult(BaseModel):
    """
    Per-item outcome of a create/update/delete batch.

    Every submitted item lands in exactly one of the two lists.
    """

    succeeded: List[Record] = Field(default_factory=list)
    failed: List[BatchFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def partial(self) -> bool:
        return bool(self.failed) and bool(self.succeeded)

    def raise_for_failures(self) -> "BatchResult":
        if self.failed:
            raise PartialBatchFailure(self)
        return self


class AggregateSnapshot(BaseModel):
    """
    Derived dashboard metrics; recomputed on demand and never stored.
    """

    total_revenue: float = 0.0
    total_count: int = 0
    win_rate: int = 0
    total_deals: int = 0
    total_contacts: int = 0
    total_companies: int = 0
    total_leads: int = 0

    model_config = {"frozen": True}


__all__ = [
    "AggregateSnapshot",
    "Badge",
    "BadgeClassifier",
    "BatchFailure",
    "BatchResult",
    "FailureKind",
    "FieldSpec",
    "LookupReference",
    "Record",
    "Schema",
    "SemanticType",
    "SortDirection",
]
