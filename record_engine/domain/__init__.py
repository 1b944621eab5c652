"""
Domain package for the CRM Record Engine.

Exports the record and schema models, the error taxonomy and the schema
registry. Keep this package focused on data definitions; I/O lives in
`record_engine.infrastructure`.
"""

from record_engine.domain.errors import (
    PartialBatchFailure,
    RecordEngineError,
    TransportFailure,
    UnknownEntityType,
    ValidationFailure,
)
from record_engine.domain.models import (
    AggregateSnapshot,
    Badge,
    BatchFailure,
    BatchResult,
    FailureKind,
    FieldSpec,
    LookupReference,
    Record,
    Schema,
    SemanticType,
    SortDirection,
)
from record_engine.domain.registry import get_schema, registered_entity_types

__all__ = [
    # Models
    "AggregateSnapshot",
    "Badge",
    "BatchFailure",
    "BatchResult",
    "FailureKind",
    "FieldSpec",
    "LookupReference",
    "Record",
    "Schema",
    "SemanticType",
    "SortDirection",
    # Errors
    "PartialBatchFailure",
    "RecordEngineError",
    "TransportFailure",
    "UnknownEntityType",
    "ValidationFailure",
    # Registry
    "get_schema",
    "registered_entity_types",
]
