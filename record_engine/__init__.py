"""
CRM Record Engine - typed record access, view and dashboard engines for a CRM.

This package provides the data core of a small CRM over five entity types
(contacts, companies, deals, leads, activities):

- A schema registry describing every entity's fields and display semantics
- An async record repository with whole-collection reads and batch writes
- Pure engines for value formatting, search filtering, sorting and aggregation
- PostgreSQL (asyncpg) and in-memory record stores
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from record_engine.config import Settings, get_settings
from record_engine.dashboard import load_dashboard
from record_engine.domain.models import AggregateSnapshot, BatchResult, Record, Schema
from record_engine.domain.registry import get_schema, registered_entity_types
from record_engine.engines import (
    aggregate,
    filter_records,
    format_record,
    format_value,
    sort_records,
)
from record_engine.infrastructure.abstract import AbstractRecordStore, RecordStore
from record_engine.infrastructure.db_factory import create_record_store
from record_engine.repository import RecordRepository
from record_engine.utils.logging import configure_logging, get_logger
from record_engine.view import ViewState

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "AggregateSnapshot",
    "BatchResult",
    "Record",
    "Schema",
    "get_schema",
    "registered_entity_types",
    # Engines
    "aggregate",
    "filter_records",
    "format_record",
    "format_value",
    "sort_records",
    "ViewState",
    # Records
    "AbstractRecordStore",
    "RecordRepository",
    "RecordStore",
    "create_record_store",
    "load_dashboard",
    # Logging
    "configure_logging",
    "get_logger",
]
