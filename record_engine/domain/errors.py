"""
Error taxonomy for the CRM Record Engine.

Only `UnknownEntityType` is raised to callers as a programming error. Stores raise
`TransportFailure`; the repository turns it into an empty collection (reads) or
per-item batch failures (writes). `ValidationFailure` never leaves the
repository as an exception; it is reported as a `BatchFailure` entry.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class RecordEngineError(Exception):
    """Base class for all record engine errors."""


class UnknownEntityType(RecordEngineError):
    """Raised when a schema lookup names an entity type that is not registered."""

    def __init__(self, entity_type: str, available: Iterable[str] = ()) -> None:
        self.entity_type = entity_type
        self.available = sorted(available)
        message = f"Unknown entity type '{entity_type}'."
        if self.available:
            message += f" Available: {', '.join(self.available)}"
        super().__init__(message)


class TransportFailure(RecordEngineError):
    """Network or store level failure while talking to the record store."""

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        self.entity_type = entity_type
        self.operation = operation
        super().__init__(message)


class ValidationFailure(RecordEngineError):
    """A payload field is missing or cannot be coerced before submission."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class PartialBatchFailure(RecordEngineError):
    """Raised on demand by `BatchResult.raise_for_failures`."""

    def __init__(self, result: Any) -> None:
        self.result = result
        reasons = "; ".join(failure.reason for failure in result.failed)
        super().__init__(
            f"{len(result.failed)} of {len(result.failed) + len(result.succeeded)} "
            f"batch items failed: {reasons}"
        )


__all__ = [
    "RecordEngineError",
    "UnknownEntityType",
    "TransportFailure",
    "ValidationFailure",
    "PartialBatchFailure",
]
