"""
Value formatter: raw field value + semantic type to display value.

All functions here are pure and never raise on malformed input. `None` renders
as the display placeholder for every semantic type. Lookup references must be
resolved upstream (see `RecordRepository.resolve_lookups`); the formatter only
reads the name already carried by the value.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union

from record_engine.config import DEFAULT_DATE_FORMAT, get_settings, render_date_pattern
from record_engine.domain.models import (
    Badge,
    BadgeClassifier,
    LookupReference,
    Record,
    Schema,
    SemanticType,
)
from record_engine.utils.logging import get_logger

log = get_logger(__name__)

PLACEHOLDER = "—"

DisplayValue = Union[str, Badge]


def _placeholder() -> str:
    return get_settings().display_placeholder or PLACEHOLDER


def lookup_name(value: Any) -> Optional[str]:
    """
    Return the name carried by a lookup reference, or None if `value` is not one.

    Accepts `LookupReference` instances and raw store objects shaped like
    `{"Id": 7, "Name": "Acme"}` (either casing).
    """
    if isinstance(value, LookupReference):
        return value.name or ""
    if isinstance(value, Mapping):
        has_id = "id" in value or "Id" in value
        name = value.get("name", value.get("Name"))
        if has_id and ("name" in value or "Name" in value):
            return "" if name is None else str(name)
    return None


def to_number(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings to float; anything else gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(Decimal(value.strip().replace(",", "")))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp (trailing `Z` accepted) into an aware datetime.

    Naive values are taken as UTC. Invalid input returns None.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def canonical_text(value: Any) -> str:
    """
    Canonical string form of a raw value, used for display and search.

    Integral floats lose their trailing `.0`; lookup references give their name.
    """
    if value is None:
        return ""
    name = lookup_name(value)
    if name is not None:
        return name
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def format_currency(
    value: Any, symbol: Optional[str] = None, decimals: Optional[int] = None
) -> str:
    if value is None:
        return _placeholder()
    number = to_number(value)
    if number is None:
        return canonical_text(value)
    settings = get_settings()
    symbol = settings.currency_symbol if symbol is None else symbol
    decimals = settings.currency_decimals if decimals is None else decimals
    sign = "-" if number < 0 else ""
    return f"{sign}{symbol}{abs(number):,.{decimals}f}"


def format_date(value: Any, date_format: Optional[str] = None) -> str:
    timestamp = parse_timestamp(value)
    if timestamp is None:
        return _placeholder()
    pattern = date_format or get_settings().date_format
    parts = (timestamp.year, timestamp.month, timestamp.day)
    try:
        return render_date_pattern(pattern, *parts)
    except (AttributeError, IndexError, KeyError, ValueError):
        log.warning("Unusable date pattern; using default", extra={"pattern": pattern})
        return render_date_pattern(DEFAULT_DATE_FORMAT, *parts)


def format_value(
    value: Any,
    semantic_type: Union[SemanticType, str],
    badge: Optional[BadgeClassifier] = None,
) -> DisplayValue:
    """
    Convert a raw field value into its display representation.

    Parameters
    ----------
    value : Any
        Raw field value as held by a `Record`.
    semantic_type : SemanticType | str
        Display category of the field; unknown categories render as text.
    badge : callable, optional
        Classifier mapping an enum value to a badge variant name.

    Returns
    -------
    str | Badge
        Display string, or a `Badge` renderable for enum-badge fields.
    """
    if value is None:
        return _placeholder()
    try:
        kind = SemanticType(semantic_type)
    except ValueError:
        kind = SemanticType.TEXT

    if kind is SemanticType.CURRENCY:
        return format_currency(value)
    if kind is SemanticType.DATE:
        return format_date(value)
    if kind is SemanticType.ENUM_BADGE:
        variant = badge(value) if badge is not None else "default"
        return Badge(text=canonical_text(value), variant=variant or "default")

    text = canonical_text(value)
    return text if text.strip() else _placeholder()


def format_record(record: Record, schema: Schema) -> Dict[str, DisplayValue]:
    """Render every schema field of one record, in schema order."""
    row: Dict[str, DisplayValue] = {}
    for spec in schema.fields:
        value = record.get(spec.key)
        display = format_value(value, spec.semantic_type, spec.badge)
        if spec.unit and to_number(value) is not None:
            display = f"{display}{spec.unit}"
        row[spec.key] = display
    return row


__all__ = [
    "DisplayValue",
    "PLACEHOLDER",
    "canonical_text",
    "format_currency",
    "format_date",
    "format_record",
    "format_value",
    "lookup_name",
    "parse_timestamp",
    "to_number",
]
