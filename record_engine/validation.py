"""
Payload validation and numeric coercion applied before a batch is submitted.

`validate_payload` returns a cleaned copy keyed by schema keys or raises
`ValidationFailure` for the first offending field. The repository catches the
failure and reports it against that one batch item.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union

from record_engine.domain.errors import ValidationFailure
from record_engine.domain.models import FieldSpec, LookupReference, Schema, SemanticType
from record_engine.engines.formatter import parse_timestamp, to_number
from record_engine.utils.logging import get_logger

log = get_logger(__name__)

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_URL_RE = re.compile(r"^https?://.+")

Number = Union[int, float]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_numeric(spec: FieldSpec, value: Any) -> Optional[Number]:
    """
    Coerce a declared-numeric field to int or float.

    Lookup fields and integral values become int; blank values become None.

    Raises
    ------
    ValidationFailure
        If the value cannot be read as a number, or a lookup id is not integral.
    """
    if _is_blank(value):
        return None
    if isinstance(value, LookupReference):
        return value.id
    if isinstance(value, Mapping) and ("Id" in value or "id" in value):
        value = value.get("Id", value.get("id"))
    number = to_number(value)
    if number is None:
        raise ValidationFailure(spec.key, f"'{value}' is not a number")
    if spec.semantic_type is SemanticType.LOOKUP:
        if not number.is_integer() or number <= 0:
            raise ValidationFailure(spec.key, f"'{value}' is not a valid record id")
        return int(number)
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool) and number.is_integer():
        return int(number)
    if isinstance(value, str) and number.is_integer() and "." not in value:
        return int(number)
    return number


def _check_rules(spec: FieldSpec, value: Any) -> None:
    if value is None:
        return
    if spec.key == "email" and not _EMAIL_RE.search(str(value)):
        raise ValidationFailure(spec.key, "email is invalid")
    if spec.key == "website" and not _URL_RE.match(str(value)):
        raise ValidationFailure(
            spec.key, "website must be a valid URL (include http:// or https://)"
        )
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if is_number and spec.semantic_type is SemanticType.CURRENCY and value <= 0:
        raise ValidationFailure(spec.key, "value must be greater than 0")
    if is_number and spec.unit == "%" and not 0 <= value <= 100:
        raise ValidationFailure(spec.key, "must be between 0 and 100")
    if spec.semantic_type is SemanticType.DATE and parse_timestamp(value) is None:
        raise ValidationFailure(spec.key, f"'{value}' is not an ISO-8601 date")


def validate_payload(
    schema: Schema, payload: Mapping[str, Any], partial: bool = False
) -> Dict[str, Any]:
    """
    Validate and coerce one create/update payload.

    Parameters
    ----------
    schema : Schema
        Schema of the target entity.
    payload : mapping
        Field values keyed by schema key. Unknown keys are dropped.
    partial : bool
        Update mode: only the keys present are checked, so required fields
        may be absent but not blank.

    Returns
    -------
    dict
        Cleaned payload in schema order.
    """
    if not isinstance(payload, Mapping):
        raise ValidationFailure("payload", "must be a mapping of field values")

    cleaned: Dict[str, Any] = {}
    for spec in schema.fields:
        if spec.key not in payload:
            if spec.required and not partial:
                raise ValidationFailure(spec.key, f"{spec.label} is required")
            continue
        value = payload[spec.key]
        if spec.required and _is_blank(value):
            raise ValidationFailure(spec.key, f"{spec.label} is required")
        if spec.numeric:
            value = coerce_numeric(spec, value)
        elif isinstance(value, str):
            value = value.strip() or None
        _check_rules(spec, value)
        cleaned[spec.key] = value

    unknown = sorted(set(payload) - set(schema.keys) - {"id", "Id"})
    if unknown:
        log.debug(
            "Dropping fields not in schema",
            extra={"entity": schema.entity_type, "fields": unknown},
        )
    return cleaned


__all__ = ["coerce_numeric", "validate_payload"]
