from __future__ import annotations

from datetime import datetime, timezone

import pytest

from record_engine.domain.models import Badge, LookupReference, Record, SemanticType
from record_engine.domain.registry import DEALS, stage_variant
from record_engine.engines.formatter import (
    PLACEHOLDER,
    canonical_text,
    format_currency,
    format_date,
    format_record,
    format_value,
    parse_timestamp,
    to_number,
)


@pytest.mark.parametrize("semantic_type", list(SemanticType))
def test_none_renders_placeholder_for_every_type(semantic_type: SemanticType) -> None:
    assert format_value(None, semantic_type) == PLACEHOLDER


def test_currency_groups_thousands_with_two_decimals() -> None:
    assert format_value(45000, SemanticType.CURRENCY) == "$45,000.00"
    assert format_value("1234.5", "currency") == "$1,234.50"


def test_negative_currency_carries_leading_minus() -> None:
    assert format_currency(-1500) == "-$1,500.00"


def test_currency_respects_settings(monkeypatch) -> None:
    monkeypatch.setenv("CURRENCY_SYMBOL", "€")
    monkeypatch.setenv("CURRENCY_DECIMALS", "0")

    assert format_currency(1999.6) == "€2,000"


def test_non_numeric_currency_falls_back_to_text() -> None:
    assert format_value("n/a", SemanticType.CURRENCY) == "n/a"


def test_lookup_object_renders_name() -> None:
    assert format_value({"id": 7, "name": "Acme"}, SemanticType.LOOKUP) == "Acme"
    assert format_value({"Id": 7, "Name": "Acme"}, SemanticType.LOOKUP) == "Acme"
    assert format_value(LookupReference(id=7, name="Acme"), SemanticType.LOOKUP) == "Acme"


def test_lookup_without_name_renders_placeholder() -> None:
    assert format_value(LookupReference(id=7), SemanticType.LOOKUP) == PLACEHOLDER
    assert format_value({"Id": 7, "Name": ""}, SemanticType.LOOKUP) == PLACEHOLDER


def test_bare_lookup_id_renders_canonical_string() -> None:
    assert format_value(7, SemanticType.LOOKUP) == "7"


def test_date_renders_short_date_not_raw_timestamp() -> None:
    rendered = format_value("2024-01-15T00:00:00Z", SemanticType.DATE)

    assert rendered == "1/15/2024"
    assert rendered != "2024-01-15T00:00:00Z"


def test_invalid_date_renders_placeholder() -> None:
    assert format_value("not a date", SemanticType.DATE) == PLACEHOLDER
    assert format_date(12) == PLACEHOLDER


def test_date_pattern_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("DATE_FORMAT", "{year}-{mm}-{dd}")

    assert format_date("2024-03-05") == "2024-03-05"


def test_unusable_date_pattern_falls_back_to_default() -> None:
    assert format_date("2024-03-05", date_format="{weekday}") == "3/5/2024"


def test_enum_badge_uses_classifier() -> None:
    badge = format_value("Closed Won", SemanticType.ENUM_BADGE, stage_variant)

    assert badge == Badge(text="Closed Won", variant="success")


def test_enum_badge_without_classifier_uses_default_variant() -> None:
    badge = format_value("anything", SemanticType.ENUM_BADGE)

    assert isinstance(badge, Badge)
    assert badge.variant == "default"


def test_text_canonical_forms() -> None:
    assert format_value(True, SemanticType.TEXT) == "true"
    assert format_value(False, SemanticType.TEXT) == "false"
    assert format_value(3.0, SemanticType.NUMBER) == "3"
    assert format_value(2.5, SemanticType.NUMBER) == "2.5"
    assert format_value("   ", SemanticType.TEXT) == PLACEHOLDER


def test_unknown_semantic_type_renders_as_text() -> None:
    assert format_value("hello", "sparkline") == "hello"


def test_to_number_rejects_bools_and_non_finite() -> None:
    assert to_number(True) is None
    assert to_number(float("nan")) is None
    assert to_number("1,250.5") == 1250.5
    assert to_number("abc") is None


def test_parse_timestamp_treats_naive_as_utc() -> None:
    parsed = parse_timestamp("2024-01-15T09:30:00")

    assert parsed == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
    assert parse_timestamp("") is None


def test_canonical_text_of_lookup_is_its_name() -> None:
    assert canonical_text(LookupReference(id=1, name="Ada Lovelace")) == "Ada Lovelace"


def test_format_record_renders_each_schema_field() -> None:
    record = Record(
        id=1,
        fields={
            "title": "Renewal",
            "value": 45000,
            "stage": "Proposal",
            "contact_id": LookupReference(id=2, name="Grace Hopper"),
            "company_id": None,
            "expected_close_date": "2024-03-31T00:00:00Z",
            "probability": 75,
        },
    )

    row = format_record(record, DEALS)

    assert list(row) == DEALS.keys
    assert row["value"] == "$45,000.00"
    assert row["stage"] == Badge(text="Proposal", variant="warning")
    assert row["contact_id"] == "Grace Hopper"
    assert row["company_id"] == PLACEHOLDER
    assert row["expected_close_date"] == "3/31/2024"
    assert row["probability"] == "75%"


def test_format_record_tolerates_malformed_stage() -> None:
    row = format_record(Record(id=1, fields={"stage": ["Lead"]}), DEALS)

    assert row["stage"] == Badge(text="['Lead']", variant="default")
    assert stage_variant({"stage": "Lead"}) == "default"
