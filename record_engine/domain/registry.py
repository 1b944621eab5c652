"""
Schema registry for the five CRM entity types.

Schemas are defined once at import time and never mutated. Each field carries
the record store's name for it (`storage_key`), so translation between store
payloads and schema keys happens only at the repository boundary.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping

from record_engine.domain.errors import UnknownEntityType
from record_engine.domain.models import FieldSpec, Schema, SemanticType

CLOSED_WON = "Closed Won"
CLOSED_LOST = "Closed Lost"

# Default probability offered for each pipeline stage.
DEAL_STAGES: Mapping[str, int] = MappingProxyType(
    {
        "Lead": 25,
        "Qualified": 50,
        "Proposal": 75,
        "Negotiation": 90,
        CLOSED_WON: 100,
        CLOSED_LOST: 0,
    }
)

INDUSTRIES = (
    "Technology",
    "Healthcare",
    "Finance",
    "Manufacturing",
    "Education",
    "Retail",
    "Real Estate",
    "Consulting",
    "Other",
)

_STAGE_VARIANTS = {
    "Lead": "default",
    "Qualified": "info",
    "Proposal": "warning",
    "Negotiation": "primary",
    CLOSED_WON: "success",
    CLOSED_LOST: "danger",
}

_ACTIVITY_VARIANTS = {
    "call": "info",
    "email": "primary",
    "meeting": "warning",
    "task": "success",
    "note": "default",
}


def stage_variant(stage: Any) -> str:
    if not isinstance(stage, str):
        return "default"
    return _STAGE_VARIANTS.get(stage, "default")


def activity_variant(activity_type: Any) -> str:
    if not isinstance(activity_type, str):
        return "default"
    return _ACTIVITY_VARIANTS.get(activity_type.lower(), "default")


CONTACTS = Schema(
    entity_type="contacts",
    label="Contacts",
    display_keys=("first_name", "last_name"),
    fields=(
        FieldSpec(key="first_name", label="First Name", storage_key="first_name_c",
                  searchable=True, required=True),
        FieldSpec(key="last_name", label="Last Name", storage_key="last_name_c",
                  searchable=True, required=True),
        FieldSpec(key="email", label="Email", storage_key="email_c",
                  searchable=True, required=True),
        FieldSpec(key="phone", label="Phone", storage_key="phone_c",
                  sortable=False, searchable=True),
        FieldSpec(key="company_id", label="Company", storage_key="company_id_c",
                  semantic_type=SemanticType.LOOKUP, sortable=False, numeric=True,
                  target="companies"),
        FieldSpec(key="position", label="Position", storage_key="position_c",
                  sortable=False, searchable=True),
    ),
)

COMPANIES = Schema(
    entity_type="companies",
    label="Companies",
    display_keys=("name",),
    fields=(
        FieldSpec(key="name", label="Company Name", storage_key="Name",
                  searchable=True, required=True),
        FieldSpec(key="industry", label="Industry", storage_key="industry_c",
                  searchable=True, required=True),
        FieldSpec(key="website", label="Website", storage_key="website_c",
                  sortable=False, searchable=True),
        FieldSpec(key="phone", label="Phone", storage_key="phone_c", sortable=False),
        FieldSpec(key="address", label="Address", storage_key="address_c", sortable=False),
        FieldSpec(key="city", label="City", storage_key="city_c", searchable=True),
        FieldSpec(key="country", label="Country", storage_key="country_c", searchable=True),
    ),
)

DEALS = Schema(
    entity_type="deals",
    label="Deals",
    display_keys=("title",),
    fields=(
        FieldSpec(key="title", label="Deal Title", storage_key="title_c",
                  searchable=True, required=True),
        FieldSpec(key="value", label="Value", storage_key="value_c",
                  semantic_type=SemanticType.CURRENCY, searchable=True, required=True,
                  numeric=True),
        FieldSpec(key="stage", label="Stage", storage_key="stage_c",
                  semantic_type=SemanticType.ENUM_BADGE, searchable=True, required=True,
                  badge=stage_variant),
        FieldSpec(key="contact_id", label="Contact", storage_key="contact_id_c",
                  semantic_type=SemanticType.LOOKUP, sortable=False, numeric=True,
                  target="contacts"),
        FieldSpec(key="company_id", label="Company", storage_key="company_id_c",
                  semantic_type=SemanticType.LOOKUP, sortable=False, numeric=True,
                  target="companies"),
        FieldSpec(key="expected_close_date", label="Expected Close",
                  storage_key="expected_close_date_c", semantic_type=SemanticType.DATE),
        FieldSpec(key="probability", label="Probability", storage_key="probability_c",
                  semantic_type=SemanticType.NUMBER, numeric=True, unit="%"),
    ),
)

LEADS = Schema(
    entity_type="leads",
    label="Leads",
    display_keys=("first_name", "last_name"),
    fields=(
        FieldSpec(key="first_name", label="First Name", storage_key="first_name_c",
                  searchable=True, required=True),
        FieldSpec(key="last_name", label="Last Name", storage_key="last_name_c",
                  searchable=True, required=True),
        FieldSpec(key="email", label="Email", storage_key="email_c",
                  searchable=True, required=True),
        FieldSpec(key="phone", label="Phone", storage_key="phone_c", sortable=False),
        FieldSpec(key="company", label="Company", storage_key="company_c", searchable=True),
        FieldSpec(key="position", label="Position", storage_key="position_c", sortable=False),
        FieldSpec(key="tags", label="Tags", storage_key="Tags", sortable=False),
    ),
)

ACTIVITIES = Schema(
    entity_type="activities",
    label="Activities",
    display_keys=("name",),
    fields=(
        FieldSpec(key="name", label="Name", storage_key="Name", searchable=True,
                  required=True),
        FieldSpec(key="type", label="Type", storage_key="type_c",
                  semantic_type=SemanticType.ENUM_BADGE, searchable=True,
                  badge=activity_variant),
        FieldSpec(key="description", label="Description", storage_key="description_c",
                  sortable=False, searchable=True),
        FieldSpec(key="entity_type", label="Entity Type", storage_key="entity_type_c",
                  searchable=True),
        FieldSpec(key="entity_id", label="Entity", storage_key="entity_id_c",
                  semantic_type=SemanticType.NUMBER, sortable=False, searchable=True,
                  numeric=True),
        FieldSpec(key="tags", label="Tags", storage_key="Tags", sortable=False,
                  searchable=True),
        FieldSpec(key="created_on", label="Created", storage_key="CreatedOn",
                  semantic_type=SemanticType.DATE),
    ),
)

_SCHEMAS: Mapping[str, Schema] = MappingProxyType(
    {schema.entity_type: schema for schema in (CONTACTS, COMPANIES, DEALS, LEADS, ACTIVITIES)}
)


def get_schema(entity_type: str) -> Schema:
    """
    Return the schema registered for `entity_type`.

    Raises
    ------
    UnknownEntityType
        If no schema is registered under that name.
    """
    try:
        return _SCHEMAS[entity_type]
    except KeyError:
        raise UnknownEntityType(entity_type, _SCHEMAS.keys()) from None


def registered_entity_types() -> List[str]:
    """List registered entity type names."""
    return sorted(_SCHEMAS.keys())


__all__ = [
    "ACTIVITIES",
    "CLOSED_LOST",
    "CLOSED_WON",
    "COMPANIES",
    "CONTACTS",
    "DEALS",
    "DEAL_STAGES",
    "INDUSTRIES",
    "LEADS",
    "activity_variant",
    "get_schema",
    "registered_entity_types",
    "stage_variant",
]
