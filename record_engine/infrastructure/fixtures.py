"""
Store-shaped sample collections used to seed the in-memory store.

Rows use the record store's field names and lookup shape (`{"Id", "Name"}`),
so they pass through the same mapping as rows read from PostgreSQL.
"""

from __future__ import annotations

from typing import Any, Dict, List

_TS = "2024-01-15T09:30:00Z"

SAMPLE_COLLECTIONS: Dict[str, List[Dict[str, Any]]] = {
    "companies": [
        {"Id": 1, "Name": "Acme Corporation", "industry_c": "Technology",
         "website_c": "https://acme.example", "phone_c": "+1 555 0100",
         "address_c": "1 Market St", "city_c": "San Francisco", "country_c": "USA",
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 2, "Name": "Globex Health", "industry_c": "Healthcare",
         "website_c": "https://globex.example", "phone_c": "+44 20 7946 0000",
         "address_c": "22 Baker St", "city_c": "London", "country_c": "UK",
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 3, "Name": "Initech Finance", "industry_c": "Finance",
         "website_c": None, "phone_c": None, "address_c": None,
         "city_c": "Austin", "country_c": "USA",
         "CreatedOn": _TS, "ModifiedOn": _TS},
    ],
    "contacts": [
        {"Id": 1, "first_name_c": "Ada", "last_name_c": "Lovelace",
         "email_c": "ada@acme.example", "phone_c": "+1 555 0101",
         "company_id_c": {"Id": 1, "Name": "Acme Corporation"}, "position_c": "CTO",
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 2, "first_name_c": "Grace", "last_name_c": "Hopper",
         "email_c": "grace@globex.example", "phone_c": None,
         "company_id_c": {"Id": 2, "Name": "Globex Health"}, "position_c": "Director",
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 3, "first_name_c": "Alan", "last_name_c": "Turing",
         "email_c": "alan@initech.example", "phone_c": "+1 555 0303",
         "company_id_c": 3, "position_c": None,
         "CreatedOn": _TS, "ModifiedOn": _TS},
    ],
    "deals": [
        {"Id": 1, "title_c": "Acme platform renewal", "value_c": 45000,
         "stage_c": "Closed Won", "contact_id_c": {"Id": 1, "Name": "Ada Lovelace"},
         "company_id_c": {"Id": 1, "Name": "Acme Corporation"},
         "expected_close_date_c": "2024-03-31T00:00:00Z", "probability_c": 100,
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 2, "title_c": "Globex pilot", "value_c": 12000, "stage_c": "Proposal",
         "contact_id_c": {"Id": 2, "Name": "Grace Hopper"},
         "company_id_c": {"Id": 2, "Name": "Globex Health"},
         "expected_close_date_c": "2024-05-15T00:00:00Z", "probability_c": 75,
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 3, "title_c": "Initech ledger migration", "value_c": 30000,
         "stage_c": "Closed Lost", "contact_id_c": 3, "company_id_c": 3,
         "expected_close_date_c": None, "probability_c": 0,
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 4, "title_c": "Acme analytics add-on", "value_c": 8000,
         "stage_c": "Negotiation", "contact_id_c": 1, "company_id_c": 1,
         "expected_close_date_c": "2024-06-30T00:00:00Z", "probability_c": 90,
         "CreatedOn": _TS, "ModifiedOn": _TS},
    ],
    "leads": [
        {"Id": 1, "first_name_c": "Katherine", "last_name_c": "Johnson",
         "email_c": "kj@orbit.example", "phone_c": None, "company_c": "Orbit Labs",
         "position_c": "Engineer", "Tags": "inbound",
         "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 2, "first_name_c": "Margaret", "last_name_c": "Hamilton",
         "email_c": "mh@apollo.example", "phone_c": "+1 555 0404",
         "company_c": "Apollo Systems", "position_c": "Lead Developer", "Tags": None,
         "CreatedOn": _TS, "ModifiedOn": _TS},
    ],
    "activities": [
        {"Id": 1, "Name": "Kickoff call", "type_c": "call",
         "description_c": "Discussed renewal scope", "entity_type_c": "deals",
         "entity_id_c": 1, "Tags": None, "CreatedOn": _TS, "ModifiedOn": _TS},
        {"Id": 2, "Name": "Send pricing", "type_c": "email",
         "description_c": "Pilot pricing sheet", "entity_type_c": "deals",
         "entity_id_c": 2, "Tags": "pricing", "CreatedOn": _TS, "ModifiedOn": _TS},
    ],
}


__all__ = ["SAMPLE_COLLECTIONS"]
