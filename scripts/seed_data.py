"""
Seed script for the CRM Record Engine.

Implements deterministic pseudo-random CRM payload generation and writes the
payloads through the repository's batch API, so every row passes the same
validation and mapping as interactive writes. Companies are created first and
their ids feed the contact and deal lookups.
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import typer

from record_engine.config import get_settings
from record_engine.domain.models import BatchResult
from record_engine.domain.registry import DEAL_STAGES, INDUSTRIES
from record_engine.infrastructure.db_factory import create_record_store
from record_engine.repository import RecordRepository
from record_engine.utils.logging import configure_logging

app = typer.Typer(help="Generate synthetic CRM records and write them through the repository.")

FIRST_NAMES = ["Ada", "Grace", "Alan", "Katherine", "Linus", "Margaret", "Dennis", "Barbara"]
LAST_NAMES = ["Lovelace", "Hopper", "Turing", "Johnson", "Torvalds", "Hamilton", "Ritchie", "Liskov"]
COMPANY_WORDS = ["Acme", "Globex", "Initech", "Umbrella", "Stark", "Wayne", "Hooli", "Vandelay"]
COMPANY_SUFFIXES = ["Corporation", "Labs", "Holdings", "Systems", "Group"]
POSITIONS = ["CEO", "CTO", "Director", "Engineer", "Account Manager", "Buyer"]
CITIES = [("San Francisco", "USA"), ("London", "UK"), ("Berlin", "Germany"), ("Austin", "USA")]
ACTIVITY_TYPES = ["call", "email", "meeting", "task", "note"]
LEAD_TAGS = ["hot", "cold", "referral", "webinar", "trade-show"]


def _person(rng: random.Random) -> Dict[str, str]:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return {
        "first_name": first,
        "last_name": last,
        "email": f"{first.lower()}.{last.lower()}{rng.randint(1, 9999)}@example.com",
        "phone": f"+1 555 {rng.randint(1000, 9999)}",
        "position": rng.choice(POSITIONS),
    }


def build_companies(rng: random.Random, count: int) -> List[Dict[str, Any]]:
    payloads = []
    for _ in range(count):
        word = rng.choice(COMPANY_WORDS)
        city, country = rng.choice(CITIES)
        payloads.append(
            {
                "name": f"{word} {rng.choice(COMPANY_SUFFIXES)}",
                "industry": rng.choice(INDUSTRIES),
                "website": f"https://{word.lower()}{rng.randint(1, 999)}.example",
                "phone": f"+1 555 {rng.randint(1000, 9999)}",
                "address": f"{rng.randint(1, 400)} Main St",
                "city": city,
                "country": country,
            }
        )
    return payloads


def build_contacts(rng: random.Random, count: int, company_ids: List[int]) -> List[Dict[str, Any]]:
    payloads = []
    for _ in range(count):
        payload: Dict[str, Any] = _person(rng)
        payload["company_id"] = rng.choice(company_ids) if company_ids else None
        payloads.append(payload)
    return payloads


def build_deals(
    rng: random.Random, count: int, contact_ids: List[int], company_ids: List[int]
) -> List[Dict[str, Any]]:
    stages = list(DEAL_STAGES)
    today = date.today()
    payloads = []
    for i in range(count):
        stage = rng.choice(stages)
        close = today + timedelta(days=rng.randint(-90, 180))
        payloads.append(
            {
                "title": f"Deal {i + 1:04d}",
                "value": round(rng.uniform(500, 100_000), 2),
                "stage": stage,
                "contact_id": rng.choice(contact_ids) if contact_ids else None,
                "company_id": rng.choice(company_ids) if company_ids else None,
                "expected_close_date": close.isoformat(),
                "probability": DEAL_STAGES[stage],
            }
        )
    return payloads


def build_leads(rng: random.Random, count: int) -> List[Dict[str, Any]]:
    payloads = []
    for _ in range(count):
        payload: Dict[str, Any] = _person(rng)
        payload["company"] = f"{rng.choice(COMPANY_WORDS)} {rng.choice(COMPANY_SUFFIXES)}"
        payload["tags"] = ",".join(sorted(rng.sample(LEAD_TAGS, k=rng.randint(1, 2))))
        payloads.append(payload)
    return payloads


def build_activities(rng: random.Random, count: int, deal_ids: List[int]) -> List[Dict[str, Any]]:
    payloads = []
    for _ in range(count):
        kind = rng.choice(ACTIVITY_TYPES)
        payloads.append(
            {
                "name": f"{kind.capitalize()} follow-up",
                "type": kind,
                "description": f"Auto-generated {kind}",
                "entity_type": "deals",
                "entity_id": rng.choice(deal_ids) if deal_ids else None,
            }
        )
    return payloads


async def seed_repository(
    repo: RecordRepository, count: int = 20, seed: int = 42
) -> Dict[str, BatchResult]:
    """
    Write `count` records per entity type, reusing created ids for lookups.

    Returns
    -------
    dict
        Batch result per entity type, in creation order.
    """
    rng = random.Random(seed)
    results: Dict[str, BatchResult] = {}

    results["companies"] = await repo.create_batch("companies", build_companies(rng, count))
    company_ids = [record.id for record in results["companies"].succeeded]

    results["contacts"] = await repo.create_batch(
        "contacts", build_contacts(rng, count, company_ids)
    )
    contact_ids = [record.id for record in results["contacts"].succeeded]

    results["deals"] = await repo.create_batch(
        "deals", build_deals(rng, count, contact_ids, company_ids)
    )
    deal_ids = [record.id for record in results["deals"].succeeded]

    results["leads"] = await repo.create_batch("leads", build_leads(rng, count))
    results["activities"] = await repo.create_batch(
        "activities", build_activities(rng, count, deal_ids)
    )
    return results


async def _run(count: int, seed: int) -> Dict[str, BatchResult]:
    async with RecordRepository(create_record_store) as repo:
        return await seed_repository(repo, count=count, seed=seed)


@app.command()
def main(
    count: int = typer.Option(
        20,
        "--count",
        "-n",
        min=1,
        help="Records to create per entity type.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    json_logs: Optional[bool] = typer.Option(
        None,
        "--json-logs/--text-logs",
        help="Override LOG_JSON for this run.",
    ),
) -> None:
    """
    Generate synthetic CRM records and create them in the configured store.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_logs=settings.log_json if json_logs is None else json_logs,
    )
    start = time.perf_counter()
    typer.echo(f"Seeding {count} record(s) per entity into '{settings.store_backend}' (seed={seed})")
    results = asyncio.run(_run(count, seed))
    for entity_type, result in results.items():
        typer.echo(f"{entity_type}: {len(result.succeeded)} created, {len(result.failed)} failed")
    typer.echo(f"Seed completed in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
