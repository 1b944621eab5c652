from __future__ import annotations

import asyncio
import sys
from typing import List, Optional

import typer

from record_engine.config import get_settings
from record_engine.dashboard import load_dashboard
from record_engine.domain.errors import UnknownEntityType
from record_engine.domain.models import Record, SortDirection
from record_engine.domain.registry import get_schema, registered_entity_types
from record_engine.infrastructure.db_factory import create_record_store, ensure_schema
from record_engine.reporter import (
    print_tables,
    render_batch_result,
    render_dashboard,
    render_records,
)
from record_engine.repository import RecordRepository
from record_engine.utils.logging import configure_logging
from record_engine.view import ViewState

app = typer.Typer(help="CRM Record Engine CLI.")


def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


async def _load_view(
    entity_type: str, state: ViewState, resolve: bool
) -> List[Record]:
    schema = get_schema(entity_type)
    async with RecordRepository(create_record_store) as repo:
        records = await repo.list_all(entity_type)
        if resolve:
            records = await repo.resolve_lookups(entity_type, records)
    return state.apply(records, schema)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"store={settings.store_backend} table={settings.store_table} "
        f"pool={settings.store_pool_min_size}..{settings.store_pool_max_size}"
    )


@app.command()
def entities() -> None:
    """
    List registered entity types and their fields.
    """
    for name in registered_entity_types():
        schema = get_schema(name)
        typer.echo(f"{name}: {', '.join(schema.keys)}")


@app.command("init-db")
def init_db(
    dsn: Optional[str] = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
) -> None:
    """
    Create the record table in PostgreSQL if it does not exist.
    """
    _configure()
    table = ensure_schema(dsn=dsn)
    typer.echo(f"Record table '{table}' is ready.")


@app.command("list")
def list_records(
    entity_type: str = typer.Argument(..., help="Entity type, e.g. deals or contacts."),
    query: str = typer.Option("", "--query", "-q", help="Case-insensitive search text."),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Field key to sort by."),
    desc: bool = typer.Option(False, "--desc", help="Sort descending."),
    resolve: bool = typer.Option(
        True, "--resolve/--no-resolve", help="Resolve lookup ids to display names."
    ),
) -> None:
    """
    Show one collection, filtered and sorted, as a formatted table.
    """
    _configure()
    schema = get_schema(entity_type)
    if sort is not None and schema.field(sort) is None:
        raise typer.BadParameter(
            f"Unknown field '{sort}'. Available: {', '.join(schema.keys)}", param_hint="--sort"
        )
    state = ViewState(
        query=query,
        sort_key=sort,
        sort_direction=SortDirection.DESC if desc else SortDirection.ASC,
    )
    records = asyncio.run(_load_view(entity_type, state, resolve))
    print_tables([render_records(schema, records, sort_key=sort, descending=desc)])


@app.command()
def delete(
    entity_type: str = typer.Argument(..., help="Entity type, e.g. deals or contacts."),
    ids: List[int] = typer.Argument(..., help="Record ids to delete."),
) -> None:
    """
    Delete records by id and report the outcome of each.
    """
    _configure()
    get_schema(entity_type)

    async def _run():
        async with RecordRepository(create_record_store) as repo:
            return await repo.delete_batch(entity_type, ids)

    result = asyncio.run(_run())
    print_tables([render_batch_result("delete", result)])
    if result.failed:
        raise typer.Exit(code=1)


@app.command()
def seed(
    count: int = typer.Option(20, "--count", "-n", min=1, help="Records per entity type."),
    rng_seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
) -> None:
    """
    Create synthetic records for every entity type.
    """
    from scripts.seed_data import seed_repository

    _configure()

    async def _run():
        async with RecordRepository(create_record_store) as repo:
            return await seed_repository(repo, count=count, seed=rng_seed)

    results = asyncio.run(_run())
    print_tables([render_batch_result(f"seed {name}", result) for name, result in results.items()])


@app.command()
def dashboard() -> None:
    """
    Show revenue, record counts and win rate.
    """
    _configure()

    async def _run():
        async with RecordRepository(create_record_store) as repo:
            return await load_dashboard(repo)

    print_tables([render_dashboard(asyncio.run(_run()))])


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except UnknownEntityType as exc:
        typer.echo(str(exc), err=True)
        sys.exit(2)


if __name__ == "__main__":
    main()
