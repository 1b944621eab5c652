from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from record_engine.domain.models import AggregateSnapshot, Badge, BatchResult, Record, Schema
from record_engine.engines.aggregation import win_rate_variant
from record_engine.engines.formatter import DisplayValue, format_currency, format_record

# Badge variant to rich style.
_VARIANT_STYLES: Dict[str, str] = {
    "default": "white",
    "info": "cyan",
    "primary": "blue",
    "warning": "yellow",
    "success": "green",
    "danger": "red",
}


def _cell(value: DisplayValue) -> Text:
    if isinstance(value, Badge):
        return Text(value.text, style=f"bold {_VARIANT_STYLES.get(value.variant, 'white')}")
    return Text(value)


def render_records(
    schema: Schema,
    records: Sequence[Record],
    sort_key: Optional[str] = None,
    descending: bool = False,
    title: Optional[str] = None,
) -> Table:
    """
    Build a rich table of formatted cells, one column per schema field.

    The active sort column is marked with an arrow in its header.
    """
    table = Table(
        title=title or schema.label,
        box=box.ROUNDED,
        caption=f"{len(records)} record(s)",
    )
    table.add_column("Id", justify="right", style="dim")
    for spec in schema.fields:
        header = spec.label
        if spec.key == sort_key:
            header = f"{header} {'▼' if descending else '▲'}"
        justify = "right" if spec.semantic_type.value in ("currency", "number") else "left"
        table.add_column(header, justify=justify)

    for record in records:
        row = format_record(record, schema)
        table.add_row(str(record.id), *(_cell(row[spec.key]) for spec in schema.fields))
    return table


def render_dashboard(snapshot: AggregateSnapshot) -> Table:
    table = Table(title="CRM Dashboard", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    rate_style = _VARIANT_STYLES[win_rate_variant(snapshot.win_rate)]
    table.add_row("Total Revenue", format_currency(snapshot.total_revenue, decimals=0))
    table.add_row("Active Deals", f"{snapshot.total_deals:,}")
    table.add_row("Total Leads", f"{snapshot.total_leads:,}")
    table.add_row("Total Contacts", f"{snapshot.total_contacts:,}")
    table.add_row("Total Companies", f"{snapshot.total_companies:,}")
    table.add_row("Win Rate", Text(f"{snapshot.win_rate}%", style=rate_style))
    return table


def render_batch_result(operation: str, result: BatchResult) -> Table:
    table = Table(
        title=f"{operation.capitalize()} batch",
        box=box.ROUNDED,
        caption=f"{len(result.succeeded)} succeeded, {len(result.failed)} failed",
    )
    table.add_column("Outcome")
    table.add_column("Detail")
    for record in result.succeeded:
        table.add_row(Text("ok", style="green"), f"id={record.id}")
    for failure in result.failed:
        table.add_row(Text(failure.kind.value, style="red"), failure.reason)
    return table


def print_tables(tables: List[Table], console: Optional[Console] = None) -> None:
    console = console or Console()
    for table in tables:
        console.print(table)


__all__ = [
    "print_tables",
    "render_batch_result",
    "render_dashboard",
    "render_records",
]
