"""
Shared CLI helpers: configuration bootstrap and record rendering.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from househunt.core.config.loader import ConfigError, load_app_config
from househunt.core.config.models import AppConfig
from househunt.core.logging import setup_logging

if TYPE_CHECKING:
    from househunt.core.extract import ListingRecord
    from househunt.persistence.models import Listing


console = Console()
err_console = Console(stderr=True)


def bootstrap(config_path: Path | None = None, *, database: bool = False) -> AppConfig:
    """Load configuration and set up logging (and the database engine).

    Exits with status 1 on an invalid configuration file.
    """
    try:
        config = load_app_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )

    if database:
        from househunt.persistence.db import init_db
        init_db(config.database.url, echo=config.database.echo)

    return config


def _format_value(name: str, value: object) -> str:
    if value is None:
        return "[dim]-[/dim]"
    if name in ("price", "tax_assessed_value", "annual_tax_amount", "price_per_sqft"):
        return f"${value:,}"
    if name == "sqft":
        return f"{value:,}"
    return escape(str(value))


def record_table(record: ListingRecord, title: str | None = None) -> Table:
    """Render an extracted record as a field/value/source table."""
    from househunt.core.extract import RECORD_FIELDS

    table = Table(title=title or record.source_url or "Listing", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for name in RECORD_FIELDS:
        table.add_row(name, _format_value(name, getattr(record, name)), record.sources.get(name, ""))

    return table


def print_record(record: ListingRecord, output_format: str = "table") -> None:
    """Print a record as a table or JSON."""
    if output_format == "json":
        console.print_json(json.dumps(record.to_dict(camel_case=True)))
        return
    console.print(record_table(record))


def listing_to_dict(listing: Listing) -> dict[str, object]:
    """Serialize a stored listing, annotations included."""
    from househunt.core.extract import RECORD_FIELDS

    data: dict[str, object] = {"id": listing.id, "source_url": listing.source_url}
    for name in RECORD_FIELDS:
        data[name] = getattr(listing, name)
    data.update(
        {
            "lat": listing.lat,
            "lng": listing.lng,
            "visited": listing.visited,
            "sentiment": listing.sentiment,
            "likes": list(listing.likes or []),
            "dislikes": list(listing.dislikes or []),
            "deal_breakers": list(listing.deal_breakers or []),
            "notes": listing.notes,
            "created_at": listing.created_at.isoformat() if listing.created_at else None,
        }
    )
    return data
