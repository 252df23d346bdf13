"""
Listing tracking commands: add, review, annotate and export.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from househunt.cli.common import bootstrap, console, err_console, listing_to_dict, record_table

app = typer.Typer(
    help="Manage tracked listings",
    no_args_is_help=True,
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to app.yaml (default: configs/app.yaml)",
)

EXPORT_FORMATS = ("csv", "json")


@app.command("add")
def add_listing(
    url: str = typer.Argument(..., help="Listing URL"),
    html: Optional[Path] = typer.Option(
        None,
        "--html",
        exists=True,
        dir_okay=False,
        help="Saved page to capture instead of fetching the URL",
    ),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Capture a listing and start tracking it.

    With --html the saved page is extracted in full; otherwise the URL is
    auto-filled from its slug plus a best-effort server-side fetch.

    Examples:
        househunt listings add https://www.zillow.com/homedetails/123-Main-St-Springfield-IL-62701/1234_zpid/
        househunt listings add <url> --html saved/listing.html
    """
    from househunt.core.backends import HttpBackend
    from househunt.core.extract import ListingExtractor
    from househunt.core.orchestrator import autofill, capture_page
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    config = bootstrap(config_path, database=True)
    extractor = ListingExtractor(config=config.extraction)

    if html:
        record = capture_page(html.read_bytes(), url, extractor)
    else:
        async def _run():
            async with HttpBackend(
                timeout=config.fetch.timeout_seconds,
                max_retries=config.fetch.max_retries,
                user_agent=config.fetch.user_agent,
            ) as backend:
                return await autofill(
                    url,
                    backend,
                    extractor,
                    allowed_hosts=config.fetch.allowed_hosts,
                    timeout=config.fetch.timeout_seconds,
                )

        result = asyncio.run(_run())
        record = result.record
        if result.message:
            err_console.print(f"[yellow]{result.message}[/yellow]")

    with get_session() as session:
        listing, created = ListingRepository(session).upsert_record(record)
        listing_id = listing.id

    console.print(record_table(record, title=f"Listing #{listing_id}"))
    if created:
        console.print(f"[green]OK[/green] Added listing #{listing_id}")
    else:
        console.print(f"[green]OK[/green] Updated listing #{listing_id}")


@app.command("list")
def list_listings(
    visited: bool = typer.Option(
        False,
        "--visited",
        help="Only show visited listings",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json, csv)",
    ),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """List tracked listings.

    Examples:
        househunt listings list --visited
        househunt listings list --format json
    """
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    bootstrap(config_path, database=True)

    with get_session() as session:
        listings = ListingRepository(session).list_listings(visited_only=visited)

        if not listings:
            console.print("[dim]No listings found.[/dim]")
            return

        if format == "json":
            import json
            console.print_json(json.dumps([listing_to_dict(item) for item in listings]))
            return

        if format == "csv":
            import csv
            import sys
            writer = csv.writer(sys.stdout)
            writer.writerow(["id", "address", "price", "beds", "baths", "sqft", "visited", "sentiment"])
            for item in listings:
                writer.writerow([
                    item.id,
                    item.address or "",
                    item.price or "",
                    item.beds or "",
                    item.baths or "",
                    item.sqft or "",
                    item.visited,
                    item.sentiment or "",
                ])
            return

        table = Table(title=f"Listings ({len(listings)})", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Address", max_width=50)
        table.add_column("Price", justify="right")
        table.add_column("Beds", justify="right")
        table.add_column("Baths", justify="right")
        table.add_column("Sqft", justify="right")
        table.add_column("Visited", justify="center")
        table.add_column("Sentiment", justify="center")

        for item in listings:
            sentiment_style = {
                "love": "green bold",
                "like": "green",
                "neutral": "dim",
                "dislike": "red",
            }.get(item.sentiment or "", "dim")

            table.add_row(
                str(item.id),
                escape(item.display_name),
                f"${item.price:,}" if item.price else "[dim]-[/dim]",
                str(item.beds) if item.beds is not None else "[dim]-[/dim]",
                f"{item.baths:g}" if item.baths is not None else "[dim]-[/dim]",
                f"{item.sqft:,}" if item.sqft else "[dim]-[/dim]",
                "[green]yes[/green]" if item.visited else "[dim]no[/dim]",
                f"[{sentiment_style}]{item.sentiment or '-'}[/{sentiment_style}]",
            )

        console.print(table)


@app.command("show")
def show_listing(
    id: int = typer.Argument(..., help="Listing ID"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Show a listing with all extracted fields and annotations."""
    from rich.panel import Panel

    from househunt.core.extract import RECORD_FIELDS
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    bootstrap(config_path, database=True)

    with get_session() as session:
        listing = ListingRepository(session).get_by_id(id)

        if not listing:
            err_console.print(f"[red]Listing not found:[/red] {id}")
            raise typer.Exit(1)

        lines = [f"[bold]URL:[/bold] {listing.source_url}", ""]
        for name in RECORD_FIELDS:
            value = getattr(listing, name)
            lines.append(f"[bold]{name.replace('_', ' ').title()}:[/bold] {escape(str(value)) if value is not None else '-'}")

        lines += [
            "",
            f"[bold]Visited:[/bold] {'yes' if listing.visited else 'no'}",
            f"[bold]Sentiment:[/bold] {listing.sentiment or '-'}",
            f"[bold]Likes:[/bold] {escape(', '.join(listing.likes or [])) or '-'}",
            f"[bold]Dislikes:[/bold] {escape(', '.join(listing.dislikes or [])) or '-'}",
            f"[bold]Deal-breakers:[/bold] {escape(', '.join(listing.deal_breakers or [])) or '-'}",
        ]

        console.print()
        console.print(Panel.fit("\n".join(lines), title=f"[bold cyan]Listing #{listing.id}[/bold cyan]", border_style="cyan"))

        if listing.notes:
            console.print()
            console.print(Panel(escape(listing.notes), title="[bold]Notes[/bold]", border_style="dim"))


@app.command("visit")
def visit_listing(
    id: int = typer.Argument(..., help="Listing ID"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Toggle a listing's visited flag."""
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    bootstrap(config_path, database=True)

    with get_session() as session:
        listing = ListingRepository(session).toggle_visited(id)
        if not listing:
            err_console.print(f"[red]Listing not found:[/red] {id}")
            raise typer.Exit(1)
        state = "visited" if listing.visited else "not visited"

    console.print(f"[green]OK[/green] Listing #{id} marked {state}")


@app.command("annotate")
def annotate_listing(
    id: int = typer.Argument(..., help="Listing ID"),
    like: List[str] = typer.Option([], "--like", help="Something you liked (repeatable)"),
    dislike: List[str] = typer.Option([], "--dislike", help="Something you disliked (repeatable)"),
    deal_breaker: List[str] = typer.Option([], "--deal-breaker", help="A deal-breaker (repeatable)"),
    remove_like: List[str] = typer.Option([], "--remove-like", help="Drop a recorded like (repeatable)"),
    remove_dislike: List[str] = typer.Option([], "--remove-dislike", help="Drop a recorded dislike (repeatable)"),
    remove_deal_breaker: List[str] = typer.Option([], "--remove-deal-breaker", help="Drop a recorded deal-breaker (repeatable)"),
    sentiment: Optional[str] = typer.Option(
        None,
        "--sentiment",
        "-s",
        help="Overall sentiment (love, like, neutral, dislike)",
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Free-form notes (replaces existing)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Add or remove likes, dislikes and deal-breakers; set sentiment or notes.

    Examples:
        househunt listings annotate 3 --like "big yard" --dislike "busy street"
        househunt listings annotate 3 --sentiment love
        househunt listings annotate 3 --remove-dislike "busy street"
    """
    from househunt.core.config.models import Sentiment
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    parsed_sentiment = None
    if sentiment:
        try:
            parsed_sentiment = Sentiment(sentiment.lower())
        except ValueError:
            err_console.print(f"[red]Unknown sentiment:[/red] {sentiment}")
            err_console.print(f"[dim]Supported: {', '.join(s.value for s in Sentiment)}[/dim]")
            raise typer.Exit(1)

    bootstrap(config_path, database=True)

    with get_session() as session:
        listing = ListingRepository(session).annotate(
            id,
            likes=like,
            dislikes=dislike,
            deal_breakers=deal_breaker,
            remove_likes=remove_like,
            remove_dislikes=remove_dislike,
            remove_deal_breakers=remove_deal_breaker,
            sentiment=parsed_sentiment,
            notes=notes,
        )
        if not listing:
            err_console.print(f"[red]Listing not found:[/red] {id}")
            raise typer.Exit(1)

    console.print(f"[green]OK[/green] Listing #{id} updated")


@app.command("edit")
def edit_listing(
    id: int = typer.Argument(..., help="Listing ID"),
    address: Optional[str] = typer.Option(None, "--address", help="Street address"),
    price: Optional[int] = typer.Option(None, "--price", help="Asking price"),
    beds: Optional[int] = typer.Option(None, "--beds", help="Bedrooms"),
    baths: Optional[float] = typer.Option(None, "--baths", help="Bathrooms"),
    sqft: Optional[int] = typer.Option(None, "--sqft", help="Living area in square feet"),
    price_per_sqft: Optional[int] = typer.Option(None, "--price-per-sqft"),
    tax_assessed_value: Optional[int] = typer.Option(None, "--tax-assessed-value"),
    annual_tax_amount: Optional[int] = typer.Option(None, "--annual-tax-amount"),
    price_range: Optional[str] = typer.Option(None, "--price-range"),
    date_on_market: Optional[str] = typer.Option(None, "--date-on-market"),
    listing_agreement: Optional[str] = typer.Option(None, "--listing-agreement"),
    listing_terms: Optional[str] = typer.Option(None, "--listing-terms"),
    lot_size: Optional[str] = typer.Option(None, "--lot-size"),
    total_spaces: Optional[int] = typer.Option(None, "--total-spaces"),
    garage_spaces: Optional[int] = typer.Option(None, "--garage-spaces"),
    home_type: Optional[str] = typer.Option(None, "--home-type"),
    year_built: Optional[int] = typer.Option(None, "--year-built"),
    clear: List[str] = typer.Option([], "--clear", help="Field to blank out (repeatable)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Correct or fill in listing fields by hand.

    Examples:
        househunt listings edit 3 --price 450000 --beds 3
        househunt listings edit 3 --clear lot_size
    """
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import EDITABLE_FIELDS, ListingRepository

    given = {
        "address": address,
        "price": price,
        "beds": beds,
        "baths": baths,
        "sqft": sqft,
        "price_per_sqft": price_per_sqft,
        "tax_assessed_value": tax_assessed_value,
        "annual_tax_amount": annual_tax_amount,
        "price_range": price_range,
        "date_on_market": date_on_market,
        "listing_agreement": listing_agreement,
        "listing_terms": listing_terms,
        "lot_size": lot_size,
        "total_spaces": total_spaces,
        "garage_spaces": garage_spaces,
        "home_type": home_type,
        "year_built": year_built,
    }
    values = {name: value for name, value in given.items() if value is not None}

    for name in clear:
        name = name.replace("-", "_")
        if name not in EDITABLE_FIELDS:
            err_console.print(f"[red]Unknown field:[/red] {name}")
            err_console.print(f"[dim]Editable: {', '.join(EDITABLE_FIELDS)}[/dim]")
            raise typer.Exit(1)
        values[name] = None

    if not values:
        err_console.print("[yellow]Nothing to change.[/yellow]")
        raise typer.Exit(1)

    bootstrap(config_path, database=True)

    with get_session() as session:
        listing = ListingRepository(session).update_fields(id, **values)
        if not listing:
            err_console.print(f"[red]Listing not found:[/red] {id}")
            raise typer.Exit(1)

    console.print(f"[green]OK[/green] Listing #{id}: {', '.join(sorted(values))} updated")

@app.command("delete")
def delete_listing(
    id: int = typer.Argument(..., help="Listing ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Stop tracking a listing."""
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    bootstrap(config_path, database=True)

    if not yes:
        typer.confirm(f"Delete listing #{id}?", abort=True)

    with get_session() as session:
        if not ListingRepository(session).delete(id):
            err_console.print(f"[red]Listing not found:[/red] {id}")
            raise typer.Exit(1)

    console.print(f"[green]OK[/green] Deleted listing #{id}")


@app.command("export")
def export_listings(
    output: Path = typer.Argument(..., help="Output file path"),
    format: str = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (inferred from extension if not specified)",
    ),
    visited: bool = typer.Option(False, "--visited", help="Only export visited listings"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Export tracked listings to a file.

    Supported formats: csv, json

    Examples:
        househunt listings export data/listings.csv
        househunt listings export data/all.json --format json
    """
    from househunt.persistence.db import get_session
    from househunt.persistence.repo import ListingRepository

    if not format:
        format = output.suffix.lstrip(".").lower()

    if format not in EXPORT_FORMATS:
        err_console.print(f"[red]Unsupported format:[/red] {format}")
        err_console.print(f"[dim]Supported: {', '.join(EXPORT_FORMATS)}[/dim]")
        raise typer.Exit(1)

    bootstrap(config_path, database=True)

    with get_session() as session:
        listings = ListingRepository(session).list_listings(visited_only=visited)

        if not listings:
            console.print("[yellow]No listings to export.[/yellow]")
            return

        rows = [listing_to_dict(item) for item in listings]

    output.parent.mkdir(parents=True, exist_ok=True)

    if format == "csv":
        import csv
        with open(output, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            for row in rows:
                for key in ("likes", "dislikes", "deal_breakers"):
                    row[key] = "; ".join(row[key])
                writer.writerow({k: "" if v is None else v for k, v in row.items()})
    else:
        import json
        with open(output, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)

    console.print(f"[green]OK[/green] Exported {len(rows)} listings to [cyan]{output}[/cyan]")
