"""
HouseHunt CLI - Main entry point.

A terminal-first home listing tracker: capture listing pages, keep the
extracted facts next to your own notes, and export the lot.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from househunt import __app_name__, __version__
from .common import bootstrap, console, err_console, print_record

# Load environment variables from .env (if present)
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

app = typer.Typer(
    name=__app_name__,
    help="Track candidate home listings during a house search",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to app.yaml (default: configs/app.yaml)",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """HouseHunt - home listing tracker."""
    pass


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import listings  # noqa: E402

app.add_typer(listings.app, name="listings", help="Manage tracked listings")


# =============================================================================
# Init Command
# =============================================================================


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Create directories, default configuration and the database."""
    app_config_path = Path("configs/app.yaml")
    if not app_config_path.exists() or force:
        _create_default_app_config(app_config_path)

    config = bootstrap(app_config_path, database=True)
    config.ensure_directories()

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - HouseHunt initialized![/bold green]\n\n"
        "Created:\n"
        f"  - [cyan]{app_config_path}[/cyan] - Application configuration\n"
        f"  - [cyan]{config.database.url}[/cyan] - Listing database\n\n"
        "Next steps:\n"
        "  1. Add a listing: [yellow]househunt listings add <url>[/yellow]\n"
        "  2. Review them: [yellow]househunt listings list[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


def _create_default_app_config(path: Path) -> None:
    """Create default app.yaml configuration."""
    default_config = """\
# HouseHunt Configuration

config_dir: configs
data_dir: data

database:
  url: ${HOUSEHUNT_DATABASE_URL:-sqlite:///data/househunt.db}
  echo: false

logging:
  level: INFO
  file: logs/househunt.log
  json_format: true
  rich_console: true

fetch:
  timeout_seconds: 30
  max_retries: 3
  allowed_hosts:
    - zillow.com

# Selector overrides for the extraction engine, e.g.
# extraction:
#   direct:
#     price:
#       selectors: ['[data-testid="price"]']
#   loose:
#     beds:
#       selectors: ['[class*="bed"]']
#       regex: '(\\d+)\\s*bed'
extraction: {}
"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_config, encoding="utf-8")


# =============================================================================
# Extraction Commands
# =============================================================================


@app.command()
def extract(
    page: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved listing page (HTML)"),
    url: str = typer.Option("", "--url", "-u", help="Listing URL the page came from"),
    text_mode: bool = typer.Option(
        False,
        "--text-mode",
        "-t",
        help="Regex-only extraction (no DOM), as used for server-side fetches",
    ),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format (table, json)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Extract listing fields from a saved page."""
    from househunt.core.extract import ListingExtractor
    from househunt.core.orchestrator import capture_page

    config = bootstrap(config_path)
    extractor = ListingExtractor(config=config.extraction)
    html = page.read_text(encoding="utf-8", errors="replace")

    if text_mode:
        record = extractor.extract_text(html, url)
    else:
        record = capture_page(html, url, extractor)

    print_record(record, output_format)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="Listing URL"),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format (table, json)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Fetch a listing server-side and extract what the raw HTML reveals."""
    from househunt.core.backends import HttpBackend
    from househunt.core.extract import ListingExtractor
    from househunt.core.orchestrator import autofill

    config = bootstrap(config_path)

    async def _run():
        async with HttpBackend(
            timeout=config.fetch.timeout_seconds,
            max_retries=config.fetch.max_retries,
            user_agent=config.fetch.user_agent,
        ) as backend:
            return await autofill(
                url,
                backend,
                ListingExtractor(config=config.extraction),
                allowed_hosts=config.fetch.allowed_hosts,
                timeout=config.fetch.timeout_seconds,
            )

    result = asyncio.run(_run())
    print_record(result.record, output_format)

    if result.error:
        err_console.print(f"[yellow]Fetch failed:[/yellow] {result.error}")
    if result.message:
        err_console.print(f"[yellow]{result.message}[/yellow]")
    if not result.fetched:
        raise typer.Exit(1)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
