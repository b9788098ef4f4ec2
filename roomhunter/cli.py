"""Command line interface for the Warsaw room finder."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

import typer

from .config import DEFAULT_PAGES, MAX_PAGES, load_settings
from .errors import RoomHunterError
from .export import listings_to_json, write_json
from .models import Listing, RoomType, SearchOptions
from .workflow import aggregate

app = typer.Typer(add_completion=False, help="Find rooms for rent in Warsaw on OLX and Otodom.")

# Silence noisy browser driver loggers only
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("playwright").setLevel(logging.WARNING)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _split_sources(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()] or ["all"]


def format_listing(listing: Listing) -> str:
    price = f"{listing.price} {listing.currency}" if listing.price is not None else "Price not specified"
    area = f" | {listing.area:g}m²" if listing.area else ""
    return "\n".join(
        [
            f"[{listing.source.value.upper()}] {listing.title}",
            f"  Price: {price}{area}",
            f"  Location: {listing.location}",
            f"  URL: {listing.url}",
        ]
    )


def display_results(listings: Sequence[Listing]) -> None:
    if not listings:
        typer.echo("No rooms found matching your criteria.")
        return

    rule = "=" * 80
    typer.echo(f"\n{rule}")
    typer.echo(f"Found {len(listings)} rooms total")
    typer.echo(f"{rule}\n")
    for listing in listings:
        typer.echo(format_listing(listing))
        typer.echo("")


@app.command()
def search(
    max_price: Optional[int] = typer.Option(
        None, "--max-price", "--maxPrice", "-p", min=0, help="Maximum price in PLN (e.g. 2500)"
    ),
    room_type: Optional[RoomType] = typer.Option(
        None, "--room-type", "--roomType", "-t", case_sensitive=False, help="Room type to keep"
    ),
    source: str = typer.Option("all", "--source", "-s", help="olx, otodom or all (comma separated)"),
    pages: int = typer.Option(
        DEFAULT_PAGES, "--pages", "-n", help=f"Pages to scrape per source (max {MAX_PAGES})"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Print JSON and save it to a dated file"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Directory for the JSON file"),
    parallel: bool = typer.Option(False, "--parallel", help="Crawl sources concurrently"),
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML file with crawl settings"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable verbose debug logging"),
) -> None:
    """Scrape, filter and list rooms, cheapest first."""

    _configure_logging(debug)
    try:
        settings = load_settings(config)
    except (OSError, ValueError) as exc:
        typer.echo(f"Invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    options = SearchOptions.build(
        max_price=max_price,
        room_type=room_type,
        pages=pages,
        max_pages=settings.max_pages,
    )
    pages_info = f" ({options.pages} pages each)" if options.pages > 1 else ""
    typer.echo(f"Scraping rooms for rent in Warsaw{pages_info}...\n", err=json_output)

    try:
        listings = aggregate(_split_sources(source), options, settings=settings, parallel=parallel)
    except RoomHunterError as exc:
        typer.echo(f"Error scraping: {exc}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(listings_to_json(listings))
        write_json(listings, output_dir)
    else:
        display_results(listings)


if __name__ == "__main__":  # pragma: no cover
    app()
