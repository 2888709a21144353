"""CLI entry-point: python -m fetchers [list|run|sync|validate]."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer

from api.database import EventStore
from api.ingest import IngestionService, UpsertSummary
from fetchers.base import check_registry, fetch_all, get_fetchers, write_events
from fetchers.config import ROOT_DIR, configure_logging, get_settings
from fetchers.models import FetchParams
from validation.events import validate_complete_event

app = typer.Typer(help="Event aggregator – provider fetch CLI")

DEFAULT_OUTPUT = ROOT_DIR / "output" / "events.json"


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level or get_settings().LOG_LEVEL)
    check_registry()


@app.command(name="list")
def list_fetchers() -> None:
    """List registered provider fetchers."""
    for source in sorted(s.value for s in get_fetchers()):
        typer.echo(f"  {source}")


@app.command()
def run(
    source: list[str] | None = typer.Option(
        None, "--source", "-s", help="Provider name(s) to fetch. Omit for all."
    ),
    city: str | None = typer.Option(None, help="City filter."),
    keyword: str | None = typer.Option(None, help="Keyword filter."),
    access_token: str | None = typer.Option(None, help="Bearer token for Google Calendar."),
    output: Path = typer.Option(DEFAULT_OUTPUT, "--output", "-o", help="JSON output file."),
) -> None:
    """Fetch events and write them to a JSON file."""
    params = FetchParams(city=city, keyword=keyword, access_token=access_token)
    try:
        events = asyncio.run(fetch_all(source or None, params))
    except KeyError as exc:
        typer.echo(str(exc.args[0]), err=True)
        raise typer.Exit(1)
    write_events(events, output)
    typer.echo(f"Fetched {len(events)} event(s) -> {output}")


async def _sync(
    sources: list[str] | None, user_id: str, params: FetchParams, database: Path
) -> UpsertSummary:
    events = await fetch_all(sources, params)
    async with EventStore(database) as store:
        return await IngestionService(store).upsert(user_id, events)


@app.command()
def sync(
    user_id: str = typer.Option(..., "--user-id", "-u", help="Owner of the ingested events."),
    source: list[str] | None = typer.Option(None, "--source", "-s", help="Provider name(s)."),
    city: str | None = typer.Option(None, help="City filter."),
    keyword: str | None = typer.Option(None, help="Keyword filter."),
    access_token: str | None = typer.Option(None, help="Bearer token for Google Calendar."),
    database: Path | None = typer.Option(None, "--database", help="SQLite file path."),
) -> None:
    """Fetch events and upsert them into the event store."""
    params = FetchParams(city=city, keyword=keyword, access_token=access_token)
    try:
        summary = asyncio.run(
            _sync(source or None, user_id, params, database or get_settings().DATABASE_PATH)
        )
    except KeyError as exc:
        typer.echo(str(exc.args[0]), err=True)
        raise typer.Exit(1)
    typer.echo(
        f"Inserted {summary.inserted}, updated {summary.updated}, skipped {summary.skipped}."
    )


@app.command()
def validate(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON event or array."),
) -> None:
    """Validate events from a JSON file; exit 1 if any is invalid."""
    data = json.loads(file.read_text(encoding="utf-8"))
    events = data if isinstance(data, list) else [data]

    invalid = 0
    for index, raw in enumerate(events):
        result = validate_complete_event(raw)
        label = raw.get("uid") if isinstance(raw, dict) and raw.get("uid") else f"#{index}"
        if result.is_valid:
            typer.echo(f"OK   {label}")
        else:
            invalid += 1
            typer.echo(f"FAIL {label}")
            for error in result.errors:
                typer.echo(f"    error: {error}")
        for warning in result.warnings:
            typer.echo(f"    warning: {warning}")

    typer.echo(f"{len(events) - invalid}/{len(events)} event(s) valid.")
    if invalid:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
