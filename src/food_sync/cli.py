"""food-sync command line interface.

Usage:
    food-sync add 173944 171705 --db ./food-data.sqlite3
    food-sync add --file ids.txt --portions portions.csv --dry-run
"""

import asyncio
import json
import logging
import sqlite3
from typing import List, Optional

import typer

from food_sync.app_logging import configure_logging
from food_sync.config import ConfigurationError, Settings
from food_sync.containers import AppContainer, build_container
from food_sync.domain.foods import MutationBatch, SubmissionResult
from food_sync.services.assembly import PortionSortKey
from food_sync.services.identifiers import resolve_identifiers
from food_sync.services.overrides import load_portion_overrides

VERSION = "1.0.0"

_logger = logging.getLogger("food_sync.cli")

app = typer.Typer(
    name="food-sync",
    help="Sync foods from an FDC SQLite database to the Oh My Heart and Home store.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(VERSION)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Sync FDC foods to the content store."""


@app.command()
def add(
    fdc_ids: Optional[List[str]] = typer.Argument(
        None, help="FDC ids to add (or overwrite)"
    ),
    db: Optional[str] = typer.Option(
        None, "--db", help="Source SQLite database file path"
    ),
    api: Optional[str] = typer.Option(None, "--api", help="Content store API URI"),
    token: Optional[str] = typer.Option(
        None, "--token", help="Content store API token"
    ),
    file: Optional[str] = typer.Option(
        None, "--file", help="File of FDC ids, one per line"
    ),
    portions: Optional[str] = typer.Option(
        None,
        "--portions",
        help="Manual portion file: id, gram weight, unit, modifier",
    ),
    sort_key: Optional[PortionSortKey] = typer.Option(
        None, "--sort-key", case_sensitive=False, help="Portion key"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the mutation batch instead of uploading"
    ),
) -> None:
    """Add (or overwrite) foods in the content store.

    Examples:

        food-sync add 173944 --api https://example.api --token secret
    """
    configure_logging()
    settings = Settings().with_overrides(
        food_db_path=db,
        omhh_api_uri=api,
        omhh_api_token=token,
        portion_sort_key=sort_key.value if sort_key else None,
    )

    try:
        overrides = load_portion_overrides(portions) if portions else {}
        identifiers = resolve_identifiers(fdc_ids or [], file, overrides.keys())
        container = build_container(settings, submit=not dry_run)
    except (OSError, ConfigurationError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    batch: MutationBatch | None = None
    try:
        with container.open_repository() as repository:
            batch = container.sync_service.build_batch(
                repository, identifiers, overrides
            )
    except sqlite3.Error as exc:
        typer.echo(f"Error: cannot read {settings.food_db_path}: {exc}", err=True)
        raise typer.Exit(1)
    finally:
        _logger.info("processing complete.")
        if batch is None or dry_run:
            asyncio.run(container.close_resources())

    if dry_run:
        typer.echo(json.dumps(batch.to_payload(), indent=2))
        return

    result = asyncio.run(_submit(container, batch))
    if not result.ok:
        typer.echo(f"Error: upload failed: {result.error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Uploaded {result.submitted} foods")
    if result.response is not None:
        typer.echo(json.dumps(result.response, indent=2))


async def _submit(container: AppContainer, batch: MutationBatch) -> SubmissionResult:
    try:
        return await container.sync_service.submit(batch)
    finally:
        await container.close_resources()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
