"""Command-line interface for previewing record data."""

import csv
from itertools import islice
import logging
import sys

import typer

from blast_feed.context import background
from blast_feed.errors import BlastFeedError
from blast_feed.opener import open_data
from blast_feed.state import RunState

app = typer.Typer(add_completion=False)


@app.callback()
def cli() -> None:
    """Feed record data to a rate-driven load engine."""


@app.command()
def preview(
    location: str = typer.Argument(
        ...,
        help="Data location: gs://bucket/object, /path/to/file.csv, or inline CSV text",
    ),
    headers: bool = typer.Option(
        True,
        "--headers/--no-headers",
        help="Treat the first record as the header row",
    ),
    limit: int = typer.Option(
        10,
        min=0,
        help="Maximum number of records to print",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Print the headers and first records of a data location as CSV.

    Locations:
    - Inline data: any text containing a newline
    - Google Cloud Storage: gs://bucket/object
    - Local files: /path/to/file.csv
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    writer = csv.writer(sys.stdout, lineterminator="\n")
    try:
        with RunState(quiet=True) as state:
            open_data(state, background(), location, headers=headers)
            if state.record_reader is None:
                typer.echo("No data source configured", err=True)
                return

            if headers:
                writer.writerow(state.headers)
            for record in islice(state.record_reader, limit):
                writer.writerow(record)

    except BlastFeedError as e:
        typer.echo(f"Error: {e}", err=True)
        if verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        raise typer.Exit(code=1) from None
    except ImportError as e:
        typer.echo(
            f"Error: Missing dependency: {e}\nInstall with: pip install blast-feed[gcs]",
            err=True,
        )
        raise typer.Exit(code=1) from None


if __name__ == "__main__":
    app()
