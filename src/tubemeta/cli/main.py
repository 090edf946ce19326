"""
Main CLI entry point for tubemeta.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tubemeta import __version__
from tubemeta.cli.constants import (
    EXIT_SUCCESS,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
)
from tubemeta.config.settings import settings
from tubemeta.exceptions import FetchError, NoPlayerResponseFound
from tubemeta.models.video_metadata import VideoMetadata
from tubemeta.services.extraction import extract_video_metadata
from tubemeta.services.watch_page_client import WatchPageClient

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="tubemeta",
    help="Extract video metadata from YouTube watch pages",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a stream handler to the ``tubemeta`` logger.

    Parameters
    ----------
    verbose : bool, optional
        If True, log at DEBUG instead of ``settings.log_level``.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    package_logger = logging.getLogger("tubemeta")

    for handler in list(package_logger.handlers):
        if getattr(handler, "_tubemeta_cli", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    setattr(handler, "_tubemeta_cli", True)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def _metadata_table(metadata: VideoMetadata) -> Table:
    table = Table(title=f"Video {metadata.id}", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Title", metadata.title or "[dim]unknown[/dim]")
    table.add_row("Author", metadata.author or "[dim]unknown[/dim]")
    table.add_row("Channel ID", metadata.channel_id or "[dim]unknown[/dim]")
    table.add_row("Views", metadata.view_count_text or "[dim]unknown[/dim]")
    if metadata.is_live:
        table.add_row("Live", f"[red]{metadata.raw_view_count_text}[/red]")
    table.add_row("Published", metadata.published_time_text or "[dim]unknown[/dim]")
    table.add_row("Duration", metadata.duration_text or "[dim]unknown[/dim]")
    return table


def _render(metadata: VideoMetadata, as_json: bool) -> None:
    if as_json:
        typer.echo(metadata.model_dump_json(indent=2))
        return

    console.print(_metadata_table(metadata))
    if metadata.effective_description:
        console.print(
            Panel(
                metadata.effective_description,
                title="Description",
                border_style="blue",
            )
        )


def _fail(title: str, message: str, code: int) -> None:
    err_console.print(
        Panel(
            f"[red]{message}[/red]",
            title=title,
            border_style="red",
        )
    )
    raise typer.Exit(code=code)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]tubemeta[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.command()
def parse(
    html_file: Path = typer.Argument(..., help="Saved watch page HTML file"),
    video_id: str = typer.Option(..., "--id", help="Video ID the page belongs to"),
    as_json: bool = typer.Option(False, "--json", help="Print metadata as JSON"),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Extract what is available when the player response is missing",
    ),
) -> None:
    """Extract metadata from a saved watch page."""
    try:
        html = html_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        _fail("File Error", f"Cannot read {html_file}: {e}", EXIT_USER_ERROR)
        return

    try:
        metadata = extract_video_metadata(html, video_id, strict=not lenient)
    except NoPlayerResponseFound as e:
        _fail("No Player Response", e.message, EXIT_USER_ERROR)
        return

    _render(metadata, as_json)


@app.command()
def video(
    video_id: str = typer.Argument(..., help="YouTube video ID"),
    as_json: bool = typer.Option(False, "--json", help="Print metadata as JSON"),
    no_oembed: bool = typer.Option(
        False, "--no-oembed", help="Skip the oEmbed title/author fallback"
    ),
) -> None:
    """Fetch a watch page and extract its metadata."""

    async def run_video() -> VideoMetadata:
        client = WatchPageClient()
        return await client.fetch_video(video_id, use_oembed=not no_oembed)

    try:
        metadata = asyncio.run(run_video())
    except NoPlayerResponseFound as e:
        _fail("No Player Response", e.message, EXIT_USER_ERROR)
        return
    except FetchError as e:
        _fail("Fetch Failed", e.message, EXIT_SYSTEM_ERROR)
        return

    _render(metadata, as_json)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Enable debug logging"
    ),
) -> None:
    """
    tubemeta - YouTube watch page metadata extractor.

    Pulls title, author, views, publish date, duration and the full
    description out of a watch page without the Data API.
    """
    if version:
        console.print(f"tubemeta v{__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)

    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'tubemeta --help' for available commands[/yellow]")
        raise typer.Exit(code=EXIT_USER_ERROR)


if __name__ == "__main__":
    app()
