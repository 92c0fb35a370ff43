"""
Command-line interface for feed deduplication.

Uses Typer to provide commands for batch deduplication of a feed export,
classifying a single candidate item, and canonicalizing URLs.
"""

from __future__ import annotations

from pathlib import Path

import click
import typer
from rich.console import Console

from .config import load_config, validate_config
from .core.canonical import canonicalize_url
from .core.dedup import find_duplicate
from .parser import load_items
from .runner import run_dedup

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    existing: Path | None = typer.Option(
        None,
        "--existing",
        "-e",
        exists=True,
        readable=True,
        help="JSON export of items accepted earlier.",
    ),
    threshold: float | None = typer.Option(
        None, "--threshold", min=0.0, max=1.0, help="Title similarity threshold (0-1)."
    ),
    window_hours: float | None = typer.Option(
        None,
        "--window-hours",
        click_type=click.FloatRange(min=0.0, min_open=True),
        help="Skip items published earlier than this many hours ago.",
    ),
    run_folder_mode: str | None = typer.Option(
        None,
        "--run-folder-mode",
        help="Output subfolder mode: input, timestamp, or input_timestamp.",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Deduplicate a feed export.

    Drops items whose URL matches an earlier item exactly or whose title
    is similar enough to an earlier title, then writes the kept items and
    a duplicate report to the run output folder.

    Args:
        input: Path to the JSON export with new items
        output: Directory for run output folders
        config: Optional path to YAML config file
        existing: Optional JSON export of previously accepted items
        threshold: Override the title similarity threshold
        window_hours: Override the ingestion window in hours
        run_folder_mode: Output folder naming strategy
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log file format (jsonl, plain)
        log_file: Enable/disable file logging
    """
    cfg = load_config(str(config) if config else None)

    if threshold is not None:
        cfg.dedup.title_similarity_threshold = threshold
    if window_hours is not None:
        cfg.dedup.ingestion_window_hours = window_hours
    if run_folder_mode:
        cfg.output.run_folder_mode = run_folder_mode
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file
    validate_config(cfg)

    output_path = run_dedup(input, output, cfg, existing_path=existing, console=console)
    console.print(f"Items written: {output_path}")


@app.command()
def check(
    url: str = typer.Argument(..., help="Candidate item URL."),
    title: str = typer.Argument(..., help="Candidate item title."),
    existing: Path = typer.Option(..., "--existing", "-e", exists=True, readable=True),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    threshold: float | None = typer.Option(
        None, "--threshold", min=0.0, max=1.0, help="Title similarity threshold (0-1)."
    ),
):
    """Check whether one item duplicates any existing item.

    Exits with status 1 when the item is a duplicate, 0 when it is new.
    """
    cfg = load_config(str(config) if config else None)
    similarity_threshold = (
        threshold if threshold is not None else cfg.dedup.title_similarity_threshold
    )

    match = find_duplicate(url, title, load_items(existing), similarity_threshold)
    if match is None:
        console.print("[green]new[/green]")
        return

    console.print(
        f"[yellow]duplicate[/yellow] reason={match.reason} score={match.score:.4f} "
        f"matched={match.existing.url}"
    )
    raise typer.Exit(code=1)


@app.command()
def canonicalize(urls: list[str] = typer.Argument(..., help="URLs to canonicalize.")):
    """Print the canonical form of each URL, one per line."""
    for url in urls:
        typer.echo(canonicalize_url(url))


if __name__ == "__main__":
    app()
