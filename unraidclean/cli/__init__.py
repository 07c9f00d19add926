"""Command-line interface."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from ..api.client import APIError
from ..config.settings import ConfigError, ConfigManager
from ..core.enrich import enrich_exceptions
from ..core.processor import fetch_catalogs, run_scan
from ..core.ranker import SORT_KEYS, SORT_ORDERS, UnsupportedSortError
from ..core.scanner import ScanOptions
from ..report import ReportError, format_table, read_json, summarize, write_csv, write_json

HANDLED_ERRORS = (ConfigError, APIError, ReportError, UnsupportedSortError, OSError)


def _fail(error: Exception, verbose: bool) -> None:
    click.echo(f"Error: {error}", err=True)
    if verbose:
        import traceback

        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path),
    default=Path("config.yaml"),
    show_default=True,
    help="Path to config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool):
    """Cleanup review reports for Plex, Sonarr, and Radarr.

    Flags movies and series that nobody has watched in a while so they can
    be reviewed before deletion. Nothing is ever deleted by this tool.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    ctx.obj = {"config_path": config_path, "verbose": verbose}


@main.command()
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=Path("review.json"),
              show_default=True, help="Output path for the review report")
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), default=None,
              help="Optional CSV output path for review")
@click.option("--table", is_flag=True, help="Print a pretty table of results to stdout")
@click.option("--sort", "sort_by", type=click.Choice(SORT_KEYS), default="size",
              show_default=True, help="Sort key")
@click.option("--order", "sort_order", type=click.Choice(SORT_ORDERS), default="desc",
              show_default=True, help="Sort order")
@click.pass_obj
def scan(obj: dict, out_path: Path, csv_path: Path | None, table: bool, sort_by: str, sort_order: str):
    """Generate a cleanup review report."""
    verbose = obj["verbose"]
    try:
        config = ConfigManager(obj["config_path"]).load()
        report = asyncio.run(run_scan(config, ScanOptions(sort_by=sort_by, sort_order=sort_order)))

        if out_path:
            write_json(out_path, report)
            click.echo(f"Wrote report to {out_path} ({len(report.items)} items)")
        if csv_path:
            write_csv(csv_path, report)
            click.echo(f"Wrote CSV to {csv_path} ({len(report.items)} items)")
        if table:
            click.echo(format_table(report))
    except HANDLED_ERRORS as e:
        _fail(e, verbose)


@main.command()
@click.option("--in", "in_path", type=click.Path(path_type=Path), default=Path("review.json"),
              show_default=True, help="Review report to summarize")
@click.option("--table", is_flag=True, help="Also print every item")
@click.pass_obj
def summary(obj: dict, in_path: Path, table: bool):
    """Summarize a previously generated review report."""
    try:
        report = read_json(in_path)
        result = summarize(report)
        click.echo(f"Items: {result.total}")
        if result.by_type:
            click.echo("By type: " + ", ".join(f"{k}={v}" for k, v in sorted(result.by_type.items())))
        if result.by_reason:
            click.echo("By reason: " + ", ".join(f"{k}={v}" for k, v in sorted(result.by_reason.items())))
        if table:
            click.echo(format_table(report))
    except ReportError as e:
        _fail(e, obj["verbose"])


@main.command("enrich-exceptions")
@click.option("--dry-run", is_flag=True, help="Show changes without writing config")
@click.pass_obj
def enrich_exceptions_command(obj: dict, dry_run: bool):
    """Backfill titles/paths for exception IDs."""
    verbose = obj["verbose"]
    try:
        manager = ConfigManager(obj["config_path"])
        config = manager.load()
        movies, series = asyncio.run(fetch_catalogs(config))

        changes = enrich_exceptions(config.exceptions, movies, series)
        if not changes:
            click.echo("No exception entries to enrich.")
            return
        for change in changes:
            click.echo(change)

        if dry_run:
            click.echo("Dry run enabled; not writing config.")
            return
        manager.save(config)
        click.echo(f"Updated config: {manager.config_path}")
    except HANDLED_ERRORS as e:
        _fail(e, verbose)


if __name__ == "__main__":
    main()
