"""Command-line interface for dirsize."""

from __future__ import annotations

import logging
import sys

import click
from result import Err
from rich.console import Console
from rich.markup import escape

from dirsize import __version__
from dirsize.config.loader import load_config, sample_config_json
from dirsize.config.schema import AppConfig, clamp_field
from dirsize.models.enums import Rounding, UnitBase
from dirsize.models.scan import RootErrorCode
from dirsize.scan import SCANNER_NAMES, create_scanner
from dirsize.services.report import format_report, printable

log = logging.getLogger(__name__)

EXIT_CANCELLED = 1
EXIT_ROOT_ERROR = 2


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _apply_overrides(
    config: AppConfig,
    workers: int | None,
    scanner: str | None,
    decimal: bool | None,
    rounding: str | None,
    total: bool | None,
) -> AppConfig:
    if workers is not None:
        config.scan_workers = clamp_field(workers, "scan_workers")
    if scanner is not None:
        config.scanner = scanner
    if decimal is not None:
        config.unit_base = UnitBase.DECIMAL if decimal else UnitBase.BINARY
    if rounding is not None:
        config.rounding = Rounding(rounding.replace("-", "_"))
    if total is not None:
        config.show_total = total
    return config


@click.command()
@click.argument("path", default=".")
@click.option("-w", "--workers", type=int, default=None, help="Number of scan threads.")
@click.option("--scanner", type=click.Choice(SCANNER_NAMES), default=None, help="Scan strategy.")
@click.option("--decimal/--binary", "decimal", default=None, help="Use 1000-based (kB) or 1024-based (KiB) units.")
@click.option("--rounding", type=click.Choice(["half-even", "half-up"]), default=None, help="Rounding of the third decimal.")
@click.option("--total/--no-total", "total", default=None, help="Print a Total line after the entries.")
@click.option("--config", "config_path", default=None, help="Path to a JSON config file.")
@click.option("--sample-config", is_flag=True, help="Print the default config as JSON and exit.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.version_option(__version__, prog_name="dirsize")
def main(
    path: str,
    workers: int | None,
    scanner: str | None,
    decimal: bool | None,
    rounding: str | None,
    total: bool | None,
    config_path: str | None,
    sample_config: bool,
    verbose: int,
) -> None:
    """Show the size of every entry in PATH (default: the current directory), smallest first."""
    _setup_logging(verbose)
    out = Console(highlight=False)
    err = Console(stderr=True, highlight=False)

    if sample_config:
        click.echo(sample_config_json())
        return

    loaded = load_config(config_path)
    if isinstance(loaded, Err):
        err.print(f"[yellow]warning:[/yellow] {escape(loaded.unwrap_err())} Using defaults.", soft_wrap=True)
        config = AppConfig()
    else:
        config = loaded.unwrap()
    config = _apply_overrides(config, workers, scanner, decimal, rounding, total)
    log.info("using %s scanner with %d workers", config.scanner, config.scan_workers)

    engine = create_scanner(config.scanner, workers=config.scan_workers)
    try:
        if err.is_terminal:
            with err.status("Scanning...") as status:

                def on_progress(current: str, files: int, dirs: int) -> None:
                    status.update(f"Scanning... {files:,} files, {dirs:,} directories")

                result = engine.scan(path, progress_callback=on_progress)
        else:
            result = engine.scan(path)
    except KeyboardInterrupt:
        err.print("[red]Scan cancelled[/red]")
        sys.exit(EXIT_CANCELLED)

    if isinstance(result, Err):
        error = result.unwrap_err()
        err.print(f"[red]error:[/red] {escape(printable(error.message))}: {escape(printable(error.path))}", soft_wrap=True)
        sys.exit(EXIT_CANCELLED if error.code is RootErrorCode.CANCELLED else EXIT_ROOT_ERROR)

    report = result.unwrap()
    lines = format_report(
        report.entries,
        report.errors,
        base=config.unit_base,
        rounding=config.rounding,
        show_total=config.show_total,
    )
    for line in lines:
        out.print(line, markup=False, emoji=False, soft_wrap=True)
