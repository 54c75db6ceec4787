"""Click CLI for croppy: build, inspect and serve derivative URLs."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from croppy.config.hierarchy import resolve_config
from croppy.errors.exceptions import CroppyError

if TYPE_CHECKING:
    from croppy.core import Croppy

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """-v for INFO, -vv for DEBUG; WARNING otherwise."""
    levels = {0: logging.WARNING, 1: logging.INFO}
    logging.basicConfig(
        level=levels.get(verbosity, logging.DEBUG),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _parse_option(raw: str) -> tuple[str, list[str]]:
    """``resize`` -> ("resize", []); ``quadrant=T`` -> ("quadrant", ["T"])."""
    name, _, args = raw.partition("=")
    return name, [a for a in args.split(",") if a] if args else []


def _build(**overrides: object) -> Croppy:
    from croppy.core import Croppy

    try:
        config = resolve_config(**overrides)
    except ValueError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)
    return Croppy(config)


@contextmanager
def _session(**overrides: object) -> Iterator[Croppy]:
    """A configured Croppy; croppy errors end the command with exit code 1."""
    croppy = _build(**overrides)
    try:
        yield croppy
    except CroppyError as e:
        error_console.print(f"[red]{type(e).__name__}:[/red] {e}")
        sys.exit(1)
    finally:
        croppy.close()


verbose_option = click.option(
    "-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)."
)


@click.group()
@click.version_option(package_name="croppy")
def cli() -> None:
    """croppy: image derivatives addressed by URL."""


@cli.command()
@click.argument("src")
@click.option("-w", "--width", type=float, default=None, help="Target width.")
@click.option("-h", "--height", type=float, default=None, help="Target height.")
@click.option(
    "-o", "--option", "options", multiple=True, help="Option as NAME or NAME=ARG1,ARG2."
)
@click.option("--signing-key", type=str, default=None, help="Override the signing key.")
@verbose_option
def url(
    src: str,
    width: float | None,
    height: float | None,
    options: tuple[str, ...],
    signing_key: str | None,
    verbose: int,
) -> None:
    """Print the derivative URL for SRC."""
    _setup_logging(verbose)
    with _session(signing_key=signing_key) as croppy:
        result = croppy.url(src, width, height, dict(_parse_option(o) for o in options))
    console.print(result, highlight=False, soft_wrap=True, markup=False)


@cli.command()
@click.argument("path")
def parse(path: str) -> None:
    """Decode a derivative PATH."""
    with _session() as croppy:
        request = croppy.parse(path)
    if request is None:
        error_console.print(f"[yellow]Not a derivative path:[/yellow] {path}")
        sys.exit(1)

    table = Table(title="Transform Request")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Source", request.source_path)
    table.add_row("Width", str(request.width or "_"))
    table.add_row("Height", str(request.height or "_"))
    for name, args in request.options.items():
        table.add_row(f"Option {name}", ",".join(args) or "-")
    console.print(table)


@cli.command()
@click.argument("path")
def sign(path: str) -> None:
    """Print the signing token for PATH."""
    with _session() as croppy:
        token = croppy.signer.sign(path)
    if token is None:
        error_console.print("[yellow]Signing is disabled (no signing_key configured).[/yellow]")
        sys.exit(1)
    console.print(token, highlight=False)


@cli.command("list")
@click.argument("src")
def list_derivatives(src: str) -> None:
    """List the derivatives generated from SRC."""
    with _session() as croppy:
        keys = croppy.derivatives(src)
        limit = croppy.config.max_crops

    table = Table(title=f"Derivatives of {src}")
    table.add_column("Key", style="cyan")
    for key in keys:
        table.add_row(key)
    console.print(table)
    console.print(f"{len(keys)} of {limit or 'unlimited'}")


@cli.command()
@click.argument("src")
@click.option("--delete-source", is_flag=True, default=False, help="Also delete SRC itself.")
def reset(src: str, delete_source: bool) -> None:
    """Delete the derivatives generated from SRC."""
    with _session() as croppy:
        removed = croppy.delete(src) if delete_source else croppy.reset(src)
    console.print(f"[green]Removed {removed} derivatives.[/green]")


@cli.command()
@click.option("--dry-run", is_flag=True, default=False, help="Only list what would be deleted.")
@click.confirmation_option(prompt="Delete derivatives whose source image is gone?")
def purge(dry_run: bool) -> None:
    """Delete derivatives whose source no longer exists."""
    with _session() as croppy:
        keys = croppy.purge(dry_run=dry_run)

    for key in keys:
        console.print(f"  {key}", highlight=False, markup=False)
    verb = "Would delete" if dry_run else "Deleted"
    console.print(f"[green]{verb} {len(keys)} derivatives.[/green]")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@verbose_option
def serve(host: str, port: int, verbose: int) -> None:
    """Serve derivatives over HTTP."""
    import uvicorn

    from croppy.server import create_app

    _setup_logging(verbose)
    app = create_app(_build())
    uvicorn.run(app, host=host, port=port, log_level="debug" if verbose >= 2 else "info")


def main() -> None:
    cli()
