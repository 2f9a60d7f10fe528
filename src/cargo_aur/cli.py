# SPDX-License-Identifier: MIT
"""CLI entry point for the cargo-aur command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .errors import CargoAurError
from .pipeline import PipelineConfig, run


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f":: Error: {message}", fg="red", bold=True, err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(f":: {message}", fg="green", bold=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(f":: {message}")


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f":: {message}", fg="yellow", bold=True)


def setup_logging(verbose: bool) -> None:
    """Send library logs to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command()
@click.version_option(__version__, "--version", message="%(version)s")
@click.argument("args", nargs=-1)
@click.option(
    "--musl",
    is_flag=True,
    help="Use the MUSL build target to produce a static binary.",
)
@click.option(
    "--dryrun",
    is_flag=True,
    help="Don't actually build anything.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Run as if started in this directory.",
)
def cli(
    args: tuple[str, ...],
    musl: bool,
    dryrun: bool,
    verbose: bool,
    directory: Optional[Path],
) -> None:
    """Prepare a Rust project for the AUR.

    Builds a release tarball and a matching PKGBUILD under target/cargo-aur.
    Positional arguments are ignored; cargo passes "aur" when run as
    `cargo aur`.

    \b
    Examples:
        cargo aur               # Build tarball and PKGBUILD
        cargo aur --musl        # Build a static binary
        cargo aur --dryrun      # Only validate Cargo.toml
    """
    setup_logging(verbose)

    config = PipelineConfig(
        project_dir=directory or Path.cwd(),
        musl=musl,
        dry_run=dryrun,
    )

    try:
        result = run(config, warn=echo_warning)
    except CargoAurError as e:
        echo_error(str(e))
        raise SystemExit(1)

    if verbose and result.tarball is not None:
        echo_info(f"Tarball: {result.tarball.path} ({result.tarball.size:,} bytes)")
        echo_info(f"Files included: {', '.join(result.tarball.files_included)}")
        echo_info(f"sha256: {result.sha256}")
        echo_info(f"PKGBUILD: {result.pkgbuild_path}")

    echo_success("Done.")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
