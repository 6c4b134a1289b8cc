"""
Command-line access to the spell-check filter and the vignette engine table.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click
from .config import ConfigError, build_config
from .constants import DEFAULT_ENGINE_PACKAGE
from .engines import ENGINE_SPECS, match_engines
from .exceptions import ReadFileError
from .filesystem import get_max_file_size
from .models import DocumentFormat
from .spellcheck import knit_filter

__all__ = ["cli"]

FORMAT_CHOICES = [fmt.value for fmt in DocumentFormat if fmt is not DocumentFormat.NONE]


@click.group()
@click.version_option(package_name="vignette-engines")
def cli():
    """Tools for literate R documents: spell-check filtering and vignette engines."""


@cli.command(name="filter")
@click.option("--encoding", default="unknown", show_default=True, help="File encoding")
@click.option(
    "--format",
    "format_name",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Document format (derived from the extension when omitted)",
)
@click.option(
    "--detect/--no-detect",
    default=None,
    help="Sniff the format from the content when the extension is unknown",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def filter_command(
    filepath: str,
    encoding: str = "unknown",
    format_name: str | None = None,
    detect: bool | None = None,
):
    """
    Print a document with code chunks and inline code blanked out.

    The output has one line per input line, ready to be fed to a spell checker.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the file cannot be read.

    Examples:
        vignette-engines filter vignettes/intro.Rmd | aspell list -H
    """
    path = Path(filepath)
    try:
        config = build_config(path.resolve().parent, detect_from_content=detect)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        lines = knit_filter(path, encoding=encoding, config=config, format_name=format_name)
    except ReadFileError as error:
        raise click.ClickException(str(error)) from error

    for line in lines:
        click.echo(line)


@cli.command(name="engines")
@click.argument("filename", required=False)
def engines_command(filename: str | None = None):
    """
    List the vignette engines, or only those whose pattern matches FILENAME.
    """
    specs = ENGINE_SPECS if filename is None else match_engines(ENGINE_SPECS, filename)
    if filename is not None and not specs:
        raise click.ClickException(f"No vignette engine matches {filename}")
    for spec in specs:
        click.echo(f"{DEFAULT_ENGINE_PACKAGE}::{spec.name}\t{spec.pattern}")


if __name__ == "__main__":
    cli()
