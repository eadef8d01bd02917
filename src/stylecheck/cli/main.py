"""stylecheck CLI entry point: Click group with subcommands."""

import click

from stylecheck import __version__


@click.group()
@click.version_option(version=__version__, prog_name="stylecheck")
def cli() -> None:
    """stylecheck - check Sass/CSS sources against the house style guide."""


# Import and register subcommands
from stylecheck.cli.check import check  # noqa: E402

cli.add_command(check)
