"""authorcheck CLI main entry point.

This module provides the main CLI interface for authorcheck.
"""

import click

from authorcheck import __version__
from authorcheck.config import settings
from authorcheck.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="authorcheck")
def cli() -> None:
    """authorcheck - validate declared authors against git history.

    Checks that file headers and package manifests name exactly the
    people who wrote the code, following renames and copies.
    """
    configure_logging(settings.log_level, settings.log_format)


# Import and register subcommands
from authorcheck.cli.authors import authors  # noqa: E402
from authorcheck.cli.cache import cache  # noqa: E402
from authorcheck.cli.check import check  # noqa: E402

cli.add_command(check)
cli.add_command(authors)
cli.add_command(cache)
