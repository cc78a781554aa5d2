"""authorcheck cache CLI commands."""

import click

from authorcheck.cache import SqliteCacheStore
from authorcheck.config import settings


@click.group()
def cache() -> None:
    """History cache management commands."""
    pass


@cache.command()
def clear() -> None:
    """Remove every entry from the persistent history cache."""
    if not settings.cache_path.exists():
        click.echo("Cache is empty.")
        return

    removed = SqliteCacheStore(settings.cache_path).clear()
    click.echo(f"Removed {removed} cache entries from {settings.cache_path}")


@cache.command()
def path() -> None:
    """Print the location of the history cache."""
    click.echo(str(settings.cache_path))
