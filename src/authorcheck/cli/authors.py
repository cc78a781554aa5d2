"""authorcheck authors command."""

from pathlib import Path

import click

from authorcheck.cache import open_store
from authorcheck.errors import AuthorCheckError
from authorcheck.git import GitRepository


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--no-cache", is_flag=True, help="Do not use the persistent history cache.")
def authors(path: Path, no_cache: bool) -> None:
    """Print the history authors of PATH, following renames and copies."""
    path = path.resolve()
    try:
        repository = GitRepository.discover(path.parent, store=open_store(not no_cache))
        found = repository.authors_for(path)
    except AuthorCheckError as e:
        raise click.ClickException(str(e))

    if found is None:
        raise click.ClickException(f"{path} has no git history")

    for author in found:
        click.echo(str(author))
