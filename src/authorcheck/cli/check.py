"""authorcheck check command."""

from pathlib import Path

import click
import structlog

from authorcheck.author_config import AuthorConfig
from authorcheck.cache import open_store
from authorcheck.comparator import AuthorListComparator, AuthorMismatch
from authorcheck.config import settings
from authorcheck.errors import AuthorCheckError
from authorcheck.extractors import ExtractorKind, GitAuthorExtractor, GitScope, create_extractor
from authorcheck.git import GitRepository
from authorcheck.logging import configure_logging

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILE = ".authorcheck.yml"


@click.command()
@click.argument(
    "include",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
@click.option("--headers", is_flag=True, help="Validate @author tags in source file headers.")
@click.option("--composer", is_flag=True, help="Validate authors in composer.json.")
@click.option("--bower", is_flag=True, help="Validate authors in bower.json.")
@click.option("--packages", is_flag=True, help="Validate authors in package.json.")
@click.option(
    "--config",
    "-f",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path to the YAML configuration file; skipped when it does not exist.",
)
@click.option(
    "--do-not-ignore-well-known-bots",
    "keep_bots",
    is_flag=True,
    help="Do not ignore the bundled list of well-known bots.",
)
@click.option(
    "--ignore",
    multiple=True,
    help='Author to ignore (format: "John Doe <j.doe@acme.org>").',
)
@click.option("--exclude", multiple=True, help="Path pattern to exclude.")
@click.option(
    "--scope",
    type=click.Choice([scope.value for scope in GitScope]),
    default=GitScope.FILE.value,
    show_default=True,
    help="Compare against the authors of each file or of the whole project.",
)
@click.option("--no-cache", is_flag=True, help="Do not use the persistent history cache.")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug output).")
def check(
    include: tuple[Path, ...],
    headers: bool,
    composer: bool,
    bower: bool,
    packages: bool,
    config_file: Path,
    keep_bots: bool,
    ignore: tuple[str, ...],
    exclude: tuple[str, ...],
    scope: str,
    no_cache: bool,
    verbose: int,
) -> None:
    """Check that all authors are mentioned in each file.

    INCLUDE are the directories or files to search; they must lie within a
    git repository. Defaults to the current directory.
    """
    if verbose:
        configure_logging("debug" if verbose > 1 else "info", settings.log_format)

    kinds = [
        kind
        for kind, selected in (
            (ExtractorKind.HEADERS, headers),
            (ExtractorKind.COMPOSER, composer),
            (ExtractorKind.BOWER, bower),
            (ExtractorKind.PACKAGES, packages),
        )
        if selected
    ]
    if not kinds:
        raise click.UsageError(
            "You must select at least one validation to run "
            "(--headers, --composer, --bower or --packages)."
        )

    include = include or (Path("."),)

    try:
        config = AuthorConfig()
        if not keep_bots:
            config.add_well_known_bots()
        if config_file.is_file():
            config.add_from_yaml(config_file)
        config.ignore_authors(list(ignore))
        config.exclude_paths(list(exclude))
        config.include_paths([str(path.resolve()) for path in include])

        start = include[0].resolve()
        if start.is_file():
            start = start.parent
        repository = GitRepository.discover(
            start, store=open_store(not no_cache), config=config
        )
        reference = GitAuthorExtractor(config, repository, GitScope(scope))
        comparator = AuthorListComparator(config)

        mismatches: list[AuthorMismatch] = []
        for kind in kinds:
            extractor = create_extractor(kind, config, repository.root)
            mismatches.extend(comparator.compare(extractor, reference))
    except AuthorCheckError as e:
        raise click.ClickException(str(e))

    for mismatch in mismatches:
        click.echo(mismatch.describe())

    logger.info("author_check_finished", mismatches=len(mismatches))
    if mismatches:
        raise SystemExit(1)
