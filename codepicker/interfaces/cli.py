"""
Command line interface for Codepicker.
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

import typer

from ..infrastructure.error_handler import DownloadError, ProjectError
from ..infrastructure.logger import logger
from ..models import Database, DownloadConfig, FilterCriteria, Language, Repository
from ..services import ProjectService
from .api import RepositorySampler


app = typer.Typer(
    help="Sample and download source files from GitHub repositories.",
    add_completion=False,
)


def parse_quotas(values: List[str]) -> Dict[Language, int]:
    """Parse ``LANG=COUNT`` pairs into per-language quotas."""

    quotas: Dict[Language, int] = {}
    for value in values:
        name, sep, count = value.partition('=')
        try:
            language = Language(name.strip())
            if not sep or language in (Language.ALL, Language.UNKNOWN):
                raise ValueError
            quotas[language] = int(count)
        except ValueError:
            raise typer.BadParameter(
                f"Invalid quota {value!r}, expected LANG=COUNT", param_hint='--quota'
            ) from None
    return quotas


def parse_languages(values: List[str]) -> frozenset:
    languages = set()
    for value in values:
        try:
            language = Language(value)
        except ValueError:
            raise typer.BadParameter(
                f"Unknown language {value!r}", param_hint='--language'
            ) from None
        if language is Language.UNKNOWN:
            raise typer.BadParameter("'unknown' cannot be selected", param_hint='--language')
        languages.add(language)
    return frozenset(languages)


DEFAULT_MAX_FILES = 10


@app.command()
def download(
    repository: str = typer.Argument(..., help="GitHub repository as owner/name"),
    directory: Path = typer.Argument(..., help="Directory to download files to"),
    revision: str = typer.Option('master', '--revision', '-r', help="Branch, tag or commit"),
    include: List[str] = typer.Option([], '--include', '-I', help="Directory to include"),
    exclude: List[str] = typer.Option([], '--exclude', '-X', help="Directory to exclude"),
    min_size: int = typer.Option(500, '--min-size', help="Minimum file size to download"),
    max_size: int = typer.Option(5000, '--max-size', help="Maximum file size to download"),
    language: List[str] = typer.Option(['all'], '--language', '-l', help="File types to download"),
    quota: List[str] = typer.Option(
        [], '--quota', help="Per-language sample size as LANG=COUNT"
    ),
    max_files: Optional[int] = typer.Option(
        None, '--max-files',
        help=f"Maximum number of files to download "
             f"(default: {DEFAULT_MAX_FILES}, none with --quota)",
    ),
    qps: float = typer.Option(20.0, '--qps', help="Number of GitHub API requests per second"),
    concurrency: int = typer.Option(5, '--concurrency', help="Maximum parallel downloads"),
    database: Optional[Path] = typer.Option(
        None, '--database', help="Database file (default: DIRECTORY/database.json)"
    ),
    dry_run: bool = typer.Option(
        False, '--dry-run', help="Do not perform any modifications to local file system"
    ),
    log_skipped: bool = typer.Option(False, '--log-skipped', help="Log every skipped entry"),
    verbose: bool = typer.Option(False, '--verbose', '-v', help="Enable debug logging"),
    token: Optional[str] = typer.Option(
        None, '--token', envvar='GITHUB_TOKEN', help="GitHub API token"
    ),
) -> None:
    """Download a random sample of files from REPOSITORY into DIRECTORY."""

    try:
        repo = Repository.parse(repository)
        quotas = parse_quotas(quota)
        if max_files is None and not quotas:
            max_files = DEFAULT_MAX_FILES
        criteria = FilterCriteria(
            min_size=min_size,
            max_size=max_size,
            include_dirs=include,
            exclude_dirs=exclude,
            languages=parse_languages(language),
            max_items=max_files,
            quotas=quotas,
        )
        config = _make_config(qps, concurrency, dry_run, log_skipped)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None

    sampler = RepositorySampler(auth_token=token, config=config, verbose=verbose)
    _execute(sampler, lambda: sampler.sample(
        repo, directory, revision=revision, criteria=criteria, database_path=database,
    ))


@app.command()
def project(
    project_file: Path = typer.Argument(..., help="JSON list of repositories to sample"),
    directory: Path = typer.Argument(..., help="Directory to download files to"),
    qps: float = typer.Option(20.0, '--qps', help="Number of GitHub API requests per second"),
    concurrency: int = typer.Option(5, '--concurrency', help="Maximum parallel downloads"),
    database: Optional[Path] = typer.Option(
        None, '--database', help="Database file (default: DIRECTORY/database.json)"
    ),
    dry_run: bool = typer.Option(
        False, '--dry-run', help="Do not perform any modifications to local file system"
    ),
    log_skipped: bool = typer.Option(False, '--log-skipped', help="Log every skipped entry"),
    verbose: bool = typer.Option(False, '--verbose', '-v', help="Enable debug logging"),
    token: Optional[str] = typer.Option(
        None, '--token', envvar='GITHUB_TOKEN', help="GitHub API token"
    ),
) -> None:
    """Sample every repository listed in PROJECT_FILE into DIRECTORY."""

    try:
        entries = ProjectService(project_file).load()
        config = _make_config(qps, concurrency, dry_run, log_skipped)
    except (ProjectError, ValueError) as e:
        raise typer.BadParameter(str(e)) from None

    sampler = RepositorySampler(auth_token=token, config=config, verbose=verbose)
    _execute(sampler, lambda: sampler.sample_project(
        entries, directory, database_path=database,
    ))


def _make_config(
    qps: float, concurrency: int, dry_run: bool, log_skipped: bool
) -> DownloadConfig:
    return DownloadConfig(
        qps=qps,
        max_concurrent_downloads=concurrency,
        dry_run=dry_run,
        log_skipped=log_skipped,
    )


def _execute(
    sampler: RepositorySampler, run: Callable[[], Awaitable[Database]]
) -> None:
    """Run the sampler to completion, print its statistics, map errors to exit codes."""

    async def _run() -> None:
        async with sampler:
            await run()

    try:
        asyncio.run(_run())
    except DownloadError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(f"Run failed: {e}")
        raise typer.Exit(code=1)

    if sampler.stats is not None:
        sampler.stats.print()


def main() -> None:
    app()


if __name__ == '__main__':
    main()
