"""
Python API for Codepicker.

``RepositorySampler`` wires the GitHub service, rate limiter, content
storage and database together and runs either a single repository or
the repositories of a project file.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from ..core import DownloadOrchestrator, Stats
from ..core.sampler import RandomSource
from ..infrastructure.logger import logger
from ..infrastructure.rate_limiter import RateLimiter
from ..models import Database, DownloadConfig, FilterCriteria, ProjectEntry, Repository
from ..services import DatabaseService, DownloadService, GitHubAPIService


DATABASE_FILENAME = 'database.json'


class RepositorySampler:
    """
    High-level entry point for sampling files out of GitHub repositories.

    Example:
        >>> sampler = RepositorySampler(auth_token="ghp_...")
        >>> database = await sampler.sample("owner/repo", Path("./out"))
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        config: Optional[DownloadConfig] = None,
        verbose: bool = False,
        rng: Optional[RandomSource] = None
    ):
        self.auth_token = auth_token
        self.config = config or DownloadConfig()
        self.verbose = verbose
        self.rng = rng
        self.stats: Optional[Stats] = None

        self.set_verbose(verbose)

        self.rate_limiter = RateLimiter(qps=self.config.qps)
        self.github_service = GitHubAPIService(
            auth_token=auth_token, timeout=self.config.timeout
        )

    def set_verbose(self, verbose: bool) -> None:
        """Switch debug logging on or off."""

        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def create_orchestrator(self, destination: Path) -> DownloadOrchestrator:
        download_service = DownloadService(destination, dry_run=self.config.dry_run)
        return DownloadOrchestrator(
            github_service=self.github_service,
            download_service=download_service,
            rate_limiter=self.rate_limiter,
            max_concurrent_downloads=self.config.max_concurrent_downloads,
            rng=self.rng,
            log_skipped=self.config.log_skipped,
            safety_ceiling=self.config.safety_ceiling,
        )

    async def sample(
        self,
        repository: Union[str, Repository],
        destination: Path,
        revision: str = 'master',
        criteria: Optional[FilterCriteria] = None,
        database_path: Optional[Path] = None
    ) -> Database:
        """
        Run one repository: load the database, download, save the database.

        The database is not written in dry-run mode. Statistics of the run
        are kept on ``self.stats``.

        Raises:
            DatabaseError: If the existing database cannot be read
            DownloadError: If the repository tree cannot be fetched
        """
        if isinstance(repository, str):
            repository = Repository.parse(repository)
        entry = ProjectEntry(repository, revision, criteria or FilterCriteria())
        return await self.sample_project([entry], destination, database_path)

    async def sample_project(
        self,
        entries: Sequence[ProjectEntry],
        destination: Path,
        database_path: Optional[Path] = None
    ) -> Database:
        """
        Run several repositories in order against one shared database.

        The database is saved after every repository, so a fatal error on
        a later repository keeps what earlier ones downloaded. Statistics
        accumulate over the whole project.

        Raises:
            DatabaseError: If the existing database cannot be read
            DownloadError: If a repository tree cannot be fetched
        """
        destination = Path(destination)
        database_service = DatabaseService(database_path or destination / DATABASE_FILENAME)

        database = database_service.load()
        languages = frozenset().union(*(entry.criteria.languages for entry in entries))
        self.stats = Stats(languages)

        orchestrator = self.create_orchestrator(destination)
        for entry in entries:
            database = await orchestrator.process_repository(
                entry.repository, entry.revision, entry.criteria, database, self.stats
            )
            if not self.config.dry_run:
                database_service.save(database)

        if self.config.dry_run:
            logger.info("Dry-run: database not written")
        return database

    async def close(self) -> None:
        await self.github_service.close()

    async def __aenter__(self) -> "RepositorySampler":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
