"""
Orchestrator for sampling and downloading repository files
with rate limiting, concurrency and per-file error handling.
"""

import asyncio
from typing import List, Optional

from ..models import (
    Database, Downloaded, DownloadRecord, Failed, FilterCriteria,
    Repository, RunState, Tree, TreeEntry
)
from ..services import GitHubAPIService, DownloadService
from ..infrastructure.rate_limiter import RateLimiter
from .database import merge_databases
from .filter import FilterEngine
from .sampler import RandomSource, create_sampler
from .stats import Counter, Stats

from codepicker.infrastructure.logger import logger


DEFAULT_SAFETY_CEILING = 10_000


####
##      DOWNLOAD ORCHESTRATOR
#####
class DownloadOrchestrator:
    """
    Drives one repository run: fetch the tree, select entries,
    download them in rate-limited batches and merge the outcomes
    into the database.
    """

    def __init__(
        self,
        github_service: GitHubAPIService,
        download_service: DownloadService,
        rate_limiter: RateLimiter,
        max_concurrent_downloads: int = 10,
        rng: Optional[RandomSource] = None,
        log_skipped: bool = False,
        safety_ceiling: int = DEFAULT_SAFETY_CEILING
    ):
        self.github_service = github_service
        self.download_service = download_service
        self.rate_limiter = rate_limiter
        self.max_concurrent_downloads = max_concurrent_downloads
        self.rng = rng
        self.log_skipped = log_skipped
        self.safety_ceiling = safety_ceiling
        self._semaphore = asyncio.Semaphore(max_concurrent_downloads)
        self.state = RunState.IDLE

    def _download_cap(self, criteria: FilterCriteria) -> int:
        if criteria.max_items is None:
            return self.safety_ceiling
        return min(criteria.max_items, self.safety_ceiling)

    async def process_repository(
        self,
        repository: Repository,
        revision: str,
        criteria: FilterCriteria,
        database: Database,
        stats: Stats
    ) -> Database:
        """
        Sample and download files of a repository.

        Args:
            repository: Repository to read the tree of
            revision: Branch, tag or commit sha
            criteria: Filtering and sampling rules
            database: Records of previously processed content
            stats: Collector for this run's counters

        Returns:
            The database merged with this run's records

        Raises:
            Exception: Whatever the tree provider raised; the run is aborted
        """
        logger.debug(f"Processing {repository.display_name}@{revision}")

        tree = await self._fetch_tree(repository, revision)

        # Selection
        self.state = RunState.SELECTING
        stats.set(Counter.DATABASE_FILES, len(database))
        filter_engine = FilterEngine(
            criteria, database.keys(), stats, log_skipped=self.log_skipped
        )
        filter_result = filter_engine.filter_entries(tree.entries)
        sampler = create_sampler(filter_result.by_language, criteria, self.rng)

        logger.debug(
            f"{filter_result.eligible_files}/{filter_result.total_files} "
            "entries eligible for download"
        )

        # Download in batches until the pool runs dry or the cap is hit
        self.state = RunState.DOWNLOADING
        cap = self._download_cap(criteria)
        # Failed entries use up the cap like successful ones
        records: List[DownloadRecord] = []
        while sampler.remaining and len(records) < cap:
            batch = sampler.next_batch(cap - len(records))
            records.extend(await self._download_batch(batch, filter_engine, stats))

        if len(records) >= self.safety_ceiling:
            logger.warning(
                f"Stopped after {len(records)} entries, the per-run ceiling"
            )

        merged = merge_databases(database, records)
        self.state = RunState.MERGED

        downloaded = sum(1 for record in records if record.is_successful)
        logger.info(
            f"{repository.display_name}: {downloaded} downloaded, "
            f"{len(records) - downloaded} failed"
        )
        self.state = RunState.DONE
        return merged

    async def _fetch_tree(self, repository: Repository, revision: str) -> Tree:
        self.state = RunState.FETCHING_TREE
        try:
            tree = await self.rate_limiter.schedule(
                lambda: self.github_service.fetch_tree(repository, revision)
            )
        except Exception as e:
            self.state = RunState.FAILED
            logger.error(f"Failed to fetch tree of {repository.display_name}@{revision}: {e}")
            raise

        if tree.truncated:
            logger.warning(
                f"Tree of {repository.display_name}@{revision} is truncated, "
                "some files will not be considered"
            )
        return tree

    async def _download_batch(
        self,
        batch: List[TreeEntry],
        filter_engine: FilterEngine,
        stats: Stats
    ) -> List[DownloadRecord]:
        """
        Download a batch of entries concurrently.

        Every entry yields a record; failures never abort the batch.
        """
        tasks = [
            self._download_single_file_with_semaphore(entry, filter_engine, stats)
            for entry in batch
        ]
        return list(await asyncio.gather(*tasks))

    async def _download_single_file_with_semaphore(
        self,
        entry: TreeEntry,
        filter_engine: FilterEngine,
        stats: Stats
    ) -> DownloadRecord:
        async with self._semaphore:
            return await self._download_single_file(entry, filter_engine, stats)

    async def _download_single_file(
        self,
        entry: TreeEntry,
        filter_engine: FilterEngine,
        stats: Stats
    ) -> DownloadRecord:
        """
        Fetch and store one entry.

        Returns:
            A record holding either the destination or the error message
        """
        language = filter_engine.language_of(entry)
        try:
            content = await self.rate_limiter.schedule(
                lambda: self.github_service.download_file(entry.url)
            )
            destination = await self.download_service.save(language, entry, content)

        except Exception as e:
            logger.error(f"Error downloading {entry.path}: {e}")
            stats.increment(Counter.ERRORS)
            return DownloadRecord(entry=entry, language=language, outcome=Failed(str(e)))

        logger.debug(f"Downloaded {entry.path} -> {destination}")
        stats.increment(Counter.FILES)
        stats.histogram(Counter.FILES, language.value)
        return DownloadRecord(
            entry=entry, language=language, outcome=Downloaded(destination)
        )
