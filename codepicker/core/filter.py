"""
Eligibility filtering of repository tree entries.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable, List, Optional, Sequence

from ..models import FilterCriteria, Language, TreeEntry, language_for_path
from ..infrastructure.logger import logger
from .stats import Counter, Stats


def is_within(path: str, directory: str) -> bool:
    """True when ``path`` is ``directory`` itself or lies beneath it."""

    directory = directory.rstrip('/')
    if not directory:
        return True
    return path == directory or path.startswith(directory + '/')


@dataclass
class FilterResult:
    """Eligible entries of one tree, partitioned by language."""

    by_language: Dict[Language, List[TreeEntry]] = field(default_factory=dict)
    total_files: int = 0
    excluded_files: int = 0

    @property
    def eligible_files(self) -> int:
        return sum(len(entries) for entries in self.by_language.values())

    @property
    def entries(self) -> List[TreeEntry]:
        return [entry for entries in self.by_language.values() for entry in entries]


class FilterEngine:
    """
    Decides which tree entries may be downloaded.

    Rules are applied in a fixed order and each rejection is counted
    under its own statistic so the cause of an empty run is visible.
    """

    def __init__(
        self,
        criteria: FilterCriteria,
        known_hashes: Collection[str],
        stats: Stats,
        log_skipped: bool = False
    ):
        self.criteria = criteria
        self.known_hashes = known_hashes
        self.stats = stats
        self.log_skipped = log_skipped

    @staticmethod
    def language_of(entry: TreeEntry) -> Language:
        return language_for_path(entry.path)

    def _skip(
        self,
        entry: TreeEntry,
        counter: Counter,
        reason: str,
        language: Optional[Language] = None
    ) -> bool:
        self.stats.increment(counter)
        if language is not None:
            self.stats.histogram(counter, language.value)
        if self.log_skipped:
            logger.debug(f"Skipping {entry.path}: {reason}")
        return False

    @staticmethod
    def _path_included(
        path: str, include_dirs: Sequence[str], exclude_dirs: Sequence[str]
    ) -> bool:
        if include_dirs and not any(is_within(path, d) for d in include_dirs):
            return False
        return not any(is_within(path, d) for d in exclude_dirs)

    def is_eligible(self, entry: TreeEntry) -> bool:
        """
        Check one entry against every rule, recording why it was rejected.

        Size and directory rules may be overridden per language, so file
        entries are tagged with their language before those rules run and
        per-language histograms are kept next to the counters.
        """
        criteria = self.criteria

        if not entry.is_file or not entry.url:
            return self._skip(entry, Counter.NOT_FILES, f"not a file ({entry.type.value})")

        language = self.language_of(entry)
        self.stats.histogram(Counter.TREE_FILES, language.value)

        min_size, max_size = criteria.size_range(language)
        if entry.size is None or not min_size <= entry.size <= max_size:
            return self._skip(entry, Counter.WRONG_SIZE, f"size {entry.size}", language)

        include_dirs, exclude_dirs = criteria.directories(language)
        if not self._path_included(entry.path, include_dirs, exclude_dirs):
            return self._skip(entry, Counter.EXCLUDED, "excluded directory", language)

        if entry.sha in self.known_hashes:
            return self._skip(
                entry, Counter.ALREADY_DOWNLOADED, "already downloaded", language
            )

        self.stats.histogram(Counter.LANGUAGE, language.value)
        if not criteria.accepts_language(language):
            return self._skip(entry, Counter.WRONG_LANGUAGE, f"language {language.value}")

        self.stats.increment(Counter.MATCHING)
        self.stats.histogram(Counter.MATCHING, language.value)
        return True

    def filter_entries(self, entries: Iterable[TreeEntry]) -> FilterResult:
        """Partition the eligible entries of a tree by language."""

        by_language: Dict[Language, List[TreeEntry]] = defaultdict(list)
        total = 0
        for entry in entries:
            total += 1
            self.stats.increment(Counter.TREE_FILES)
            if self.is_eligible(entry):
                by_language[self.language_of(entry)].append(entry)

        result = FilterResult(
            by_language=dict(by_language),
            total_files=total,
        )
        result.excluded_files = total - result.eligible_files
        return result
