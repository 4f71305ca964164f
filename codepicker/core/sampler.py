"""
Random selection of eligible entries.

Two strategies share the ``Sampler`` interface: per-language quotas picked
once up front, and incremental draws bounded by a global cap.
"""

import itertools
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, MutableSequence, Optional, Protocol, TypeVar

from ..models import FilterCriteria, Language, TreeEntry


T = TypeVar('T')


class RandomSource(Protocol):
    """Anything that can pick an integer in ``[0, stop)``."""

    def randrange(self, stop: int) -> int: ...


def fisher_yates(items: MutableSequence[T], rng: RandomSource) -> MutableSequence[T]:
    """Shuffle ``items`` in place, every permutation equally likely."""

    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


class Sampler(ABC):
    """Hands out entries to download, batch by batch."""

    @property
    @abstractmethod
    def remaining(self) -> int:
        """Entries that can still be handed out."""

    @abstractmethod
    def next_batch(self, limit: Optional[int] = None) -> List[TreeEntry]:
        """Take up to ``limit`` entries (all remaining when None)."""


class QuotaSampler(Sampler):
    """
    Uniform random subset of each language, sized by its quota.

    The picks are handed out round-robin across languages, so a global cap
    smaller than the sum of the quotas still spreads over every language.
    """

    def __init__(
        self,
        partitions: Mapping[Language, List[TreeEntry]],
        quotas: Mapping[Language, int],
        rng: RandomSource
    ):
        picks: List[List[TreeEntry]] = []
        for language, quota in quotas.items():
            candidates = list(partitions.get(language, []))
            fisher_yates(candidates, rng)
            picks.append(candidates[:min(quota, len(candidates))])

        self._selection: List[TreeEntry] = [
            entry
            for row in itertools.zip_longest(*picks)
            for entry in row
            if entry is not None
        ]

    @property
    def remaining(self) -> int:
        return len(self._selection)

    def next_batch(self, limit: Optional[int] = None) -> List[TreeEntry]:
        count = self.remaining if limit is None else min(limit, self.remaining)
        batch, self._selection = self._selection[:count], self._selection[count:]
        return batch


class IncrementalSampler(Sampler):
    """Draws entries one random index at a time from a shrinking pool."""

    def __init__(self, entries: List[TreeEntry], rng: RandomSource):
        self._pool = list(entries)
        self._rng = rng

    @property
    def remaining(self) -> int:
        return len(self._pool)

    def _draw(self) -> TreeEntry:
        index = self._rng.randrange(len(self._pool))
        self._pool[index], self._pool[-1] = self._pool[-1], self._pool[index]
        return self._pool.pop()

    def next_batch(self, limit: Optional[int] = None) -> List[TreeEntry]:
        count = self.remaining if limit is None else min(limit, self.remaining)
        return [self._draw() for _ in range(count)]


def create_sampler(
    partitions: Dict[Language, List[TreeEntry]],
    criteria: FilterCriteria,
    rng: Optional[RandomSource] = None
) -> Sampler:
    """Quota sampling when quotas are configured, incremental otherwise."""

    rng = rng if rng is not None else random.Random()
    if criteria.quotas:
        return QuotaSampler(partitions, criteria.quotas, rng)
    entries = [entry for group in partitions.values() for entry in group]
    return IncrementalSampler(entries, rng)
