"""
Download domain models for Codepicker.

This module contains data classes and enums representing filtering criteria,
per-entry download outcomes and the database of processed content.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from .github import TreeEntry
from .language import Language


class RunState(Enum):
    """States a repository run moves through."""

    IDLE = "idle"
    FETCHING_TREE = "fetching_tree"
    SELECTING = "selecting"
    DOWNLOADING = "downloading"
    MERGED = "merged"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class LanguageRule:
    """
    Per-language overrides of the run-wide size and directory rules.

    Fields left as None fall back to the run-wide value.
    """

    min_size: Optional[int] = None
    max_size: Optional[float] = None
    include_dirs: Optional[Tuple[str, ...]] = None
    exclude_dirs: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        for name in ('include_dirs', 'exclude_dirs'):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(value))
        if self.min_size is not None and self.min_size < 0:
            raise ValueError("min_size cannot be negative")


@dataclass(frozen=True)
class FilterCriteria:
    """Inclusion rules for one run. Collections are frozen on construction."""

    min_size: int = 0
    max_size: float = float('inf')
    include_dirs: Tuple[str, ...] = ()
    exclude_dirs: Tuple[str, ...] = ()
    languages: FrozenSet[Language] = frozenset()
    max_items: Optional[int] = None
    quotas: Mapping[Language, int] = field(default_factory=dict, hash=False)
    rules: Mapping[Language, LanguageRule] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'include_dirs', tuple(self.include_dirs))
        object.__setattr__(self, 'exclude_dirs', tuple(self.exclude_dirs))
        object.__setattr__(self, 'languages', frozenset(self.languages))
        object.__setattr__(self, 'quotas', MappingProxyType(dict(self.quotas)))
        object.__setattr__(self, 'rules', MappingProxyType(dict(self.rules)))

        if self.min_size < 0:
            raise ValueError("min_size cannot be negative")
        if self.max_items is not None and self.max_items <= 0:
            raise ValueError("max_items must be positive")
        for language, count in self.quotas.items():
            if count <= 0:
                raise ValueError(f"Quota for {language.value} must be positive")
        if self.min_size > self.max_size:
            raise ValueError("min_size cannot exceed max_size")
        for language in self.rules:
            min_size, max_size = self.size_range(language)
            if min_size > max_size:
                raise ValueError(f"min_size cannot exceed max_size for {language.value}")

    @property
    def accepts_all_languages(self) -> bool:
        return not self.languages or Language.ALL in self.languages

    def accepts_language(self, language: Language) -> bool:
        if language is Language.UNKNOWN:
            return False
        return self.accepts_all_languages or language in self.languages

    def size_range(self, language: Language) -> Tuple[int, float]:
        """Inclusive size bounds for files of ``language``."""

        rule = self.rules.get(language)
        if rule is None:
            return self.min_size, self.max_size
        return (
            self.min_size if rule.min_size is None else rule.min_size,
            self.max_size if rule.max_size is None else rule.max_size,
        )

    def directories(self, language: Language) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Include and exclude directories for files of ``language``."""

        rule = self.rules.get(language)
        if rule is None:
            return self.include_dirs, self.exclude_dirs
        return (
            self.include_dirs if rule.include_dirs is None else rule.include_dirs,
            self.exclude_dirs if rule.exclude_dirs is None else rule.exclude_dirs,
        )


@dataclass(frozen=True)
class Downloaded:
    """Successful outcome: where the content was stored."""

    destination: str


@dataclass(frozen=True)
class Failed:
    """Failed outcome: why the content could not be fetched or stored."""

    error: str


Outcome = Union[Downloaded, Failed]


@dataclass(frozen=True)
class DownloadRecord:
    """A processed tree entry, keyed by its content hash in the database."""

    entry: TreeEntry
    language: Language
    outcome: Outcome

    @property
    def sha(self) -> str:
        return self.entry.sha

    @property
    def is_successful(self) -> bool:
        return isinstance(self.outcome, Downloaded)

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        data['language'] = self.language.value
        if isinstance(self.outcome, Downloaded):
            data['destination'] = self.outcome.destination
        else:
            data['error'] = self.outcome.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DownloadRecord":
        has_destination = 'destination' in data
        has_error = 'error' in data
        if has_destination == has_error:
            raise ValueError(
                f"Record for {data.get('path')!r} must have exactly one of "
                "'destination' or 'error'"
            )

        outcome: Outcome = (
            Downloaded(str(data['destination'])) if has_destination
            else Failed(str(data['error']))
        )
        return cls(
            entry=TreeEntry.from_api(data),
            language=Language(data.get('language', Language.UNKNOWN.value)),
            outcome=outcome,
        )


Database = Dict[str, DownloadRecord]


__all__ = [
    "RunState",
    "LanguageRule",
    "FilterCriteria",
    "Downloaded",
    "Failed",
    "Outcome",
    "DownloadRecord",
    "Database",
]
