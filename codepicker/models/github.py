"""
GitHub domain models for Codepicker.

This module contains strongly typed data classes and enums representing
GitHub repositories and the entries of their flattened git trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntryType(Enum):
    """Type of a node in a git tree."""

    BLOB = "blob"       # Regular file
    TREE = "tree"       # Directory
    COMMIT = "commit"   # Submodule


@dataclass(frozen=True)
class Repository:
    """Immutable repository identifier."""

    owner: str
    name: str

    @property
    def display_name(self) -> str:
        return f'{self.owner}/{self.name}'

    @classmethod
    def parse(cls, value: str) -> "Repository":
        """Parse an ``owner/name`` repository identifier."""

        owner, sep, name = value.strip().partition('/')
        if not sep or not owner or not name or '/' in name:
            raise ValueError("Repository must be in the format owner/repo")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class TreeEntry:
    """One node of a repository's flattened file tree."""

    path: str
    mode: str
    type: EntryType
    sha: str
    size: Optional[int] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Tree entry path is required")
        if not isinstance(self.type, EntryType):
            raise ValueError(f"Invalid entry type: {self.type}")
        if self.size is not None and self.size < 0:
            raise ValueError("Tree entry size cannot be negative")

    @property
    def is_file(self) -> bool:
        return self.type is EntryType.BLOB

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TreeEntry":
        """Build an entry from a GitHub ``git/trees`` item."""

        try:
            entry_type = EntryType(data.get('type'))
        except ValueError:
            raise ValueError(f"Invalid entry type: {data.get('type')}") from None

        return cls(
            path=data.get('path', ''),
            mode=data.get('mode', ''),
            type=entry_type,
            sha=data.get('sha', ''),
            size=data.get('size'),
            url=data.get('url'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'path': self.path,
            'mode': self.mode,
            'type': self.type.value,
            'sha': self.sha,
        }
        if self.size is not None:
            data['size'] = self.size
        if self.url is not None:
            data['url'] = self.url
        return data


@dataclass
class Tree:
    """A repository tree listing at one revision."""

    sha: str
    url: str
    truncated: bool = False
    entries: List[TreeEntry] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Tree":
        return cls(
            sha=data.get('sha', ''),
            url=data.get('url', ''),
            truncated=bool(data.get('truncated', False)),
            entries=[TreeEntry.from_api(item) for item in data.get('tree', [])],
        )


__all__ = [
    "EntryType",
    "Repository",
    "TreeEntry",
    "Tree",
]
