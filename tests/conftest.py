"""
Shared helpers for building fake trees and entries.
"""

import pytest

from codepicker.infrastructure.logger import logger
from codepicker.models import EntryType, Repository, Tree, TreeEntry


DEFAULT_REPO = Repository(owner="owner", name="repo")


def fake_entry(path: str, **overrides) -> TreeEntry:
    """Blob entry whose sha and url are derived from its path."""
    values = dict(
        path=path,
        mode="100644",
        type=EntryType.BLOB,
        sha=f"sha{path}",
        size=100,
        url=f"http://example.com/{path}",
    )
    values.update(overrides)
    return TreeEntry(**values)


def fake_tree(*entries) -> Tree:
    return Tree(
        sha="sha",
        url="http://example.com/url",
        truncated=False,
        entries=[fake_entry(e) if isinstance(e, str) else e for e in entries],
    )


class FirstIndexRandom:
    """Random source that always picks index 0."""

    def randrange(self, stop: int) -> int:
        return 0


class LastIndexRandom:
    """Random source that always picks the last index."""

    def randrange(self, stop: int) -> int:
        return stop - 1


@pytest.fixture(autouse=True)
def reset_logger_level():
    """Verbose-mode tests change the package logger level; restore it."""
    level = logger.level
    yield
    logger.setLevel(level)
