"""
Core data models API surface for Codepicker.

This file re-exports model classes from domain-specific modules so they
can be imported as `from codepicker.models import X`.
"""

from .github import (
    EntryType,
    Repository,
    TreeEntry,
    Tree,
)
from .language import (
    Language,
    language_for_path,
    derivable_languages,
)
from .download import (
    RunState,
    LanguageRule,
    FilterCriteria,
    Downloaded,
    Failed,
    Outcome,
    DownloadRecord,
    Database,
)
from .config import DownloadConfig
from .project import ProjectEntry, parse_project

__all__ = [
    # GitHub models
    "EntryType",
    "Repository",
    "TreeEntry",
    "Tree",
    # Language models
    "Language",
    "language_for_path",
    "derivable_languages",
    # Download models
    "RunState",
    "LanguageRule",
    "FilterCriteria",
    "Downloaded",
    "Failed",
    "Outcome",
    "DownloadRecord",
    "Database",
    # Config models
    "DownloadConfig",
    # Project files
    "ProjectEntry",
    "parse_project",
]
