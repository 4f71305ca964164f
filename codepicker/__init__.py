"""
Codepicker: sample and download source files from GitHub repositories.
"""

from .interfaces.api import RepositorySampler
from .models import DownloadConfig, FilterCriteria, Language, LanguageRule, Repository

__version__ = "0.1.0"

__all__ = [
    "RepositorySampler",
    "DownloadConfig",
    "FilterCriteria",
    "LanguageRule",
    "Language",
    "Repository",
]
