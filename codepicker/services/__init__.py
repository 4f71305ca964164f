"""
Service layer: GitHub access, content storage and database persistence.
"""

from .github_api import GitHubAPIService
from .download import DownloadService
from .database import DatabaseService
from .project import ProjectService

__all__ = [
    "GitHubAPIService",
    "DownloadService",
    "DatabaseService",
    "ProjectService",
]
