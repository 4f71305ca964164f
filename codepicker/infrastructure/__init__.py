"""
Infrastructure layer: logging, rate limiting and error handling.
"""

from .error_handler import (
    DownloadError,
    RateLimitError,
    AuthenticationError,
    RepositoryNotFoundError,
    DatabaseError,
    ProjectError,
    handle_api_error,
)
from .logger import logger
from .rate_limiter import RateLimiter

__all__ = [
    "DownloadError",
    "RateLimitError",
    "AuthenticationError",
    "RepositoryNotFoundError",
    "DatabaseError",
    "ProjectError",
    "handle_api_error",
    "logger",
    "RateLimiter",
]
