"""
Exception taxonomy and API error translation for Codepicker.
"""

import functools
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from .logger import logger


T = TypeVar('T')


class DownloadError(Exception):
    """Base class for errors raised while talking to GitHub or storing data."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        if self.original_error is not None:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class RateLimitError(DownloadError):
    """GitHub refused the request because the rate limit is exhausted."""


class AuthenticationError(DownloadError):
    """The token is missing, invalid or lacks access."""


class RepositoryNotFoundError(DownloadError):
    """Repository, revision or blob does not exist."""


class DatabaseError(DownloadError):
    """The persisted database could not be read or written."""


class ProjectError(DownloadError):
    """A project file could not be read or is malformed."""


def _translate_status_error(error: httpx.HTTPStatusError) -> DownloadError:
    response = error.response
    status = response.status_code
    url = str(error.request.url)

    if status == 401:
        return AuthenticationError(f"Authentication failed for {url}")
    if status == 429 or (
        status == 403 and response.headers.get('x-ratelimit-remaining') == '0'
    ):
        return RateLimitError(f"GitHub API rate limit exceeded for {url}")
    if status == 403:
        return AuthenticationError(f"Access denied for {url}")
    if status == 404:
        return RepositoryNotFoundError(f"Not found: {url}")
    return DownloadError(f"Failed to fetch {url}: HTTP {status}", error)


def handle_api_error(
    func: Callable[..., Awaitable[T]]
) -> Callable[..., Awaitable[T]]:
    """Translate httpx failures raised by a coroutine into ``DownloadError``s."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except DownloadError:
            raise
        except httpx.HTTPStatusError as e:
            translated = _translate_status_error(e)
            logger.debug(f"{func.__name__} failed: {translated}")
            raise translated from e
        except httpx.RequestError as e:
            logger.debug(f"{func.__name__} failed: {e}")
            raise DownloadError(f"Request failed in {func.__name__}", e) from e

    return wrapper
