"""
GitHub REST API service: tree listing and raw content download.
"""

from typing import Dict, Optional

import httpx

from ..models import Repository, Tree
from ..infrastructure.error_handler import handle_api_error
from ..infrastructure.logger import logger


GITHUB_API_URL = 'https://api.github.com'
GITHUB_API_VERSION = '2022-11-28'


class GitHubAPIService:
    """
    Thin async client for the GitHub endpoints Codepicker needs.

    Pacing is the caller's job; every method issues exactly one request.
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.auth_token = auth_token
        self._client = client or httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            timeout=timeout,
            follow_redirects=True,
        )

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {
            'Accept': accept,
            'X-GitHub-Api-Version': GITHUB_API_VERSION,
        }
        if self.auth_token:
            headers['Authorization'] = f'Bearer {self.auth_token}'
        return headers

    @handle_api_error
    async def fetch_tree(self, repository: Repository, revision: str) -> Tree:
        """Fetch the recursive tree of ``repository`` at ``revision``."""

        url = f'{GITHUB_API_URL}/repos/{repository.owner}/{repository.name}/git/trees/{revision}'
        logger.debug(f"Fetching tree {url}")
        response = await self._client.get(
            url,
            params={'recursive': '1'},
            headers=self._headers('application/vnd.github+json'),
        )
        response.raise_for_status()
        return Tree.from_api(response.json())

    @handle_api_error
    async def download_file(self, url: str) -> bytes:
        """Download the raw bytes of a blob."""

        response = await self._client.get(
            url, headers=self._headers('application/vnd.github.raw')
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubAPIService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
