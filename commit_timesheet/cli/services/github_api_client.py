"""HTTP client for the GitHub commits API.

This service retrieves a repository's full commit history:
- GET /repos/{owner}/{repo}/commits?per_page=100&page=N - List commits, page by page
- GET /repos/{owner}/{repo}/commits/{sha} - Commit detail with line stats

Listing stops at the first empty page. Line stats are only available on the
detail endpoint, so details for each page are fetched concurrently and then
normalized into CommitRecord objects in listing order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from ...local_analysis.commit_records import CommitRecord, normalize_commit

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"


class GitHubApiError(Exception):
    """Base exception for GitHub API client errors."""
    pass


class GitHubApiConnectionError(GitHubApiError):
    """Raised when unable to reach the API."""
    pass


class GitHubApiRequestError(GitHubApiError):
    """Raised when the API returns an error response."""
    def __init__(self, message: str, status_code: int, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class GitHubRateLimitError(GitHubApiRequestError):
    """Raised when the API reports the rate limit is exhausted."""
    def __init__(
        self,
        message: str,
        status_code: int,
        detail: Optional[str] = None,
        reset_at: Optional[datetime] = None,
    ):
        super().__init__(message, status_code, detail)
        self.reset_at = reset_at


class GitHubCommitClient:
    """HTTP client for a single repository's commit history.

    Example usage:
        with GitHubCommitClient("octocat", "hello-world", token) as client:
            commits = client.fetch_all_commits()
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0  # seconds
    DEFAULT_MAX_WORKERS = 8
    PER_PAGE = 100

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize the client.

        Args:
            owner: Repository owner (user or organization).
            repo: Repository name.
            token: Optional personal access token.
            base_url: API root. Defaults to https://api.github.com.
            timeout: Request timeout in seconds.
            max_workers: Upper bound on concurrent commit-detail requests.
        """
        self.owner = owner
        self.repo = repo
        self.token = token
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": GITHUB_ACCEPT}
            if self.token:
                headers["Authorization"] = f"token {self.token}"
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GitHubCommitClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def commits_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/commits"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._get_client().get(path, params=params)
        except httpx.ConnectError as exc:
            raise GitHubApiConnectionError(
                f"Unable to connect to GitHub API at {self.base_url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise GitHubApiConnectionError(
                f"Request to GitHub API timed out: {exc}"
            ) from exc

        if response.status_code == 200:
            return response.json()

        detail = None
        try:
            detail = response.json().get("message")
        except Exception:
            pass

        headers = response.headers or {}
        if response.status_code in (403, 429) and headers.get("x-ratelimit-remaining") == "0":
            reset_at = None
            reset_raw = headers.get("x-ratelimit-reset")
            if reset_raw and reset_raw.isdigit():
                reset_at = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc)
            raise GitHubRateLimitError(
                f"GitHub API rate limit exceeded for {path}",
                status_code=response.status_code,
                detail=detail,
                reset_at=reset_at,
            )

        raise GitHubApiRequestError(
            f"GitHub API request failed for {path}: HTTP {response.status_code}",
            status_code=response.status_code,
            detail=detail,
        )

    def list_commits_page(self, page: int, per_page: int = PER_PAGE) -> List[Dict[str, Any]]:
        """Fetch one page of commit summaries (no line stats)."""
        data = self._get(self.commits_path, params={"per_page": per_page, "page": page})
        if not isinstance(data, list):
            raise GitHubApiRequestError(
                f"Unexpected commit listing payload on page {page}",
                status_code=200,
            )
        return data

    def get_commit(self, sha: str) -> Dict[str, Any]:
        """Fetch a single commit, including its ``stats`` block."""
        return self._get(f"{self.commits_path}/{sha}")

    def _fetch_page_records(self, summaries: List[Dict[str, Any]]) -> List[CommitRecord]:
        shas = [summary["sha"] for summary in summaries]
        if len(shas) == 1 or self.max_workers == 1:
            details = [self.get_commit(sha) for sha in shas]
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(shas))) as executor:
                details = list(executor.map(self.get_commit, shas))
        return [normalize_commit(detail) for detail in details]

    def fetch_all_commits(self) -> List[CommitRecord]:
        """Fetch and normalize every commit reachable from the default branch.

        Returns:
            Commit records in API listing order (newest first); callers sort.

        Raises:
            GitHubApiConnectionError: If unable to reach the API.
            GitHubApiRequestError: If any listing or detail request fails.
            CommitRecordError: If a commit payload cannot be normalized.
        """
        commits: List[CommitRecord] = []
        page = 1
        while True:
            summaries = self.list_commits_page(page)
            if not summaries:
                break
            logger.debug(f"Fetched page {page} of {self.owner}/{self.repo} ({len(summaries)} commits)")
            commits.extend(self._fetch_page_records(summaries))
            page += 1

        logger.info(f"Total commits fetched: {len(commits)}")
        return commits
