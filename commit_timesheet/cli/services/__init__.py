"""Services used by the command line front end."""

from .commit_cache_service import CommitCacheService
from .github_api_client import (
    GitHubApiConnectionError,
    GitHubApiError,
    GitHubApiRequestError,
    GitHubCommitClient,
    GitHubRateLimitError,
)
from .timesheet_service import TimesheetReport, TimesheetService

__all__ = [
    "CommitCacheService",
    "GitHubApiConnectionError",
    "GitHubApiError",
    "GitHubApiRequestError",
    "GitHubCommitClient",
    "GitHubRateLimitError",
    "TimesheetReport",
    "TimesheetService",
]
