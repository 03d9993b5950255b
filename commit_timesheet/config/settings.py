from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Iterable, Mapping, Optional

from dotenv import load_dotenv

from ..local_analysis.errors import TimesheetError

DEFAULT_START_DATE = "2024-07-19"
DEFAULT_GAP_THRESHOLD_HOURS = 10.0
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_CACHE_PATH = "commits.json"
DEFAULT_MAX_WORKERS = 8

SESSION_SCOPES = ("all", "authors")


class ConfigError(TimesheetError):
    pass


def parse_calendar_date(value: str, name: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` calendar date (no time-of-day, no offset)."""
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError) as exc:
        raise ConfigError(f"{name} must be a YYYY-MM-DD date, got {value!r}") from exc


def parse_gap_threshold(value: str | float) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Gap threshold must be a number of hours, got {value!r}") from exc
    if not math.isfinite(hours) or hours <= 0:
        raise ConfigError(f"Gap threshold must be positive, got {value!r}")
    return hours


def parse_identities(value: str | Iterable[str] | None) -> FrozenSet[str]:
    """Split a comma-separated identity list (or iterable of them) into a set."""
    if value is None:
        return frozenset()
    parts = value.split(",") if isinstance(value, str) else value
    return frozenset(part.strip() for part in parts if part and part.strip())


@dataclass(frozen=True)
class TimesheetConfig:
    """
    Explicit inputs for session inference and metrics.

    Only ``load_config`` reads the environment; everything downstream takes
    one of these.
    """

    start_date: date
    end_date: date
    gap_threshold_hours: float = DEFAULT_GAP_THRESHOLD_HOURS
    author_identities: FrozenSet[str] = field(default_factory=frozenset)
    session_scope: str = "all"

    def __post_init__(self) -> None:
        object.__setattr__(self, "gap_threshold_hours", parse_gap_threshold(self.gap_threshold_hours))
        if self.session_scope not in SESSION_SCOPES:
            raise ConfigError(
                f"session_scope must be one of {', '.join(SESSION_SCOPES)}, got {self.session_scope!r}"
            )
        object.__setattr__(self, "author_identities", parse_identities(self.author_identities))


@dataclass(frozen=True)
class GitHubSettings:
    owner: str
    repo: str
    token: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    cache_path: str = DEFAULT_CACHE_PATH
    max_workers: int = DEFAULT_MAX_WORKERS


def _environment(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if env is not None:
        return env
    load_dotenv()
    return os.environ


def load_config(env: Optional[Mapping[str, str]] = None) -> TimesheetConfig:
    """
    Build a TimesheetConfig from environment variables (and a .env file).

    Variables: START_DATE, END_DATE, TIME_BETWEEN_COMMITS, GITHUB_USER_EMAIL,
    SESSION_SCOPE. END_DATE defaults to today's local date.
    """
    source = _environment(env)

    start_date = parse_calendar_date(source.get("START_DATE") or DEFAULT_START_DATE, "START_DATE")
    end_raw = source.get("END_DATE")
    end_date = parse_calendar_date(end_raw, "END_DATE") if end_raw else date.today()

    gap_raw = source.get("TIME_BETWEEN_COMMITS")
    gap = parse_gap_threshold(gap_raw) if gap_raw else DEFAULT_GAP_THRESHOLD_HOURS

    return TimesheetConfig(
        start_date=start_date,
        end_date=end_date,
        gap_threshold_hours=gap,
        author_identities=parse_identities(source.get("GITHUB_USER_EMAIL")),
        session_scope=(source.get("SESSION_SCOPE") or "all").strip().lower(),
    )


def load_github_settings(
    env: Optional[Mapping[str, str]] = None,
    *,
    require_repo: bool = True,
) -> GitHubSettings:
    """
    Read GITHUB_OWNER, GITHUB_REPO, GITHUB_TOKEN, GITHUB_API_URL and
    COMMITS_CACHE_PATH.
    """
    source = _environment(env)
    owner = (source.get("GITHUB_OWNER") or "").strip()
    repo = (source.get("GITHUB_REPO") or "").strip()
    if require_repo and (not owner or not repo):
        raise ConfigError("GITHUB_OWNER and GITHUB_REPO must both be set")

    workers_raw = source.get("GITHUB_MAX_WORKERS")
    try:
        max_workers = int(workers_raw) if workers_raw else DEFAULT_MAX_WORKERS
    except ValueError as exc:
        raise ConfigError(f"GITHUB_MAX_WORKERS must be an integer, got {workers_raw!r}") from exc
    if max_workers < 1:
        raise ConfigError("GITHUB_MAX_WORKERS must be at least 1")

    return GitHubSettings(
        owner=owner,
        repo=repo,
        token=source.get("GITHUB_TOKEN") or None,
        api_url=(source.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
        cache_path=source.get("COMMITS_CACHE_PATH") or DEFAULT_CACHE_PATH,
        max_workers=max_workers,
    )
