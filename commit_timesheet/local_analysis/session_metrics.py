"""
Session Metrics Module

Pure aggregations over work sessions and commit collections:
- Hours worked within an inclusive calendar-date range
- Longest workday lookup
- Commit-count and line-change contribution shares
- Raw line totals for any commit subset
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .commit_records import CommitRecord
from .errors import EmptyCommitSetError
from .work_sessions import WorkSession


@dataclass(frozen=True, slots=True)
class ChangeTotals:
    """Line totals over a set of commits."""
    commits: int = 0
    additions: int = 0
    deletions: int = 0

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


def _calendar_date(value: date) -> date:
    # datetime is a date subclass; drop the time-of-day so boundaries compare by day
    if isinstance(value, datetime):
        return value.date()
    return value


def hours_by_date(sessions: Iterable[WorkSession]) -> List[Tuple[date, float]]:
    """Return ``(session date, hours)`` pairs in session order."""
    return [(session.date, session.duration_hours) for session in sessions]


def total_hours_in_range(
    sessions: Iterable[WorkSession],
    start_date: date,
    end_date: date,
) -> float:
    """
    Sum session durations whose date lies in ``[start_date, end_date]``.

    Both bounds are inclusive and compared as calendar dates. Returns 0.0
    when no session qualifies.
    """
    start = _calendar_date(start_date)
    end = _calendar_date(end_date)
    return sum(
        (session.duration_hours for session in sessions if start <= session.date <= end),
        0.0,
    )


def longest_session(sessions: Iterable[WorkSession]) -> Optional[WorkSession]:
    """Session with the greatest duration; the first one wins ties. None if empty."""
    longest: Optional[WorkSession] = None
    for session in sessions:
        if longest is None or session.duration_hours > longest.duration_hours:
            longest = session
    return longest


def commit_count_share(
    filtered_commits: Sequence[CommitRecord],
    all_commits: Sequence[CommitRecord],
) -> float:
    """
    Percentage of ``all_commits`` represented by ``filtered_commits``.

    Raises:
        EmptyCommitSetError: If ``all_commits`` is empty.
    """
    if not all_commits:
        raise EmptyCommitSetError("Cannot compute a commit share over zero commits")
    return len(filtered_commits) / len(all_commits) * 100


def line_change_share(
    filtered_commits: Iterable[CommitRecord],
    all_commits: Iterable[CommitRecord],
) -> float:
    """
    Percentage of all changed lines (additions + deletions) found in ``filtered_commits``.

    Raises:
        EmptyCommitSetError: If ``all_commits`` has no changed lines.
    """
    denominator = sum(commit.total_changes for commit in all_commits)
    if denominator == 0:
        raise EmptyCommitSetError("Cannot compute a line-change share over zero changed lines")
    numerator = sum(commit.total_changes for commit in filtered_commits)
    return numerator / denominator * 100


def summarize_changes(commits: Iterable[CommitRecord]) -> ChangeTotals:
    count = additions = deletions = 0
    for commit in commits:
        count += 1
        additions += commit.additions
        deletions += commit.deletions
    return ChangeTotals(commits=count, additions=additions, deletions=deletions)
