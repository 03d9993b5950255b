"""Infer workday sessions from a chronological stream of commits.

A session is a maximal run of commits in which no two consecutive commits
are further apart than the configured gap threshold. Sessions are gap-based,
not calendar-based: a run that crosses midnight stays one session and is
dated to its first commit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Sequence, Tuple

from .commit_records import CommitRecord, ensure_chronological

_SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True, slots=True)
class WorkSession:
    """One inferred workday."""

    date: date
    commits: Tuple[CommitRecord, ...]

    def __post_init__(self) -> None:
        if not self.commits:
            raise ValueError("A work session needs at least one commit")
        object.__setattr__(self, "commits", tuple(self.commits))

    @property
    def started_at(self) -> datetime:
        return self.commits[0].timestamp

    @property
    def ended_at(self) -> datetime:
        return self.commits[-1].timestamp

    @property
    def duration(self) -> timedelta:
        return self.ended_at - self.started_at

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / _SECONDS_PER_HOUR

    @property
    def commit_count(self) -> int:
        return len(self.commits)


def hours_between(earlier: CommitRecord, later: CommitRecord) -> float:
    return (later.timestamp - earlier.timestamp).total_seconds() / _SECONDS_PER_HOUR


def _session_date(commit: CommitRecord) -> date:
    return commit.timestamp.astimezone(timezone.utc).date()


def segment_sessions(
    commits: Sequence[CommitRecord],
    gap_threshold_hours: float,
    *,
    split_on_equal_gap: bool = False,
) -> Tuple[WorkSession, ...]:
    """
    Partition chronologically ordered commits into work sessions.

    Args:
        commits: Commits sorted ascending by timestamp (see ``sort_commits``).
        gap_threshold_hours: Inactivity gap, in hours, after which a new
            session starts.
        split_on_equal_gap: When False (default) a gap exactly equal to the
            threshold stays in the open session; when True it starts a new one.

    Returns:
        Sessions in chronological order. Concatenating their commits
        reproduces the input.

    Raises:
        ValueError: If the threshold is not a positive finite number.
        UnsortedCommitsError: If ``commits`` is not in chronological order.
    """
    if not math.isfinite(gap_threshold_hours) or gap_threshold_hours <= 0:
        raise ValueError(f"gap_threshold_hours must be positive, got {gap_threshold_hours!r}")

    commits = tuple(commits)
    ensure_chronological(commits)

    groups: List[List[CommitRecord]] = []
    for commit in commits:
        if groups:
            gap = hours_between(groups[-1][-1], commit)
            starts_new = gap >= gap_threshold_hours if split_on_equal_gap else gap > gap_threshold_hours
        else:
            starts_new = True

        if starts_new:
            groups.append([commit])
        else:
            groups[-1].append(commit)

    return tuple(
        WorkSession(date=_session_date(group[0]), commits=tuple(group))
        for group in groups
    )
