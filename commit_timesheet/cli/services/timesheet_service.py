"""
Timesheet Service

Runs the session-inference pipeline over a repository's commits:
- Orders and filters commits by the configured author identities
- Segments commits into work sessions
- Computes hours in range, longest workday and contribution shares
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ...config.settings import TimesheetConfig
from ...local_analysis.commit_records import CommitRecord, filter_by_authors, sort_commits
from ...local_analysis.errors import EmptyCommitSetError
from ...local_analysis.session_metrics import (
    ChangeTotals,
    commit_count_share,
    line_change_share,
    longest_session,
    summarize_changes,
    total_hours_in_range,
)
from ...local_analysis.work_sessions import WorkSession, segment_sessions

logger = logging.getLogger(__name__)


@dataclass
class TimesheetReport:
    """Everything the report needs, computed once."""
    commits: List[CommitRecord] = field(default_factory=list)
    author_commits: List[CommitRecord] = field(default_factory=list)
    sessions: Tuple[WorkSession, ...] = ()
    hours_in_range: float = 0.0
    longest_session: Optional[WorkSession] = None
    commit_share: Optional[float] = None
    line_share: Optional[float] = None
    author_totals: ChangeTotals = field(default_factory=ChangeTotals)
    overall_totals: ChangeTotals = field(default_factory=ChangeTotals)


class TimesheetService:
    """Build a TimesheetReport from commits and an explicit config."""

    def __init__(self, config: TimesheetConfig):
        self.config = config

    def build_report(self, commits: Iterable[CommitRecord]) -> TimesheetReport:
        """
        Compute sessions and metrics for the configured authors.

        Args:
            commits: Commits in any order.

        Returns:
            TimesheetReport. Shares are None when the repository has no
            commits (or no changed lines) to divide by.
        """
        config = self.config
        ordered = sort_commits(commits)
        author_commits = filter_by_authors(ordered, config.author_identities)

        session_input = author_commits if config.session_scope == "authors" else ordered
        sessions = segment_sessions(session_input, config.gap_threshold_hours)

        report = TimesheetReport(
            commits=ordered,
            author_commits=author_commits,
            sessions=sessions,
            hours_in_range=total_hours_in_range(sessions, config.start_date, config.end_date),
            longest_session=longest_session(sessions),
            author_totals=summarize_changes(author_commits),
            overall_totals=summarize_changes(ordered),
        )

        try:
            report.commit_share = commit_count_share(author_commits, ordered)
        except EmptyCommitSetError:
            logger.warning("No commits to compare against; commit share unavailable")
        try:
            report.line_share = line_change_share(author_commits, ordered)
        except EmptyCommitSetError:
            logger.warning("No changed lines to compare against; line share unavailable")

        logger.info(
            f"Built timesheet: {len(sessions)} sessions from {len(session_input)} commits, "
            f"{report.hours_in_range:.2f} hours between {config.start_date} and {config.end_date}"
        )
        return report
