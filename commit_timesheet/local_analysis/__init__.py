"""
Local Analysis Module
Work-session inference and contribution metrics over normalized commits
"""

from .errors import (
    TimesheetError,
    CommitRecordError,
    UnsortedCommitsError,
    EmptyCommitSetError,
)

from .commit_records import (
    CommitRecord,
    normalize_commit,
    parse_commit_timestamp,
    sort_commits,
    ensure_chronological,
    author_matcher,
    filter_commits,
    filter_by_authors,
)

from .work_sessions import WorkSession, segment_sessions

from .session_metrics import (
    ChangeTotals,
    hours_by_date,
    total_hours_in_range,
    longest_session,
    commit_count_share,
    line_change_share,
    summarize_changes,
)

__all__ = [
    # Errors
    'TimesheetError',
    'CommitRecordError',
    'UnsortedCommitsError',
    'EmptyCommitSetError',

    # Commit records
    'CommitRecord',
    'normalize_commit',
    'parse_commit_timestamp',
    'sort_commits',
    'ensure_chronological',
    'author_matcher',
    'filter_commits',
    'filter_by_authors',

    # Sessions
    'WorkSession',
    'segment_sessions',

    # Metrics
    'ChangeTotals',
    'hours_by_date',
    'total_hours_in_range',
    'longest_session',
    'commit_count_share',
    'line_change_share',
    'summarize_changes',
]
