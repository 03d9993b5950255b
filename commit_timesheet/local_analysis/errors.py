from __future__ import annotations


class TimesheetError(Exception):
    """Base class for errors raised while building a timesheet."""


class CommitRecordError(TimesheetError, ValueError):
    def __init__(self, message: str, commit_hash: str | None = None) -> None:
        super().__init__(message)
        self.commit_hash = commit_hash


class UnsortedCommitsError(TimesheetError, ValueError):
    pass


class EmptyCommitSetError(TimesheetError, ZeroDivisionError):
    """Raised when a share is requested against an empty denominator."""
