"""
Pytest configuration and fixtures
"""
from datetime import datetime, timezone
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Allow running the suite from a checkout without installing the package
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from commit_timesheet.local_analysis.commit_records import CommitRecord


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def make_commit():
    """Factory for CommitRecord objects with sensible defaults."""
    counter = {"n": 0}

    def _make(timestamp, email="a@x.com", additions=1, deletions=0, name=None, sha=None):
        counter["n"] += 1
        return CommitRecord(
            hash=sha or f"sha{counter['n']:04d}",
            author_name=name or email.split("@")[0],
            author_email=email,
            timestamp=timestamp,
            additions=additions,
            deletions=deletions,
        )

    return _make


@pytest.fixture
def scenario_a_commits(make_commit):
    """Three commits: two close together on Jan 1st, one that evening."""
    return [
        make_commit("2024-01-01T09:00:00Z"),
        make_commit("2024-01-01T11:00:00Z"),
        make_commit("2024-01-01T20:00:00Z"),
    ]


def github_commit_payload(sha, date, email="a@x.com", name="Alice", additions=3, deletions=1):
    """Commit detail shaped like GET /repos/{owner}/{repo}/commits/{sha}."""
    return {
        "sha": sha,
        "commit": {"author": {"name": name, "email": email, "date": date}},
        "stats": {"additions": additions, "deletions": deletions, "total": additions + deletions},
    }
