"""
Commit Records Module

Normalizes commit data fetched from the hosting API (or read back from the
on-disk cache) into immutable CommitRecord objects, and provides the
ordering/filtering helpers the session engine relies on:
- Timestamp parsing into aware UTC datetimes
- Chronological sorting and ordering checks
- Author filtering by email identity
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .errors import CommitRecordError, UnsortedCommitsError

# Offsets such as "+0000" (what the cache stores) need a colon for fromisoformat
_COMPACT_OFFSET = re.compile(r"([+-])(\d{2})(\d{2})$")

CACHE_TZ = "+0000"

CommitPredicate = Callable[["CommitRecord"], bool]


def parse_commit_timestamp(value: Any) -> datetime:
    """
    Parse a commit timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings ending in ``Z`` or an explicit offset, or an
    already-aware datetime. Naive values are rejected because they cannot be
    placed on the timeline unambiguously.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _COMPACT_OFFSET.sub(r"\1\2:\3", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise CommitRecordError(f"Unparseable commit timestamp: {value!r}") from exc
    else:
        raise CommitRecordError(f"Unparseable commit timestamp: {value!r}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise CommitRecordError(f"Commit timestamp has no UTC offset: {value!r}")
    return parsed.astimezone(timezone.utc)


def _line_count(value: Any, field_name: str, commit_hash: str) -> int:
    # bool is an int subclass but never a valid line count
    if isinstance(value, bool) or not isinstance(value, int):
        raise CommitRecordError(
            f"Commit {commit_hash}: {field_name} must be an integer, got {value!r}",
            commit_hash,
        )
    if value < 0:
        raise CommitRecordError(
            f"Commit {commit_hash}: {field_name} cannot be negative ({value})",
            commit_hash,
        )
    return value


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """A single commit, normalized for session inference."""

    hash: str
    author_name: str
    author_email: str
    timestamp: datetime
    additions: int = 0
    deletions: int = 0

    def __post_init__(self) -> None:
        if not self.hash:
            raise CommitRecordError("Commit hash is required")
        object.__setattr__(self, "timestamp", parse_commit_timestamp(self.timestamp))
        _line_count(self.additions, "additions", self.hash)
        _line_count(self.deletions, "deletions", self.hash)

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions

    @classmethod
    def from_cache_entry(cls, entry: Mapping[str, Any]) -> "CommitRecord":
        """Rebuild a record from the cached JSON shape (date/time/tz split)."""
        commit_hash = entry.get("hash") or ""
        try:
            stamp = f"{entry['date']}T{entry['time']}{entry.get('tz') or CACHE_TZ}"
            additions = entry["additions"]
            deletions = entry["deletions"]
        except KeyError as exc:
            raise CommitRecordError(
                f"Cached commit {commit_hash or '?'} is missing field {exc}",
                commit_hash or None,
            ) from exc

        record = cls(
            hash=commit_hash,
            author_name=entry.get("name") or "",
            author_email=entry.get("email") or "",
            timestamp=stamp,
            additions=additions,
            deletions=deletions,
        )

        stored_total = entry.get("totalChanges")
        if stored_total is not None and stored_total != record.total_changes:
            raise CommitRecordError(
                f"Cached commit {commit_hash}: totalChanges={stored_total} does not match "
                f"additions+deletions={record.total_changes}",
                commit_hash,
            )
        return record

    def to_cache_entry(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "name": self.author_name,
            "email": self.author_email,
            "date": self.timestamp.strftime("%Y-%m-%d"),
            "time": self.timestamp.time().isoformat(),
            "tz": CACHE_TZ,
            "additions": self.additions,
            "deletions": self.deletions,
            "totalChanges": self.total_changes,
        }


def normalize_commit(raw: Mapping[str, Any]) -> CommitRecord:
    """
    Convert a GitHub commit payload into a CommitRecord.

    Args:
        raw: Commit detail as returned by ``GET /repos/{owner}/{repo}/commits/{sha}``.
             Must include ``sha``, ``commit.author`` and ``stats``.

    Raises:
        CommitRecordError: If required fields are missing or invalid.
    """
    sha = raw.get("sha")
    if not sha:
        raise CommitRecordError("Commit payload has no sha")

    author = (raw.get("commit") or {}).get("author") or {}
    if not author.get("date"):
        raise CommitRecordError(f"Commit {sha} has no author date", sha)

    stats = raw.get("stats")
    if not isinstance(stats, Mapping):
        raise CommitRecordError(f"Commit {sha} has no stats", sha)

    missing = [name for name in ("additions", "deletions") if name not in stats]
    if missing:
        raise CommitRecordError(f"Commit {sha} stats lack {', '.join(missing)}", sha)

    return CommitRecord(
        hash=sha,
        author_name=author.get("name") or "",
        author_email=author.get("email") or "",
        timestamp=author["date"],
        additions=stats["additions"],
        deletions=stats["deletions"],
    )


def sort_commits(commits: Iterable[CommitRecord]) -> List[CommitRecord]:
    """Stable sort by timestamp; commits sharing an instant keep their input order."""
    return sorted(commits, key=lambda commit: commit.timestamp)


def ensure_chronological(commits: Iterable[CommitRecord]) -> None:
    previous: Optional[CommitRecord] = None
    for commit in commits:
        if previous is not None and commit.timestamp < previous.timestamp:
            raise UnsortedCommitsError(
                f"Commit {commit.hash} ({commit.timestamp.isoformat()}) comes after "
                f"{previous.hash} ({previous.timestamp.isoformat()}); sort commits first"
            )
        previous = commit


def normalize_identity(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def author_matcher(identities: Iterable[str]) -> CommitPredicate:
    """Build a predicate matching commits whose author email is in ``identities``."""
    wanted = {normalize_identity(identity) for identity in identities}
    wanted.discard("")

    def _matches(commit: CommitRecord) -> bool:
        return normalize_identity(commit.author_email) in wanted

    return _matches


def filter_commits(commits: Iterable[CommitRecord], predicate: CommitPredicate) -> List[CommitRecord]:
    return [commit for commit in commits if predicate(commit)]


def filter_by_authors(commits: Iterable[CommitRecord], identities: Iterable[str]) -> List[CommitRecord]:
    return filter_commits(commits, author_matcher(identities))
