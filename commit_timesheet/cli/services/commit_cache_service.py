from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from ...local_analysis.commit_records import CommitRecord, sort_commits
from ...local_analysis.errors import CommitRecordError
from ...local_analysis.work_sessions import hours_between


NotifyFn = Callable[[str, str], None]


class CommitCacheService:
    """Persist fetched commits as JSON so later runs can skip the API."""

    def __init__(self, reporter: Optional[NotifyFn] = None) -> None:
        self._report = reporter

    def load_commits(self, path: Path) -> Optional[List[CommitRecord]]:
        """
        Read cached commits.

        Returns None when there is no usable cache (missing or unreadable
        file, invalid JSON). Entries that parse as JSON but describe an
        invalid commit raise CommitRecordError.
        """
        if not path:
            return None
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except PermissionError as exc:
            self._notify(f"Permission denied while reading commit cache: {exc}", "warning")
            return None
        except OSError as exc:
            self._notify(f"Unable to read commit cache ({path}): {exc}", "warning")
            return None
        except json.JSONDecodeError as exc:
            self._notify(
                f"Commit cache is corrupted ({exc}). Fetching commits again.",
                "warning",
            )
            return None

        if not isinstance(data, list):
            raise CommitRecordError(f"Commit cache {path} must contain a JSON list")
        return [CommitRecord.from_cache_entry(entry) for entry in data]

    def persist_commits(self, path: Path, commits: Iterable[CommitRecord]) -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_payload(commits), indent=2), encoding="utf-8")
        except OSError as exc:
            self._notify(f"Unable to save commit cache to {path}: {exc}", "error")

    @staticmethod
    def to_payload(commits: Iterable[CommitRecord]) -> List[Dict[str, Any]]:
        """Cache entries in chronological order, each with hours since the previous commit."""
        ordered = sort_commits(commits)
        payload = []
        for index, commit in enumerate(ordered):
            entry = commit.to_cache_entry()
            entry["timeSinceLastCommit"] = hours_between(ordered[index - 1], commit) if index else 0
            payload.append(entry)
        return payload

    def clear(self, path: Path) -> None:
        try:
            if Path(path).exists():
                Path(path).unlink()
        except OSError as exc:
            self._notify(f"Unable to remove commit cache ({path}): {exc}", "warning")

    def _notify(self, message: str, tone: str) -> None:
        if self._report:
            self._report(message, tone)
