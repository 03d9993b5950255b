from __future__ import annotations

import json
from pathlib import Path

import pytest

from commit_timesheet.cli.services.commit_cache_service import CommitCacheService
from commit_timesheet.local_analysis.errors import CommitRecordError


def test_persist_and_load_round_trip(tmp_path: Path, scenario_a_commits) -> None:
    cache_path = tmp_path / "cache" / "commits.json"
    service = CommitCacheService()

    service.persist_commits(cache_path, list(reversed(scenario_a_commits)))
    loaded = service.load_commits(cache_path)

    assert loaded == scenario_a_commits


def test_payload_is_sorted_with_time_since_last_commit(tmp_path: Path, scenario_a_commits) -> None:
    cache_path = tmp_path / "commits.json"
    CommitCacheService().persist_commits(cache_path, list(reversed(scenario_a_commits)))

    payload = json.loads(cache_path.read_text(encoding="utf-8"))
    assert [entry["time"] for entry in payload] == ["09:00:00", "11:00:00", "20:00:00"]
    assert [entry["timeSinceLastCommit"] for entry in payload] == [0, 2.0, 9.0]
    assert payload[0]["tz"] == "+0000"
    assert payload[0]["totalChanges"] == payload[0]["additions"] + payload[0]["deletions"]


def test_missing_cache_returns_none(tmp_path: Path) -> None:
    assert CommitCacheService().load_commits(tmp_path / "absent.json") is None


def test_corrupted_cache_reports_and_returns_none(tmp_path: Path) -> None:
    cache_path = tmp_path / "commits.json"
    cache_path.write_text("{not json", encoding="utf-8")
    messages = []

    service = CommitCacheService(reporter=lambda message, tone: messages.append((message, tone)))

    assert service.load_commits(cache_path) is None
    assert messages and messages[0][1] == "warning"
    assert "corrupted" in messages[0][0]


def test_invalid_entry_fails_fast(tmp_path: Path) -> None:
    cache_path = tmp_path / "commits.json"
    cache_path.write_text(json.dumps([{
        "hash": "abc", "name": "Dev", "email": "d@x.com",
        "date": "2024-01-01", "time": "09:00:00", "tz": "+0000",
        "additions": -4, "deletions": 0, "totalChanges": -4,
    }]), encoding="utf-8")

    with pytest.raises(CommitRecordError):
        CommitCacheService().load_commits(cache_path)


def test_non_list_cache_rejected(tmp_path: Path) -> None:
    cache_path = tmp_path / "commits.json"
    cache_path.write_text(json.dumps({"commits": []}), encoding="utf-8")

    with pytest.raises(CommitRecordError):
        CommitCacheService().load_commits(cache_path)


def test_empty_history_round_trip(tmp_path: Path) -> None:
    cache_path = tmp_path / "commits.json"
    service = CommitCacheService()
    service.persist_commits(cache_path, [])
    assert service.load_commits(cache_path) == []


def test_clear_removes_file(tmp_path: Path, scenario_a_commits) -> None:
    cache_path = tmp_path / "commits.json"
    service = CommitCacheService()
    service.persist_commits(cache_path, scenario_a_commits)
    assert cache_path.exists()

    service.clear(cache_path)
    assert not cache_path.exists()
