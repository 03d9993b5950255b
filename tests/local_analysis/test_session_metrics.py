"""
Unit tests for session metrics: range totals, longest session and shares.

Run with: pytest tests/local_analysis/test_session_metrics.py -v
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from commit_timesheet.local_analysis.errors import EmptyCommitSetError
from commit_timesheet.local_analysis.session_metrics import (
    ChangeTotals,
    commit_count_share,
    hours_by_date,
    line_change_share,
    longest_session,
    summarize_changes,
    total_hours_in_range,
)
from commit_timesheet.local_analysis.work_sessions import segment_sessions

from conftest import utc


@pytest.fixture
def three_day_sessions(make_commit):
    """Sessions on Jan 1st (2h), Jan 2nd (3h) and Jan 4th (1h)."""
    commits = [
        make_commit("2024-01-01T09:00:00Z"),
        make_commit("2024-01-01T11:00:00Z"),
        make_commit("2024-01-02T09:00:00Z"),
        make_commit("2024-01-02T12:00:00Z"),
        make_commit("2024-01-04T09:00:00Z"),
        make_commit("2024-01-04T10:00:00Z"),
    ]
    return segment_sessions(commits, 6)


class TestTotalHoursInRange:
    def test_inclusive_bounds(self, three_day_sessions):
        assert total_hours_in_range(three_day_sessions, date(2024, 1, 1), date(2024, 1, 4)) == 6.0
        assert total_hours_in_range(three_day_sessions, date(2024, 1, 2), date(2024, 1, 2)) == 3.0

    def test_sessions_outside_range_excluded(self, three_day_sessions):
        assert total_hours_in_range(three_day_sessions, date(2024, 1, 2), date(2024, 1, 3)) == 3.0

    def test_time_of_day_ignored_on_bounds(self, three_day_sessions):
        start = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)
        end = datetime(2024, 1, 2, 0, 1, tzinfo=timezone.utc)
        assert total_hours_in_range(three_day_sessions, start, end) == 5.0

    def test_no_qualifying_sessions(self, three_day_sessions):
        assert total_hours_in_range(three_day_sessions, date(2023, 1, 1), date(2023, 12, 31)) == 0

    def test_reversed_range_is_empty(self, three_day_sessions):
        assert total_hours_in_range(three_day_sessions, date(2024, 1, 4), date(2024, 1, 1)) == 0

    def test_empty_sessions(self):
        assert total_hours_in_range([], date(2000, 1, 1), date(2100, 1, 1)) == 0

    def test_widening_range_never_decreases_total(self, three_day_sessions):
        start, end = date(2024, 1, 2), date(2024, 1, 2)
        previous = total_hours_in_range(three_day_sessions, start, end)
        for _ in range(5):
            start -= timedelta(days=1)
            end += timedelta(days=1)
            widened = total_hours_in_range(three_day_sessions, start, end)
            assert widened >= previous
            previous = widened


class TestLongestSession:
    def test_picks_maximum_duration(self, three_day_sessions):
        longest = longest_session(three_day_sessions)
        assert longest is three_day_sessions[1]
        assert longest.duration_hours == 3.0

    def test_ties_resolve_to_first(self, make_commit):
        commits = [
            make_commit("2024-01-01T09:00:00Z"),
            make_commit("2024-01-01T11:00:00Z"),
            make_commit("2024-01-02T09:00:00Z"),
            make_commit("2024-01-02T11:00:00Z"),
        ]
        sessions = segment_sessions(commits, 6)
        assert longest_session(sessions) is sessions[0]

    def test_all_zero_duration_returns_first(self, make_commit):
        sessions = segment_sessions(
            [make_commit("2024-01-01T09:00:00Z"), make_commit("2024-01-03T09:00:00Z")], 6
        )
        assert longest_session(sessions) is sessions[0]

    def test_empty_input_returns_none(self):
        assert longest_session([]) is None


class TestShares:
    def test_single_author_owns_everything(self, make_commit):
        commits = [
            make_commit(utc(2024, 1, 1) + timedelta(hours=i), email="a@x.com", additions=i + 1)
            for i in range(10)
        ]
        assert commit_count_share(commits, commits) == 100
        assert line_change_share(commits, commits) == 100

    def test_commit_share(self, make_commit):
        mine = [make_commit("2024-01-01T09:00:00Z")]
        theirs = [make_commit("2024-01-01T10:00:00Z", email="b@x.com") for _ in range(3)]
        assert commit_count_share(mine, mine + theirs) == 25.0

    def test_line_share_uses_total_changes(self, make_commit):
        mine = [make_commit("2024-01-01T09:00:00Z", additions=30, deletions=10)]
        theirs = [make_commit("2024-01-01T10:00:00Z", email="b@x.com", additions=50, deletions=10)]
        assert line_change_share(mine, mine + theirs) == 40.0

    def test_shares_of_complement_sum_to_100(self, make_commit):
        commits = [
            make_commit("2024-01-01T09:00:00Z", email="a@x.com", additions=3),
            make_commit("2024-01-01T10:00:00Z", email="b@x.com", additions=5, deletions=2),
            make_commit("2024-01-01T11:00:00Z", email="c@x.com", additions=1),
        ]
        subset = [c for c in commits if c.author_email == "a@x.com"]
        rest = [c for c in commits if c.author_email != "a@x.com"]
        assert commit_count_share(subset, commits) + commit_count_share(rest, commits) == pytest.approx(100)
        assert line_change_share(subset, commits) + line_change_share(rest, commits) == pytest.approx(100)

    def test_empty_denominator_is_an_error(self, make_commit):
        with pytest.raises(EmptyCommitSetError):
            commit_count_share([], [])
        with pytest.raises(EmptyCommitSetError):
            line_change_share([], [])
        with pytest.raises(ZeroDivisionError):
            line_change_share([], [make_commit("2024-01-01T09:00:00Z", additions=0)])


class TestTotals:
    def test_summarize_changes(self, make_commit):
        commits = [
            make_commit("2024-01-01T09:00:00Z", additions=3, deletions=1),
            make_commit("2024-01-01T10:00:00Z", additions=5, deletions=2),
        ]
        assert summarize_changes(commits) == ChangeTotals(commits=2, additions=8, deletions=3)
        assert summarize_changes(commits).total_changes == 11

    def test_summarize_nothing(self):
        assert summarize_changes([]) == ChangeTotals()

    def test_hours_by_date(self, three_day_sessions):
        assert hours_by_date(three_day_sessions) == [
            (date(2024, 1, 1), 2.0),
            (date(2024, 1, 2), 3.0),
            (date(2024, 1, 4), 1.0),
        ]


def test_scenario_b_empty_history():
    sessions = segment_sessions([], 6)
    assert sessions == ()
    assert total_hours_in_range(sessions, date(2024, 1, 1), date(2024, 12, 31)) == 0
    assert longest_session(sessions) is None
