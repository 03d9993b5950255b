from __future__ import annotations

import math
from typing import Any, Iterable

from ..config.settings import TimesheetConfig
from ..local_analysis.session_metrics import ChangeTotals
from ..local_analysis.work_sessions import WorkSession
from .services.timesheet_service import TimesheetReport


def format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def format_percent(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}%"


def describe_authors(identities: Iterable[str]) -> str:
    names = sorted(identities)
    return ", ".join(names) if names else "(no authors configured)"


def render_session_table(sessions: Iterable[WorkSession]) -> str:
    """Build an aligned two-space padded table of work sessions."""
    rows = [
        (
            session.date.isoformat(),
            session.started_at.strftime("%H:%M"),
            session.ended_at.strftime("%H:%M"),
            str(session.commit_count),
            format_hours(session.duration_hours),
        )
        for session in sessions
    ]
    if not rows:
        return ""

    header = ("DATE", "START", "END", "COMMITS", "HOURS")
    col_widths = [len(part) for part in header]
    for parts in rows:
        for idx, part in enumerate(parts):
            col_widths[idx] = max(col_widths[idx], len(part))

    def join(parts: tuple[str, ...]) -> str:
        return "  ".join(part.ljust(col_widths[idx]) for idx, part in enumerate(parts)).rstrip()

    lines = [join(header), "-" * len(join(header))]
    lines.extend(join(parts) for parts in rows)
    return "\n".join(lines)


def format_summary(report: TimesheetReport, config: TimesheetConfig) -> list[str]:
    """Render human-readable lines describing the timesheet."""
    authors = describe_authors(config.author_identities)
    lines = [
        f"~{math.floor(abs(report.hours_in_range))} hours worked by {authors} "
        f"between {config.start_date.isoformat()} and {config.end_date.isoformat()}",
        f"Work sessions: {len(report.sessions)} (gap threshold {config.gap_threshold_hours:g}h)",
    ]

    longest = report.longest_session
    if longest is not None:
        lines.append(
            f"Longest workday: {longest.date.isoformat()} "
            f"({format_hours(longest.duration_hours)} hours, {longest.commit_count} commits)"
        )
    else:
        lines.append("Longest workday: none")

    lines.append(f"Percentage of total commits by {authors}: {format_percent(report.commit_share)}")
    lines.append(f"Percentage of total lines changed by {authors}: {format_percent(report.line_share)}")

    totals = report.overall_totals
    lines.append(f"Total lines of code added: {totals.additions}")
    lines.append(f"Total lines of code deleted: {totals.deletions}")
    lines.append(f"Total lines of code changed: {totals.total_changes}")
    return lines


def _totals_to_dict(totals: ChangeTotals) -> dict[str, int]:
    return {
        "commits": totals.commits,
        "additions": totals.additions,
        "deletions": totals.deletions,
        "total_changes": totals.total_changes,
    }


def _session_to_dict(session: WorkSession) -> dict[str, Any]:
    return {
        "date": session.date.isoformat(),
        "started_at": session.started_at.isoformat(),
        "ended_at": session.ended_at.isoformat(),
        "commits": [commit.hash for commit in session.commits],
        "duration_hours": round(session.duration_hours, 4),
    }


def report_to_dict(report: TimesheetReport, config: TimesheetConfig) -> dict[str, Any]:
    """
    Export the report to a dictionary for JSON serialization.

    Args:
        report: TimesheetReport to export
        config: Configuration the report was built with

    Returns:
        Dictionary representation
    """
    return {
        "authors": sorted(config.author_identities),
        "start_date": config.start_date.isoformat(),
        "end_date": config.end_date.isoformat(),
        "gap_threshold_hours": config.gap_threshold_hours,
        "session_scope": config.session_scope,
        "hours_in_range": round(report.hours_in_range, 4),
        "commit_share": report.commit_share,
        "line_share": report.line_share,
        "longest_session": _session_to_dict(report.longest_session) if report.longest_session else None,
        "sessions": [_session_to_dict(session) for session in report.sessions],
        "author_totals": _totals_to_dict(report.author_totals),
        "overall_totals": _totals_to_dict(report.overall_totals),
    }
