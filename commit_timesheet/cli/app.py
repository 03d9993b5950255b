from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config.settings import (
    SESSION_SCOPES,
    ConfigError,
    GitHubSettings,
    TimesheetConfig,
    load_config,
    load_github_settings,
    parse_calendar_date,
    parse_gap_threshold,
    parse_identities,
)
from ..local_analysis.commit_records import CommitRecord
from ..local_analysis.errors import TimesheetError
from .display import format_summary, render_session_table, report_to_dict
from .services.commit_cache_service import CommitCacheService
from .services.github_api_client import GitHubApiError, GitHubCommitClient
from .services.timesheet_service import TimesheetService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate hours worked from a GitHub repository's commit history.",
    )
    parser.add_argument("--owner", help="Repository owner (defaults to GITHUB_OWNER).")
    parser.add_argument("--repo", help="Repository name (defaults to GITHUB_REPO).")
    parser.add_argument("--token", help="GitHub token (defaults to GITHUB_TOKEN).")
    parser.add_argument(
        "--author",
        action="append",
        default=[],
        help="Author email to report on. Repeat or comma-separate for several authors.",
    )
    parser.add_argument("--start", help="First day of the reporting range (YYYY-MM-DD).")
    parser.add_argument("--end", help="Last day of the reporting range (YYYY-MM-DD), inclusive.")
    parser.add_argument("--gap", help="Hours of inactivity that start a new work session.")
    parser.add_argument(
        "--scope",
        choices=SESSION_SCOPES,
        help="Segment every commit ('all') or only the selected authors' commits ('authors').",
    )
    parser.add_argument("--cache", type=Path, help="Path of the JSON commit cache.")
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore the cache and fetch commits from GitHub again.",
    )
    parser.add_argument("--json", action="store_true", help="Emit the report as JSON.")
    parser.add_argument("--sessions", action="store_true", help="Include the per-session table.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr.")
    return parser


def resolve_config(args: argparse.Namespace, base: TimesheetConfig) -> TimesheetConfig:
    """Apply command line overrides on top of the environment config."""
    overrides = {}
    if args.start:
        overrides["start_date"] = parse_calendar_date(args.start, "--start")
    if args.end:
        overrides["end_date"] = parse_calendar_date(args.end, "--end")
    if args.gap:
        overrides["gap_threshold_hours"] = parse_gap_threshold(args.gap)
    if args.author:
        overrides["author_identities"] = parse_identities(",".join(args.author))
    if args.scope:
        overrides["session_scope"] = args.scope
    return dataclasses.replace(base, **overrides) if overrides else base


def resolve_github_settings(args: argparse.Namespace, base: GitHubSettings) -> GitHubSettings:
    overrides = {}
    if args.owner:
        overrides["owner"] = args.owner
    if args.repo:
        overrides["repo"] = args.repo
    if args.token:
        overrides["token"] = args.token
    if args.cache:
        overrides["cache_path"] = str(args.cache)
    return dataclasses.replace(base, **overrides) if overrides else base


def fetch_commits(settings: GitHubSettings) -> List[CommitRecord]:
    if not settings.owner or not settings.repo:
        raise ConfigError("A repository is required: pass --owner/--repo or set GITHUB_OWNER/GITHUB_REPO")
    with GitHubCommitClient(
        settings.owner,
        settings.repo,
        settings.token,
        base_url=settings.api_url,
        max_workers=settings.max_workers,
    ) as client:
        return client.fetch_all_commits()


def load_commits(
    settings: GitHubSettings,
    cache: CommitCacheService,
    *,
    refresh: bool = False,
) -> List[CommitRecord]:
    """Return cached commits when available, otherwise fetch and cache them."""
    cache_path = Path(settings.cache_path)
    if not refresh:
        cached = cache.load_commits(cache_path)
        if cached is not None:
            logger.info(f"Loaded {len(cached)} commits from {cache_path}")
            return cached

    commits = fetch_commits(settings)
    cache.persist_commits(cache_path, commits)
    return commits


def _report_to_log(message: str, tone: str) -> None:
    level = logging.ERROR if tone == "error" else logging.WARNING
    logger.log(level, message)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(args, load_config())
        settings = resolve_github_settings(args, load_github_settings(require_repo=False))
        commits = load_commits(settings, CommitCacheService(reporter=_report_to_log), refresh=args.refresh)
        report = TimesheetService(config).build_report(commits)
    except (TimesheetError, GitHubApiError) as exc:
        payload = {"error": type(exc).__name__, "message": str(exc)}
        print(json.dumps(payload), file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report_to_dict(report, config), indent=2))
        return 0

    for line in format_summary(report, config):
        print(line)
    if args.sessions:
        table = render_session_table(report.sessions)
        if table:
            print()
            print(table)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
