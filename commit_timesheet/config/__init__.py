from .settings import (
    ConfigError,
    GitHubSettings,
    TimesheetConfig,
    load_config,
    load_github_settings,
    parse_calendar_date,
    parse_gap_threshold,
    parse_identities,
)

__all__ = [
    "ConfigError",
    "GitHubSettings",
    "TimesheetConfig",
    "load_config",
    "load_github_settings",
    "parse_calendar_date",
    "parse_gap_threshold",
    "parse_identities",
]
