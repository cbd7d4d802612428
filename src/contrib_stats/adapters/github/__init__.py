"""GitHub statistics source."""

from .client import GitHubStatsClient
from .models import (
    ContributorRecord,
    SourceDataInvalidError,
    SourceUnavailableError,
    StatsNotReadyError,
    StatsSourceError,
    WeekBucket,
    parse_contributor_stats,
)

__all__ = [
    "GitHubStatsClient",
    "ContributorRecord",
    "WeekBucket",
    "parse_contributor_stats",
    # Errors
    "StatsSourceError",
    "SourceUnavailableError",
    "StatsNotReadyError",
    "SourceDataInvalidError",
]
