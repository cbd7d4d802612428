"""Contribution aggregation over a date range.

GitHub groups statistics by week beginning, so a range can only be applied
against week starts: a bucket counts when its week started on or after
``start`` and strictly before ``end``. A range shorter than a week (say
Monday to Saturday) may therefore contain no week start and yield zero
totals.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from typing import Any

from ..adapters.github.models import ContributorRecord
from .date_range import DateRange

__all__ = [
    "ContributorSummary",
    "aggregate_contributions",
    "filter_contributors",
    "has_commits",
    "select_contributors",
]


@dataclass(frozen=True)
class ContributorSummary:
    """Totals for one contributor over a date range."""

    identity: str
    commits: int = 0
    additions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def aggregate_contributions(record: ContributorRecord, date_range: DateRange) -> ContributorSummary:
    """Sum a contributor's weekly counters whose week starts inside the range.

    Parameters
    ----------
    record
        Contributor with weekly buckets in any order
    date_range
        Normalized and validated range

    Returns
    -------
    ContributorSummary
        Totals, possibly all zero

    Raises
    ------
    ValueError
        If the range has not been normalized
    """
    if date_range.end is None:
        raise ValueError("date range must be normalized before aggregation (end is unset)")

    commits = additions = deletions = 0

    # Weeks are not guaranteed to be ordered, so every bucket is checked
    for week in record.weeks:
        if date_range.contains(week.week_start):
            commits += week.commits
            additions += week.additions
            deletions += week.deletions

    return ContributorSummary(
        identity=record.identity,
        commits=commits,
        additions=additions,
        deletions=deletions,
    )


def filter_contributors(
    summaries: Iterable[ContributorSummary],
    predicate: Callable[[ContributorSummary], bool],
) -> list[ContributorSummary]:
    """Return the summaries matching ``predicate``, in their original order."""
    return [summary for summary in summaries if predicate(summary)]


def has_commits(summary: ContributorSummary) -> bool:
    """Whether the contributor committed anything in the range."""
    return summary.commits > 0


def select_contributors(
    summaries: Iterable[ContributorSummary],
    include_all: bool = False,
) -> list[ContributorSummary]:
    """Drop contributors without commits unless ``include_all`` is set."""
    if include_all:
        return list(summaries)
    return filter_contributors(summaries, has_commits)
