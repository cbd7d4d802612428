"""Contributor statistics as returned by the GitHub stats API.

Only the fields the application uses are modelled. GitHub's one-letter week
keys are renamed here: ``w`` week start, ``a`` additions, ``d`` deletions,
``c`` commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ...core.time import from_epoch_seconds

__all__ = [
    "ContributorRecord",
    "SourceDataInvalidError",
    "SourceUnavailableError",
    "StatsNotReadyError",
    "StatsSourceError",
    "WeekBucket",
    "parse_contributor_stats",
]


class StatsSourceError(Exception):
    """Base exception for stats source operations."""

    pass


class SourceUnavailableError(StatsSourceError):
    """Raised on transport failures and unsuccessful responses."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StatsNotReadyError(SourceUnavailableError):
    """Raised when GitHub answers 202: statistics are still being computed."""

    pass


class SourceDataInvalidError(StatsSourceError):
    """Raised when a stats payload does not have the expected shape."""

    pass


@dataclass(frozen=True)
class WeekBucket:
    """One week of statistics for one contributor."""

    week_start: datetime
    additions: int = 0
    deletions: int = 0
    commits: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> WeekBucket:
        """Build a bucket from a GitHub ``weeks`` entry.

        Raises
        ------
        SourceDataInvalidError
            If a counter is missing or not an integer
        """
        values = {}
        for key in ("w", "a", "d", "c"):
            value = data.get(key)
            # bool is an int subclass but never a valid counter
            if not isinstance(value, int) or isinstance(value, bool):
                raise SourceDataInvalidError(f"week field {key!r} must be an integer, got {value!r}")
            values[key] = value

        return cls(
            week_start=from_epoch_seconds(values["w"]),
            additions=values["a"],
            deletions=values["d"],
            commits=values["c"],
        )


@dataclass(frozen=True)
class ContributorRecord:
    """A contributor and their weekly buckets (in no particular order)."""

    identity: str
    weeks: tuple[WeekBucket, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ContributorRecord:
        """Build a record from one element of the stats payload.

        A ``null`` author (deleted account) yields an empty identity.
        """
        author = data.get("author")
        if author is None:
            identity = ""
        elif isinstance(author, dict):
            identity = author.get("login") or ""
        else:
            raise SourceDataInvalidError(f"author must be an object or null, got {type(author).__name__}")

        weeks = data.get("weeks")
        if not isinstance(weeks, list):
            raise SourceDataInvalidError(f"weeks for {identity or 'unknown author'} must be a list")

        buckets = []
        for week in weeks:
            if not isinstance(week, dict):
                raise SourceDataInvalidError(f"week entry must be an object, got {type(week).__name__}")
            buckets.append(WeekBucket.from_api(week))

        return cls(identity=identity, weeks=tuple(buckets))


def parse_contributor_stats(payload: Any) -> list[ContributorRecord]:
    """Parse the decoded body of ``/repos/{owner}/{repo}/stats/contributors``.

    Parameters
    ----------
    payload
        Decoded JSON body

    Returns
    -------
    list[ContributorRecord]
        Records in the order GitHub returned them

    Raises
    ------
    SourceDataInvalidError
        If the payload does not have the expected shape
    """
    if not isinstance(payload, list):
        raise SourceDataInvalidError(f"expected a list of contributors, got {type(payload).__name__}")

    records = []
    for item in payload:
        if not isinstance(item, dict):
            raise SourceDataInvalidError(f"contributor entry must be an object, got {type(item).__name__}")
        records.append(ContributorRecord.from_api(item))

    return records
