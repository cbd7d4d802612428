"""Report pipeline - thin orchestration of a contribution report.

Steps: capture "now" once -> normalize range -> validate range -> fetch
contributor stats -> aggregate each contributor in source order -> drop
contributors without commits (unless asked to keep them).

The range is validated before the request so an invalid range never costs an
API call. If the fetch fails nothing is aggregated and the source error
propagates to the caller.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..adapters.github import GitHubStatsClient
from ..core.time import get_current_utc
from ..observability.loguru_config import get_logger, timing_context
from ..rollups import (
    ContributorSummary,
    DateRange,
    aggregate_contributions,
    normalize_range,
    select_contributors,
    validate_range,
)

if TYPE_CHECKING:
    from ..adapters.github import ContributorRecord
    from ..config.settings import Settings

__all__ = [
    "ContributionReport",
    "ContributionReportPipeline",
    "build_report",
    "create_report_pipeline",
]

log = get_logger("pipeline")


@dataclass
class ContributionReport:
    """Result of a contribution report run."""

    date_range: DateRange
    summaries: list[ContributorSummary]
    total_contributors: int
    include_all: bool = False
    owner: str | None = None
    repo: str | None = None
    trace_id: str | None = None

    @property
    def repository(self) -> str | None:
        if self.owner is None or self.repo is None:
            return None
        return f"{self.owner}/{self.repo}"

    def meta(self) -> dict[str, Any]:
        """Report metadata for machine-readable output."""
        return {
            "repository": self.repository,
            **self.date_range.to_dict(),
            "include_all": self.include_all,
            "total_contributors": self.total_contributors,
        }


def _prepare_range(date_range: DateRange, now: datetime) -> DateRange:
    normalized = normalize_range(date_range, now=now)
    validate_range(normalized, now=now).raise_for_errors()
    return normalized


def _summarize(
    records: Iterable[ContributorRecord],
    date_range: DateRange,
    include_all: bool,
) -> tuple[list[ContributorSummary], int]:
    summaries = [aggregate_contributions(record, date_range) for record in records]
    return select_contributors(summaries, include_all), len(summaries)


def build_report(
    records: Iterable[ContributorRecord],
    date_range: DateRange,
    *,
    include_all: bool = False,
    now: datetime | None = None,
) -> ContributionReport:
    """Aggregate already-fetched records over a date range.

    Parameters
    ----------
    records
        Contributor records in source order
    date_range
        Range as supplied by the caller (``end`` may be unset)
    include_all
        Keep contributors without commits in the range
    now
        Current instant; read from the clock once when omitted

    Returns
    -------
    ContributionReport
        Summaries in source order

    Raises
    ------
    InvalidRangeError
        If the normalized range is invalid
    """
    if now is None:
        now = get_current_utc()

    normalized = _prepare_range(date_range, now)
    summaries, total = _summarize(records, normalized, include_all)

    return ContributionReport(
        date_range=normalized,
        summaries=summaries,
        total_contributors=total,
        include_all=include_all,
    )


class ContributionReportPipeline:
    """Fetch statistics for one repository and build its contribution report.

    Example:
        >>> pipeline = create_report_pipeline(load_settings())
        >>> report = pipeline.run("golang", "go", DateRange(start=since))
        >>> [s.identity for s in report.summaries]
    """

    def __init__(self, client: GitHubStatsClient, *, trace_id: str | None = None) -> None:
        self.client = client
        self.trace_id = trace_id or f"trace-{uuid.uuid4().hex[:12]}"
        self.log = log.bind(trace_id=self.trace_id)

    def run(
        self,
        owner: str,
        repo: str,
        date_range: DateRange,
        *,
        include_all: bool = False,
        now: datetime | None = None,
    ) -> ContributionReport:
        """Run the pipeline.

        Raises
        ------
        InvalidRangeError
            If the normalized range is invalid (nothing is fetched)
        StatsSourceError
            If the statistics could not be fetched
        """
        if now is None:
            now = get_current_utc()

        normalized = _prepare_range(date_range, now)
        self.log.info(
            "Building report for {owner}/{repo}",
            owner=owner,
            repo=repo,
            **normalized.to_dict(),
        )

        with timing_context(
            "fetch_contributor_stats",
            component="github",
            trace_id=self.trace_id,
            repository=f"{owner}/{repo}",
        ) as ctx:
            records = self.client.fetch_contributor_stats(owner, repo)
            ctx["contributors"] = len(records)

        summaries, total = _summarize(records, normalized, include_all)
        self.log.info(
            "Aggregated {total} contributors, {kept} kept",
            total=total,
            kept=len(summaries),
            include_all=include_all,
        )

        return ContributionReport(
            date_range=normalized,
            summaries=summaries,
            total_contributors=total,
            include_all=include_all,
            owner=owner,
            repo=repo,
            trace_id=self.trace_id,
        )


def create_report_pipeline(settings: Settings, *, trace_id: str | None = None) -> ContributionReportPipeline:
    """Create a pipeline with a GitHub client configured from settings."""
    client = GitHubStatsClient(
        base_url=settings.api_url,
        token=settings.github_token,
        timeout=settings.timeout,
        user_agent=settings.user_agent,
    )
    return ContributionReportPipeline(client, trace_id=trace_id)
