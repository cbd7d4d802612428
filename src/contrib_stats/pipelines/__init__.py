"""Pipelines composing fetch, aggregation and filtering."""

from .report_pipeline import (
    ContributionReport,
    ContributionReportPipeline,
    build_report,
    create_report_pipeline,
)

__all__ = [
    "ContributionReport",
    "ContributionReportPipeline",
    "build_report",
    "create_report_pipeline",
]
