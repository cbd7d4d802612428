"""Date-range rollups of weekly contributor statistics."""

from .aggregator import (
    ContributorSummary,
    aggregate_contributions,
    filter_contributors,
    has_commits,
    select_contributors,
)
from .date_range import (
    DateRange,
    InvalidRangeError,
    RangeValidation,
    normalize_range,
    validate_range,
)

__all__ = [
    # Date ranges
    "DateRange",
    "InvalidRangeError",
    "RangeValidation",
    "normalize_range",
    "validate_range",
    # Aggregation
    "ContributorSummary",
    "aggregate_contributions",
    "filter_contributors",
    "has_commits",
    "select_contributors",
]
