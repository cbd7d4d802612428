"""Date range normalization and validation.

A range is inclusive at ``start`` and exclusive at ``end``. An unset
``start`` means "unbounded in the past"; an unset ``end`` means "now" and is
filled in by :func:`normalize_range`. Validation must run on a normalized
range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.time import format_utc_iso8601, get_current_utc

__all__ = [
    "DateRange",
    "InvalidRangeError",
    "RangeValidation",
    "normalize_range",
    "validate_range",
]


class InvalidRangeError(Exception):
    """Raised when a date range fails validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class DateRange:
    """Half-open date range ``[start, end)``.

    Attributes
    ----------
    start : datetime | None
        Inclusive lower bound, ``None`` for no lower bound
    end : datetime | None
        Exclusive upper bound, ``None`` for "now"
    """

    start: datetime | None = None
    end: datetime | None = None

    def contains(self, moment: datetime) -> bool:
        """Check whether ``moment`` lies in ``[start, end)``.

        Raises
        ------
        ValueError
            If the range has not been normalized
        """
        if self.end is None:
            raise ValueError("date range must be normalized before use (end is unset)")
        if self.start is not None and moment < self.start:
            return False
        return moment < self.end

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary of ISO-8601 strings."""
        return {
            "from": format_utc_iso8601(self.start) if self.start else None,
            "to": format_utc_iso8601(self.end) if self.end else None,
        }


class RangeValidation:
    """Result of date range validation."""

    def __init__(self, valid: bool, errors: list[str] | None = None) -> None:
        self.valid = valid
        self.errors = errors or []

    def __bool__(self) -> bool:
        return self.valid

    def __str__(self) -> str:
        if self.valid:
            return "Valid"
        return f"Invalid: {'; '.join(self.errors)}"

    def add_error(self, error: str) -> None:
        """Add validation error."""
        self.errors.append(error)
        self.valid = False

    def raise_for_errors(self) -> None:
        """Raise :class:`InvalidRangeError` if validation failed."""
        if not self.valid:
            raise InvalidRangeError(
                "invalid date range given: " + "; ".join(self.errors),
                errors=list(self.errors),
            )


def normalize_range(date_range: DateRange, *, now: datetime | None = None) -> DateRange:
    """Fill in an unset ``end`` with the current instant.

    ``start`` is left untouched: ``None`` is a legitimate "no lower bound".

    Parameters
    ----------
    date_range
        Range as supplied by the caller
    now
        Current instant; read from the clock once when omitted

    Returns
    -------
    DateRange
        Range with ``end`` set
    """
    if date_range.end is not None:
        return date_range
    if now is None:
        now = get_current_utc()
    return DateRange(start=date_range.start, end=now)


def validate_range(date_range: DateRange, *, now: datetime | None = None) -> RangeValidation:
    """Validate a normalized date range.

    Every failed constraint is reported; nothing is raised.

    Parameters
    ----------
    date_range
        Range returned by :func:`normalize_range`
    now
        Instant the bounds are checked against; read from the clock when omitted

    Returns
    -------
    RangeValidation
        Result with one message per failed constraint
    """
    result = RangeValidation(valid=True)
    if now is None:
        now = get_current_utc()

    start, end = date_range.start, date_range.end

    if end is None:
        result.add_error("`to` is unset; normalize the range before validating it")
        return result

    if start is not None:
        if start == end:
            result.add_error("`from` and `to` are equal, the range is empty")
        elif start > end:
            result.add_error("`from` must be before `to`")
        if start > now:
            result.add_error("`from` can not be in the future")

    if end > now:
        result.add_error("`to` can not be in the future")

    return result
