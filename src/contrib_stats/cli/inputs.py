"""Resolution of raw command line values into a repository and a date range."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.time import get_current_utc, parse_calendar_date, shift_back
from ..rollups import DateRange

__all__ = [
    "InputError",
    "ProcessedInputs",
    "RawInputs",
    "process_inputs",
    "split_repository",
]


class InputError(ValueError):
    """Raised when command line values can not be resolved."""

    pass


@dataclass
class RawInputs:
    """Values as typed on the command line."""

    repo: str
    date_from: str | None = None
    date_to: str | None = None
    weeks: int = 0
    months: int = 0
    years: int = 0
    include_all: bool = False

    @property
    def has_explicit_range(self) -> bool:
        return bool(self.date_from or self.date_to)

    @property
    def has_relative_range(self) -> bool:
        return bool(self.weeks or self.months or self.years)


@dataclass
class ProcessedInputs:
    """Resolved repository and date range."""

    owner: str
    repo: str
    date_range: DateRange
    include_all: bool = False


def split_repository(value: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts.

    Raises
    ------
    InputError
        If the value is not exactly two non-empty parts
    """
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        raise InputError(f"invalid repository {value!r}. Repository should be given in the form <owner>/<repo>")
    return parts[0], parts[1]


def _parse_bound(value: str | None, flag: str, timezone_str: str) -> datetime | None:
    if not value:
        return None
    try:
        return parse_calendar_date(value, timezone_str)
    except OverflowError as exc:
        raise InputError(f"invalid `{flag}` value {value!r}. Date is out of range") from exc
    except ValueError as exc:
        raise InputError(f"invalid `{flag}` value {value!r}. Format: YYYY-MM-DD") from exc


def process_inputs(
    raw: RawInputs,
    *,
    now: datetime | None = None,
    timezone_str: str = "UTC",
) -> ProcessedInputs:
    """Resolve raw command line values.

    Explicit ``from``/``to`` dates and relative ``weeks``/``months``/``years``
    are mutually exclusive. A relative range starts that far back from ``now``
    and leaves ``to`` unset; one reaching back before year 1 has no lower bound.

    Parameters
    ----------
    raw
        Values as typed on the command line
    now
        Current instant used for relative ranges
    timezone_str
        Timezone ``from``/``to`` dates are expressed in

    Returns
    -------
    ProcessedInputs
        Repository and (not yet normalized) date range

    Raises
    ------
    InputError
        On invalid combinations, repository names or dates
    """
    if raw.has_explicit_range and raw.has_relative_range:
        raise InputError(
            "invalid combination of date range arguments: "
            "--from/--to can not be used with --weeks, --months or --years"
        )

    owner, repo = split_repository(raw.repo)

    if raw.has_relative_range:
        if now is None:
            now = get_current_utc()
        try:
            start = shift_back(now, years=raw.years, months=raw.months, days=raw.weeks * 7)
        except (ValueError, OverflowError):
            # Reaches back past year 1: no lower bound
            start = None
        date_range = DateRange(start=start, end=None)
    else:
        date_range = DateRange(
            start=_parse_bound(raw.date_from, "from", timezone_str),
            end=_parse_bound(raw.date_to, "to", timezone_str),
        )

    return ProcessedInputs(owner=owner, repo=repo, date_range=date_range, include_all=raw.include_all)

