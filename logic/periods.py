"""Calendar period boundaries, labels, navigation and season transitions.

All boundaries are inclusive calendar dates. Views are ``month``, ``quarter``
(Jan/Apr/Jul/Oct blocks), ``year`` and ``season`` (spring Mar-May, summer
Jun-Aug, fall Sep-Nov, winter Dec-Feb spanning into the next year).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Tuple

VIEWS = ("month", "quarter", "year", "season")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

SEASON_MONTHS = {
    "spring": (3, 5),
    "summer": (6, 8),
    "fall": (9, 11),
    "winter": (12, 2),
}

SEASON_STARTS: Tuple[Tuple[str, int], ...] = (
    ("spring", 3),
    ("summer", 6),
    ("fall", 9),
    ("winter", 12),
)

SEASON_EMOJI = {"spring": "🌸", "summer": "☀️", "fall": "🍂", "winter": "❄️"}

TRANSITION_WINDOW_DAYS = 14


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""

    start: date
    end: date

    @property
    def start_str(self) -> str:
        return self.start.isoformat()

    @property
    def end_str(self) -> str:
        return self.end.isoformat()

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> List[date]:
        return list(iter_dates(self.start, self.end))

    def as_strings(self) -> Tuple[str, str]:
        return self.start_str, self.end_str


def _as_date(value: date | datetime | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""

    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""

    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(value.day, _last_day(year, month)))


def get_season_for_month(month: int) -> str:
    """Return the season for a 1-based month."""

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "fall"
    return "winter"


def get_season_year(value: date) -> int:
    """Winter belongs to the year in which its December falls."""

    if value.month in (1, 2):
        return value.year - 1
    return value.year


def get_season_date_range(season: str, year: int) -> DateRange:
    """Inclusive range for a season; winter ``year`` ends in February ``year + 1``."""

    if season not in SEASON_MONTHS:
        raise ValueError(f"Unsupported season '{season}'. Allowed: {sorted(SEASON_MONTHS)}")
    if season == "winter":
        return DateRange(date(year, 12, 1), date(year + 1, 2, _last_day(year + 1, 2)))
    start_month, end_month = SEASON_MONTHS[season]
    return DateRange(date(year, start_month, 1), date(year, end_month, _last_day(year, end_month)))


def get_date_range(view: str, reference_date: date | datetime | None = None) -> DateRange:
    """Return the inclusive period containing ``reference_date`` for ``view``."""

    ref = _as_date(reference_date)
    if view == "month":
        return DateRange(date(ref.year, ref.month, 1), date(ref.year, ref.month, _last_day(ref.year, ref.month)))
    if view == "quarter":
        first_month = (ref.month - 1) // 3 * 3 + 1
        last_month = first_month + 2
        return DateRange(date(ref.year, first_month, 1), date(ref.year, last_month, _last_day(ref.year, last_month)))
    if view == "year":
        return DateRange(date(ref.year, 1, 1), date(ref.year, 12, 31))
    if view == "season":
        return get_season_date_range(get_season_for_month(ref.month), get_season_year(ref))
    raise ValueError(f"Unsupported view '{view}'. Allowed: {list(VIEWS)}")


def navigate_date(view: str, reference_date: date | datetime, direction: int) -> date:
    """Move the reference by one period forwards (1) or backwards (-1)."""

    if direction not in (1, -1):
        raise ValueError("direction must be 1 or -1")
    ref = _as_date(reference_date)
    if view == "month":
        return add_months(ref, direction)
    if view in ("quarter", "season"):
        return add_months(ref, 3 * direction)
    if view == "year":
        return add_months(ref, 12 * direction)
    raise ValueError(f"Unsupported view '{view}'. Allowed: {list(VIEWS)}")


def get_period_label(view: str, reference_date: date | datetime) -> str:
    """Human label such as ``February 2026``, ``Q1 2026``, ``2026`` or ``Winter 2025``."""

    ref = _as_date(reference_date)
    if view == "month":
        return f"{MONTH_NAMES[ref.month - 1]} {ref.year}"
    if view == "quarter":
        return f"Q{(ref.month - 1) // 3 + 1} {ref.year}"
    if view == "year":
        return str(ref.year)
    if view == "season":
        return f"{get_season_for_month(ref.month).capitalize()} {get_season_year(ref)}"
    raise ValueError(f"Unsupported view '{view}'. Allowed: {list(VIEWS)}")


def days_until_season_start(season: str, today: date) -> int:
    """Days until the next start of ``season``; 0 on the start day itself."""

    month = dict(SEASON_STARTS)[season]
    start = date(today.year, month, 1)
    if start < today:
        start = date(today.year + 1, month, 1)
    return (start - today).days


def get_transition_alert(
    today: date | datetime | None = None, window_days: int = TRANSITION_WINDOW_DAYS
) -> Optional[str]:
    """Return an alert when the next season starts within ``window_days``."""

    ref = _as_date(today)
    season, days_until = min(
        ((name, days_until_season_start(name, ref)) for name, _ in SEASON_STARTS),
        key=lambda pair: pair[1],
    )
    if days_until > window_days:
        return None
    unit = "day" if days_until == 1 else "days"
    return (
        f"{SEASON_EMOJI[season]} {season.capitalize()} starts in {days_until} {unit}. "
        f"Review your {season} wardrobe."
    )


__all__ = [
    "DateRange",
    "VIEWS",
    "SEASON_MONTHS",
    "add_months",
    "days_until_season_start",
    "get_date_range",
    "get_period_label",
    "get_season_date_range",
    "get_season_for_month",
    "get_season_year",
    "get_transition_alert",
    "iter_dates",
    "navigate_date",
]
