"""Wear-frequency heatmap: intensity buckets, streaks and per-day assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from logic.periods import get_date_range
from models.wardrobe_item import WardrobeItem, WearLogEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatmapDay:
    date: date
    wear_count: int
    intensity: int = 0
    is_today: bool = False


@dataclass(frozen=True)
class HeatmapData:
    days: List[HeatmapDay]
    view: str
    start_date: date
    end_date: date
    active_days: int
    total_wears: int
    current_streak: int
    longest_streak: int
    insight: str


@dataclass(frozen=True)
class DayDetail:
    date: date
    item_names: List[str] = field(default_factory=list)


def get_intensity(count: int) -> int:
    """Map a day's wear count to a 0-4 colour bucket."""

    if count <= 0:
        return 0
    if count == 1:
        return 1
    if count <= 3:
        return 2
    if count <= 5:
        return 3
    return 4


def calculate_streaks(days: Sequence[HeatmapDay], today: Optional[date] = None) -> Tuple[int, int]:
    """Return ``(current_streak, longest_streak)`` over an ordered day sequence.

    The current streak counts back from today's entry, or from yesterday when
    today has no wears yet. When today is outside the sequence the count
    starts from the last entry.
    """

    if not days:
        return 0, 0

    longest = 0
    run = 0
    for day in days:
        if day.wear_count > 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    today = today or date.today()
    today_idx = next((idx for idx, day in enumerate(days) if day.date == today), None)
    if today_idx is None:
        start = len(days) - 1
    elif days[today_idx].wear_count == 0:
        start = today_idx - 1
    else:
        start = today_idx

    current = 0
    for idx in range(start, -1, -1):
        if days[idx].wear_count <= 0:
            break
        current += 1
    return current, longest


def build_heatmap(
    wear_logs: Iterable[WearLogEntry],
    view: str = "month",
    reference_date: date | datetime | None = None,
    today: Optional[date] = None,
) -> HeatmapData:
    """Fill every day of the period containing ``reference_date`` with wear counts."""

    today = today or date.today()
    period = get_date_range(view, reference_date or today)

    count_by_date: Dict[date, int] = {}
    for log in wear_logs:
        if period.contains(log.worn_date):
            count_by_date[log.worn_date] = count_by_date.get(log.worn_date, 0) + 1

    days = [
        HeatmapDay(
            date=day,
            wear_count=count_by_date.get(day, 0),
            intensity=get_intensity(count_by_date.get(day, 0)),
            is_today=day == today,
        )
        for day in period.days()
    ]
    current_streak, longest_streak = calculate_streaks(days, today=today)
    active_days = sum(1 for day in days if day.wear_count > 0)
    total_wears = sum(count_by_date.values())
    logger.debug("Built %s heatmap %s..%s with %s wears", view, period.start_str, period.end_str, total_wears)

    return HeatmapData(
        days=days,
        view=view,
        start_date=period.start,
        end_date=period.end,
        active_days=active_days,
        total_wears=total_wears,
        current_streak=current_streak,
        longest_streak=longest_streak,
        insight=f"You logged outfits {active_days} of {len(days)} days",
    )


def day_detail(day: date, wear_logs: Iterable[WearLogEntry], items: Iterable[WardrobeItem]) -> DayDetail:
    """Names of the items worn on ``day``, one entry per wear log row."""

    by_id = {item.item_id: item for item in items}
    names = []
    for log in wear_logs:
        if log.worn_date != day:
            continue
        item = by_id.get(log.item_id)
        names.append(item.display_name if item else "Item")
    return DayDetail(date=day, item_names=names)


__all__ = [
    "HeatmapDay",
    "HeatmapData",
    "DayDetail",
    "get_intensity",
    "calculate_streaks",
    "build_heatmap",
    "day_detail",
]
