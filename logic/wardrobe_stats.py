"""Dashboard statistics: value, CPW, category mix and recent wear frequency."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from logic.brand_analytics import CURRENCY_SYMBOL, calculate_cpw
from logic.neglect import DEFAULT_THRESHOLD_DAYS, is_neglected
from logic.periods import iter_dates
from logic.rounding import round_half_up
from models.taxonomy import CATEGORY_COLORS, DEFAULT_CATEGORY_COLOR
from models.wardrobe_item import WardrobeItem, WearLogEntry, complete_items

WEAR_FREQUENCY_DAYS = 30
SPARSE_CATEGORY_MAX = 3


@dataclass(frozen=True)
class CategoryBreakdown:
    category: str
    count: int
    percentage: int
    color: str


@dataclass(frozen=True)
class DailyWearCount:
    date: str
    count: int


@dataclass
class WardrobeStats:
    total_items: int = 0
    total_value: float = 0.0
    average_cpw: float = 0.0
    category_breakdown: List[CategoryBreakdown] = field(default_factory=list)
    wear_frequency: List[DailyWearCount] = field(default_factory=list)
    neglected_count: int = 0
    insights: List[str] = field(default_factory=list)


def category_breakdown(items: List[WardrobeItem]) -> List[CategoryBreakdown]:
    counts: dict[str, int] = {}
    for item in items:
        counts[item.category] = counts.get(item.category, 0) + 1
    total = len(items)
    breakdown = [
        CategoryBreakdown(
            category=category,
            count=count,
            percentage=round_half_up(count / total * 100) if total else 0,
            color=CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR),
        )
        for category, count in counts.items()
    ]
    breakdown.sort(key=lambda entry: -entry.count)
    return breakdown


def wear_frequency(wear_logs: Iterable[WearLogEntry], today: date) -> List[DailyWearCount]:
    """Wears per day for the trailing 30 days, oldest first, zero-filled."""

    start = today - timedelta(days=WEAR_FREQUENCY_DAYS - 1)
    counts = {day: 0 for day in iter_dates(start, today)}
    for log in wear_logs:
        if log.worn_date in counts:
            counts[log.worn_date] += 1
    return [DailyWearCount(day.isoformat(), count) for day, count in counts.items()]


def _best_value_item(items: List[WardrobeItem]) -> Optional[tuple[WardrobeItem, float]]:
    best = None
    for item in items:
        cpw = calculate_cpw(item.purchase_price, item.wear_count)
        if cpw is not None and (best is None or cpw < best[1]):
            best = (item, cpw)
    return best


def generate_insights(
    items: List[WardrobeItem],
    breakdown: List[CategoryBreakdown],
    neglected_count: int,
    currency: str = CURRENCY_SYMBOL,
) -> List[str]:
    insights = []
    if breakdown:
        top = breakdown[0]
        insights.append(f"You own {top.category.capitalize()} most, {top.percentage}% of your wardrobe!")

    best = _best_value_item(items)
    if best is not None:
        item, cpw = best
        insights.append(f"Your {item.display_name} has the best value at {currency}{cpw:.2f}/wear")

    if len(breakdown) >= 3 and breakdown[-1].count <= SPARSE_CATEGORY_MAX:
        least = breakdown[-1]
        insights.append(f"Consider adding more {least.category.capitalize()}, you only have {least.count}")

    if neglected_count > 0:
        plural = "s" if neglected_count != 1 else ""
        verb = "haven't" if neglected_count != 1 else "hasn't"
        insights.append(f"{neglected_count} item{plural} {verb} been worn recently")
    return insights


def calculate_wardrobe_stats(
    items: Iterable[WardrobeItem],
    wear_logs: Iterable[WearLogEntry],
    today: Optional[date] = None,
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
    now: Optional[datetime] = None,
    currency: str = CURRENCY_SYMBOL,
) -> WardrobeStats:
    """Aggregate dashboard numbers over complete items."""

    complete = complete_items(items)
    today = today or date.today()
    cpws = [
        cpw
        for cpw in (calculate_cpw(item.purchase_price, item.wear_count) for item in complete)
        if cpw is not None
    ]
    breakdown = category_breakdown(complete)
    neglected_count = sum(1 for item in complete if is_neglected(item, threshold_days, now))

    return WardrobeStats(
        total_items=len(complete),
        total_value=sum(item.purchase_price or 0 for item in complete),
        average_cpw=sum(cpws) / len(cpws) if cpws else 0.0,
        category_breakdown=breakdown,
        wear_frequency=wear_frequency(wear_logs, today),
        neglected_count=neglected_count,
        insights=generate_insights(complete, breakdown, neglected_count, currency),
    )


__all__ = [
    "CategoryBreakdown",
    "DailyWearCount",
    "WardrobeStats",
    "calculate_wardrobe_stats",
    "category_breakdown",
    "generate_insights",
    "wear_frequency",
]
