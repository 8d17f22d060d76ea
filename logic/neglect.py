"""Neglect detection: per-item staleness, threshold rules and aggregate stats."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from logic.rounding import percentage, round_half_up
from logic.validation import NeglectThresholdInput
from models.wardrobe_item import WardrobeItem, complete_items

DEFAULT_THRESHOLD_DAYS = 180
MIN_THRESHOLD_DAYS = 30
MAX_THRESHOLD_DAYS = 365
TOP_NEGLECTED_LIMIT = 3


@dataclass(frozen=True)
class NeglectStats:
    neglected_count: int
    total_count: int
    percentage: int
    label: str
    top_neglected: List[WardrobeItem] = field(default_factory=list)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def days_since_worn(item: WardrobeItem, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the item was last worn, ``None`` if never worn."""

    if item.last_worn_at is None:
        return None
    return (_now(now) - item.last_worn_at).days


def is_neglected(
    item: WardrobeItem, threshold_days: int = DEFAULT_THRESHOLD_DAYS, now: Optional[datetime] = None
) -> bool:
    """Never-worn items, or items idle for at least ``threshold_days``."""

    days = days_since_worn(item, now)
    return days is None or days >= threshold_days


def is_neglected_from_db(item: WardrobeItem) -> bool:
    """Read the flag maintained upstream instead of recomputing it."""

    return item.neglect_status


def validate_neglect_threshold(days: Any) -> int:
    """Validate a threshold before it is stored; out-of-range values are rejected."""

    try:
        return NeglectThresholdInput(days=days).days
    except ValidationError as exc:
        raise ValueError(
            f"Threshold must be between {MIN_THRESHOLD_DAYS} and {MAX_THRESHOLD_DAYS} days"
        ) from exc


def resolve_neglect_threshold(raw: Any, default: int = DEFAULT_THRESHOLD_DAYS) -> int:
    """Interpret a stored threshold, falling back to ``default`` when unusable."""

    if raw is None or isinstance(raw, bool):
        return default
    try:
        days = int(str(raw).strip())
    except ValueError:
        return default
    if MIN_THRESHOLD_DAYS <= days <= MAX_THRESHOLD_DAYS:
        return days
    return default


def format_neglected_label(item: WardrobeItem, now: Optional[datetime] = None) -> str:
    """Short label describing how long an item has sat unworn."""

    current = _now(now)
    if item.last_worn_at is None:
        if item.created_at is None:
            return "Never worn"
        days_since_added = (current - item.created_at).days
        if days_since_added < 30:
            return "Never worn"
        return f"Never worn (added {days_since_added // 30}+ mo ago)"

    days = (current - item.last_worn_at).days
    if days < 30:
        return f"{days}d since last worn"
    months = days // 30
    return f"{months}+ month{'s' if months != 1 else ''} since worn"


def rank_most_neglected(
    items: Iterable[WardrobeItem], now: Optional[datetime] = None, limit: int = TOP_NEGLECTED_LIMIT
) -> List[WardrobeItem]:
    """Never-worn first, then by days idle descending; ties keep input order."""

    def sort_key(item: WardrobeItem) -> float:
        days = days_since_worn(item, now)
        return -math.inf if days is None else -days

    return sorted(items, key=sort_key)[:limit]


def get_neglect_stats(items: Iterable[WardrobeItem], now: Optional[datetime] = None) -> NeglectStats:
    """Aggregate neglect over complete items using the stored flag."""

    complete = complete_items(items)
    neglected = [item for item in complete if is_neglected_from_db(item)]
    total = len(complete)
    count = len(neglected)
    pct = round_half_up(percentage(count, total))
    if count == 0:
        label = "No neglected items"
    else:
        label = f"{pct}% of your wardrobe is neglected ({count} item{'s' if count != 1 else ''})"
    return NeglectStats(
        neglected_count=count,
        total_count=total,
        percentage=pct,
        label=label,
        top_neglected=rank_most_neglected(neglected, now),
    )


__all__ = [
    "DEFAULT_THRESHOLD_DAYS",
    "MIN_THRESHOLD_DAYS",
    "MAX_THRESHOLD_DAYS",
    "NeglectStats",
    "days_since_worn",
    "format_neglected_label",
    "get_neglect_stats",
    "is_neglected",
    "is_neglected_from_db",
    "rank_most_neglected",
    "resolve_neglect_threshold",
    "validate_neglect_threshold",
]
