"""Seasonal wardrobe reports: readiness scoring, recommendations and comparisons."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from logic.periods import get_season_date_range
from logic.rounding import round_half_up
from models.taxonomy import KEY_SEASON_CATEGORIES
from models.wardrobe_item import WardrobeItem, WearLogEntry, complete_items, count_wears_by_item

MAX_RECOMMENDATIONS = 3
MOST_WORN_LIMIT = 5


@dataclass
class ItemWearSummary:
    item_id: str
    name: str
    wear_count: int = 0


@dataclass
class SeasonalReport:
    season: str
    year: int
    total_items_for_season: int
    items_by_category: Dict[str, int] = field(default_factory=dict)
    most_worn_items: List[ItemWearSummary] = field(default_factory=list)
    neglected_items: List[ItemWearSummary] = field(default_factory=list)
    total_wears: int = 0
    readiness_score: int = 0
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SeasonalReport":
        data = dict(payload)
        data["most_worn_items"] = [ItemWearSummary(**entry) for entry in data.get("most_worn_items", [])]
        data["neglected_items"] = [ItemWearSummary(**entry) for entry in data.get("neglected_items", [])]
        return cls(**data)


def _worn_count(items: List[WardrobeItem], wear_counts: Mapping[str, int]) -> int:
    return sum(1 for item in items if wear_counts.get(item.item_id, 0) > 0)


def calculate_readiness_score(items: Iterable[WardrobeItem], wear_counts: Mapping[str, int]) -> int:
    """0-10 score: category coverage (4) + variety (3) + usage (3)."""

    items = list(items)
    if not items:
        return 0

    categories = {item.category for item in items}
    coverage = sum(1 for category in KEY_SEASON_CATEGORIES if category in categories)

    if len(items) >= 10:
        variety = 3
    elif len(items) >= 5:
        variety = 2
    else:
        variety = 1

    worn = _worn_count(items, wear_counts)
    if worn / len(items) > 0.75:
        usage = 3
    elif worn > 0:
        usage = 2
    else:
        usage = 0

    return coverage + variety + usage


def generate_recommendations(
    items: Iterable[WardrobeItem],
    wear_counts: Mapping[str, int],
    neglected_count: int,
    season: str,
) -> List[str]:
    """Up to three suggestions for getting a season's wardrobe ready."""

    items = list(items)
    if not items:
        return [f'Tag your items with "{season}" to unlock seasonal insights']

    recommendations = []
    if not any(item.category == "outerwear" for item in items):
        recommendations.append(f"Add outerwear for {season} layering and outfit variety")

    if len(items) < 5:
        plural = "s" if len(items) != 1 else ""
        recommendations.append(
            f"Only {len(items)} {season} item{plural}, consider expanding your {season} wardrobe"
        )

    if 0 < neglected_count <= 5:
        plural = "s" if neglected_count != 1 else ""
        recommendations.append(
            f"You have {neglected_count} unworn {season} item{plural}, try wearing them this season!"
        )
    elif neglected_count > 5:
        recommendations.append(f"{neglected_count} {season} items went unworn, consider a wardrobe review")

    worn_ratio = _worn_count(items, wear_counts) / len(items)
    if worn_ratio >= 0.9:
        recommendations.append(
            f"Great job! You used {round_half_up(worn_ratio * 100)}% of your {season} wardrobe"
        )

    return recommendations[:MAX_RECOMMENDATIONS]


def wear_change_percent(current_total: int, previous_total: int) -> Optional[int]:
    """Signed percent change; ``None`` when there is no baseline."""

    if previous_total <= 0:
        return None
    delta = current_total - previous_total
    magnitude = round_half_up(abs(delta) / previous_total * 100)
    return magnitude if delta >= 0 else -magnitude


def build_comparison_text(season: str, current_total: int, previous_total: Optional[int]) -> str:
    """Year-over-year wear comparison for the same season."""

    change = wear_change_percent(current_total, previous_total or 0)
    if change is None:
        return f"First {season} tracked, keep going!"
    if current_total > previous_total:
        return f"▲ {change}% more wears than last {season}"
    if current_total < previous_total:
        return f"▼ {abs(change)}% fewer wears than last {season}"
    return f"Same number of wears as last {season}"


def build_seasonal_report(
    items: Iterable[WardrobeItem],
    wear_logs: Iterable[WearLogEntry],
    season: str,
    year: int,
) -> SeasonalReport:
    """Report on complete items tagged for ``season`` over its date range."""

    period = get_season_date_range(season, year)
    season_items = [item for item in complete_items(items) if season in item.seasons]
    season_ids = {item.item_id for item in season_items}
    wear_counts = count_wears_by_item(
        log for log in wear_logs if log.item_id in season_ids and period.contains(log.worn_date)
    )

    items_by_category: Dict[str, int] = {}
    for item in season_items:
        items_by_category[item.category] = items_by_category.get(item.category, 0) + 1

    worn = [
        ItemWearSummary(item.item_id, item.display_name, wear_counts.get(item.item_id, 0))
        for item in season_items
        if wear_counts.get(item.item_id, 0) > 0
    ]
    most_worn = sorted(worn, key=lambda entry: -entry.wear_count)[:MOST_WORN_LIMIT]
    neglected = [
        ItemWearSummary(item.item_id, item.display_name, 0)
        for item in season_items
        if wear_counts.get(item.item_id, 0) == 0
    ]

    return SeasonalReport(
        season=season,
        year=year,
        total_items_for_season=len(season_items),
        items_by_category=items_by_category,
        most_worn_items=most_worn,
        neglected_items=neglected,
        total_wears=sum(wear_counts.values()),
        readiness_score=calculate_readiness_score(season_items, wear_counts),
        recommendations=generate_recommendations(season_items, wear_counts, len(neglected), season),
    )


__all__ = [
    "ItemWearSummary",
    "SeasonalReport",
    "build_comparison_text",
    "build_seasonal_report",
    "calculate_readiness_score",
    "generate_recommendations",
    "wear_change_percent",
]
