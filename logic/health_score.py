"""Wardrobe health score: utilization, cost-per-wear and neglect combined."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from logic.rounding import clamp, percentage, round_half_up
from models.wardrobe_item import WardrobeItem, complete_items

WEIGHTS = {
    "utilization": 0.5,
    "cpw": 0.3,
    "neglect": 0.2,
}

# Per-item CPW at or below the target scores 100; at or above the ceiling, 0.
CPW_TARGET = 5.0
CPW_CEILING = 30.0
NEUTRAL_CPW_FACTOR = 50.0

TIER_COLORS = {
    "excellent": "#22c55e",
    "good": "#f59e0b",
    "poor": "#ef4444",
}

# (minimum score, percentile claimed)
COMPARISON_LADDER = ((90, 95), (80, 80), (70, 60), (50, 35))


@dataclass(frozen=True)
class HealthScore:
    score: int
    tier: str
    color: str
    utilization_factor: int
    cpw_factor: int
    neglect_factor: int
    recommendation: str
    declutter_count: int
    comparison_label: str


def get_health_tier(score: int) -> str:
    if score >= 80:
        return "excellent"
    if score >= 50:
        return "good"
    return "poor"


def get_comparison_label(score: int) -> str:
    for minimum, percentile in COMPARISON_LADDER:
        if score >= minimum:
            return f"Healthier than ~{percentile}% of wardrobes"
    return "Room for improvement"


def item_cpw_score(price: float, wear_count: int) -> float:
    """0-100 value score for one priced item, strictly non-increasing in CPW."""

    cpw = price / max(wear_count, 1)
    return clamp((CPW_CEILING - cpw) / (CPW_CEILING - CPW_TARGET) * 100)


def calculate_cpw_factor(items: Iterable[WardrobeItem]) -> float:
    """Mean per-item value score over items with a purchase price."""

    scores: List[float] = [
        item_cpw_score(item.purchase_price, item.wear_count)
        for item in items
        if item.purchase_price and item.purchase_price > 0
    ]
    if not scores:
        return NEUTRAL_CPW_FACTOR
    return sum(scores) / len(scores)


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _recommend(utilization: float, neglected_count: int) -> tuple[str, int]:
    if utilization < 70:
        if neglected_count > 0:
            return f"Declutter {neglected_count} item{_plural(neglected_count)} to improve health", neglected_count
        return "Wear more of your existing items to boost your score", 0
    if utilization < 85:
        count = max(1, round_half_up(neglected_count * 0.3))
        return f"Consider letting go of {count} item{_plural(count)} you rarely reach for", count
    return "Your wardrobe is well-utilized, keep it up!", 0


def calculate_health_score(items: Iterable[WardrobeItem]) -> HealthScore:
    """Score complete items from 0 to 100 with a tier and recommendation."""

    complete = complete_items(items)
    if not complete:
        return HealthScore(
            score=0,
            tier="poor",
            color=TIER_COLORS["poor"],
            utilization_factor=0,
            cpw_factor=0,
            neglect_factor=0,
            recommendation="Add items to your wardrobe to get started",
            declutter_count=0,
            comparison_label="Room for improvement",
        )

    total = len(complete)
    neglected_count = sum(1 for item in complete if item.neglect_status)
    utilization = percentage(total - neglected_count, total)
    cpw_factor = calculate_cpw_factor(complete)
    neglect_factor = clamp(100 - percentage(neglected_count, total))

    raw = (
        utilization * WEIGHTS["utilization"]
        + cpw_factor * WEIGHTS["cpw"]
        + neglect_factor * WEIGHTS["neglect"]
    )
    score = int(clamp(round_half_up(raw)))
    tier = get_health_tier(score)
    recommendation, declutter_count = _recommend(utilization, neglected_count)

    return HealthScore(
        score=score,
        tier=tier,
        color=TIER_COLORS[tier],
        utilization_factor=round_half_up(utilization),
        cpw_factor=round_half_up(cpw_factor),
        neglect_factor=round_half_up(neglect_factor),
        recommendation=recommendation,
        declutter_count=declutter_count,
        comparison_label=get_comparison_label(score),
    )


__all__ = [
    "HealthScore",
    "WEIGHTS",
    "calculate_cpw_factor",
    "calculate_health_score",
    "get_comparison_label",
    "get_health_tier",
    "item_cpw_score",
]
