"""Sustainability score: five weighted wardrobe habits plus a CO2 estimate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional

from logic.rounding import clamp, percentage, round_half_up
from models.wardrobe_item import WardrobeItem, WearLogEntry, complete_items

WEIGHTS = {
    "wear_depth": 0.30,
    "utilization": 0.25,
    "value_efficiency": 0.20,
    "resale_activity": 0.15,
    "purchase_restraint": 0.10,
}

TARGET_WEARS = 30
TARGET_CPW = 1.0
ACTIVITY_WINDOW_DAYS = 90
# Each new item in the window costs a fifth of the restraint factor.
NEW_ITEMS_FOR_ZERO_RESTRAINT = 5
CO2_KG_PER_REWEAR = 0.5
RESALE_ACTIVE_STATUSES = frozenset({"listed", "sold"})

BADGE_THRESHOLD = 80
BADGE_NAME = "Eco Warrior 🌱"
CHAMPION_TIP = "Amazing! You're a sustainable fashion champion! 🌱"

# (exclusive lower bound, tier label), best first
TIER_LADDER = (
    (85, "Top 5% of users! 🏆"),
    (75, "Top 15% of users! 🌟"),
    (60, "Top 25% of users!"),
    (40, "Top 50% — keep going!"),
)
STARTER_TIER = "Getting started — every wear counts!"

# Checked in this order; on a tie the later factor is reported.
FACTOR_TIPS = (
    ("utilization", "Try wearing items you haven't touched in 90 days"),
    ("wear_depth", "Keep rewearing your favorites to deepen wardrobe usage"),
    ("value_efficiency", "Wear your expensive items more to improve cost per wear"),
    ("resale_activity", "List neglected items for resale to boost your score"),
    ("purchase_restraint", "Challenge yourself to a 30-day no-buy period"),
)


@dataclass(frozen=True)
class SustainabilityScore:
    score: int
    wear_depth: int
    utilization: int
    value_efficiency: int
    resale_activity: int
    purchase_restraint: int
    co2_saved: int
    tier: str
    tip: str
    badge_unlocked: bool
    badge_name: Optional[str] = None


def get_sustainability_tier(score: int) -> str:
    for lower_bound, label in TIER_LADDER:
        if score > lower_bound:
            return label
    return STARTER_TIER


def weakest_factor_tip(factors: Mapping[str, int]) -> str:
    weakest_value, weakest_tip = None, ""
    for name, tip in FACTOR_TIPS:
        value = factors[name]
        if weakest_value is None or value <= weakest_value:
            weakest_value, weakest_tip = value, tip
    return weakest_tip


def calculate_wear_depth(items: List[WardrobeItem]) -> float:
    if not items:
        return 0.0
    average_wears = sum(item.wear_count for item in items) / len(items)
    return min(average_wears / TARGET_WEARS * 100, 100.0)


def calculate_utilization(items: List[WardrobeItem], wear_logs: Iterable[WearLogEntry], since: date) -> float:
    """Share of items with at least one wear log on or after ``since``."""

    active_ids = {log.item_id for log in wear_logs if log.worn_date >= since}
    active = sum(1 for item in items if item.item_id in active_ids)
    return min(percentage(active, len(items)), 100.0)


def calculate_value_efficiency(items: List[WardrobeItem]) -> float:
    """Target CPW over the mean CPW of priced, worn items; 100 when none qualify."""

    cpws = [item.purchase_price / item.wear_count for item in items if item.purchase_price and item.wear_count > 0]
    if not cpws:
        return 100.0
    average_cpw = sum(cpws) / len(cpws)
    return min(TARGET_CPW / max(average_cpw, 0.01) * 100, 100.0)


def calculate_resale_activity(items: List[WardrobeItem], resale_statuses: Mapping[str, str]) -> float:
    listed = sum(
        1 for item in items if (resale_statuses.get(item.item_id) or "").lower() in RESALE_ACTIVE_STATUSES
    )
    return min(percentage(listed, len(items)), 100.0)


def calculate_purchase_restraint(items: List[WardrobeItem], since: date) -> float:
    new_items = sum(1 for item in items if item.created_at is not None and item.created_at.date() >= since)
    return clamp((1 - new_items / NEW_ITEMS_FOR_ZERO_RESTRAINT) * 100)


def estimate_co2_saved(items: List[WardrobeItem]) -> int:
    """Kilograms of CO2 avoided, counting every wear beyond the first per item."""

    total_wears = sum(item.wear_count for item in items)
    return round_half_up(max(0, total_wears - len(items)) * CO2_KG_PER_REWEAR)


def empty_sustainability_score() -> SustainabilityScore:
    return SustainabilityScore(
        score=0,
        wear_depth=0,
        utilization=0,
        value_efficiency=0,
        resale_activity=0,
        purchase_restraint=0,
        co2_saved=0,
        tier=STARTER_TIER,
        tip="",
        badge_unlocked=False,
    )


def build_sustainability_score(score: int, factors: Mapping[str, int], co2_saved: int) -> SustainabilityScore:
    badge_unlocked = score >= BADGE_THRESHOLD
    return SustainabilityScore(
        score=score,
        wear_depth=factors["wear_depth"],
        utilization=factors["utilization"],
        value_efficiency=factors["value_efficiency"],
        resale_activity=factors["resale_activity"],
        purchase_restraint=factors["purchase_restraint"],
        co2_saved=co2_saved,
        tier=get_sustainability_tier(score),
        tip=CHAMPION_TIP if badge_unlocked else weakest_factor_tip(factors),
        badge_unlocked=badge_unlocked,
        badge_name=BADGE_NAME if badge_unlocked else None,
    )


def calculate_sustainability_score(
    items: Iterable[WardrobeItem],
    wear_logs: Iterable[WearLogEntry],
    resale_statuses: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> SustainabilityScore:
    """Score complete items from 0 to 100.

    ``resale_statuses`` maps item ids to their resale state; items that are
    ``listed`` or ``sold`` count towards resale activity. The 90-day window
    for utilization and purchase restraint ends at ``now``.
    """

    complete = complete_items(items)
    if not complete:
        return empty_sustainability_score()

    since = (now or datetime.now(timezone.utc)).date() - timedelta(days=ACTIVITY_WINDOW_DAYS)
    raw_factors = {
        "wear_depth": calculate_wear_depth(complete),
        "utilization": calculate_utilization(complete, wear_logs, since),
        "value_efficiency": calculate_value_efficiency(complete),
        "resale_activity": calculate_resale_activity(complete, resale_statuses or {}),
        "purchase_restraint": calculate_purchase_restraint(complete, since),
    }
    weighted = sum(raw_factors[name] * weight for name, weight in WEIGHTS.items())
    score = int(clamp(round_half_up(weighted)))
    factors = {name: round_half_up(value) for name, value in raw_factors.items()}
    return build_sustainability_score(score, factors, estimate_co2_saved(complete))


__all__ = [
    "SustainabilityScore",
    "WEIGHTS",
    "build_sustainability_score",
    "calculate_sustainability_score",
    "estimate_co2_saved",
    "get_sustainability_tier",
    "weakest_factor_tip",
]
