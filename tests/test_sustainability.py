"""Sustainability factors, tiers, tips and CO2 savings."""

from datetime import date, datetime, timedelta, timezone
from typing import List

import pytest

from logic.sustainability import (
    BADGE_NAME,
    CHAMPION_TIP,
    STARTER_TIER,
    calculate_sustainability_score,
    calculate_utilization,
    get_sustainability_tier,
)
from models.wardrobe_item import WardrobeItem, WearLogEntry

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)
OLD = NOW - timedelta(days=91)
RECENT = NOW - timedelta(days=10)


def _items(count: int, wears: int = 0, price: float | None = None, created_at: datetime = OLD) -> List[WardrobeItem]:
    return [
        WardrobeItem(f"i{idx}", "u1", "tops", wear_count=wears, purchase_price=price, created_at=created_at)
        for idx in range(count)
    ]


def test_empty_wardrobe_scores_zero() -> None:
    result = calculate_sustainability_score([], [], now=NOW)
    assert result.score == 0
    assert result.tier == STARTER_TIER
    assert result.tip == ""
    assert not result.badge_unlocked


def test_weighted_score_from_known_inputs() -> None:
    items = _items(4, wears=30, price=30)
    logs = [WearLogEntry(item.item_id, NOW.date() - timedelta(days=5)) for item in items]

    result = calculate_sustainability_score(items, logs, now=NOW)

    assert (result.wear_depth, result.utilization, result.value_efficiency) == (100, 100, 100)
    assert (result.resale_activity, result.purchase_restraint) == (0, 100)
    assert result.score == 85
    assert result.tier == "Top 15% of users! 🌟"
    assert result.badge_unlocked
    assert result.badge_name == BADGE_NAME
    assert result.tip == CHAMPION_TIP


def test_co2_counts_rewears_beyond_the_first() -> None:
    assert calculate_sustainability_score(_items(10, wears=5), [], now=NOW).co2_saved == 20
    assert calculate_sustainability_score(_items(3), [], now=NOW).co2_saved == 0


def test_resale_statuses_and_new_purchases() -> None:
    items = _items(2, created_at=RECENT)
    result = calculate_sustainability_score(items, [], resale_statuses={"i0": "Sold", "i1": "kept"}, now=NOW)

    assert result.resale_activity == 50
    assert result.purchase_restraint == 60
    assert result.value_efficiency == 100
    assert result.score == 34
    assert result.tip == "Keep rewearing your favorites to deepen wardrobe usage"
    assert result.badge_name is None


def test_weakest_factor_ties_report_the_later_factor() -> None:
    result = calculate_sustainability_score(_items(3), [], now=NOW)
    assert (result.utilization, result.wear_depth, result.resale_activity) == (0, 0, 0)
    assert result.score == 30
    assert result.tip == "List neglected items for resale to boost your score"


def test_utilization_window_is_ninety_days() -> None:
    items = _items(2)
    since = date(2026, 3, 3)
    logs = [WearLogEntry("i0", since), WearLogEntry("i1", since - timedelta(days=1))]
    assert calculate_utilization(items, logs, since) == 50


def test_incomplete_items_are_ignored() -> None:
    pending = WardrobeItem("p1", "u1", "tops", wear_count=40, status="processing")
    assert calculate_sustainability_score([pending], [], now=NOW).score == 0


@pytest.mark.parametrize(
    "score, tier",
    [
        (86, "Top 5% of users! 🏆"),
        (85, "Top 15% of users! 🌟"),
        (75, "Top 25% of users!"),
        (61, "Top 25% of users!"),
        (60, "Top 50% — keep going!"),
        (40, STARTER_TIER),
    ],
)
def test_tier_boundaries_are_exclusive(score: int, tier: str) -> None:
    assert get_sustainability_tier(score) == tier
