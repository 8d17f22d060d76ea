"""Intensity buckets, streak rules and heatmap assembly."""

from datetime import date, timedelta
from typing import List

import pytest

from logic.heatmap import HeatmapDay, build_heatmap, calculate_streaks, day_detail, get_intensity
from models.wardrobe_item import WardrobeItem, WearLogEntry

START = date(2026, 3, 1)


def _days(counts: List[int], start: date = START) -> List[HeatmapDay]:
    return [HeatmapDay(date=start + timedelta(days=idx), wear_count=count) for idx, count in enumerate(counts)]


@pytest.mark.parametrize(
    "count, expected",
    [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (5, 3), (6, 4), (100, 4)],
)
def test_intensity_boundaries(count: int, expected: int) -> None:
    assert get_intensity(count) == expected


def test_intensity_is_monotonic() -> None:
    values = [get_intensity(count) for count in range(0, 20)]
    assert values == sorted(values)
    assert set(values) <= {0, 1, 2, 3, 4}


def test_streaks_of_empty_sequence() -> None:
    assert calculate_streaks([]) == (0, 0)


def test_longest_streak_resets_on_zero() -> None:
    current, longest = calculate_streaks(_days([1, 1, 1, 0, 1, 1]), today=date(2030, 1, 1))
    assert longest == 3
    # Today is outside the sequence, so counting starts from the last entry.
    assert current == 2


def test_single_active_day_among_inactive_neighbours() -> None:
    assert calculate_streaks(_days([0, 1, 0]), today=date(2030, 1, 1)) == (0, 1)


def test_current_streak_counts_from_yesterday_when_today_is_empty() -> None:
    days = _days([1, 1, 0])
    assert calculate_streaks(days, today=days[2].date) == (2, 2)


def test_current_streak_includes_an_active_today() -> None:
    days = _days([0, 1, 1, 0, 0])
    assert calculate_streaks(days, today=days[2].date) == (2, 2)


def test_build_heatmap_fills_month_and_flags_today() -> None:
    logs = [
        WearLogEntry(item_id="a", worn_date="2026-02-03"),
        WearLogEntry(item_id="b", worn_date="2026-02-03"),
        WearLogEntry(item_id="a", worn_date="2026-02-04"),
        WearLogEntry(item_id="a", worn_date="2026-03-01"),
    ]
    heatmap = build_heatmap(logs, view="month", reference_date=date(2026, 2, 10), today=date(2026, 2, 4))

    assert len(heatmap.days) == 28
    assert heatmap.start_date == date(2026, 2, 1)
    assert heatmap.end_date == date(2026, 2, 28)
    assert heatmap.total_wears == 3
    assert heatmap.active_days == 2
    assert heatmap.days[2].wear_count == 2
    assert heatmap.days[2].intensity == 2
    assert heatmap.days[3].is_today
    assert not heatmap.days[2].is_today
    assert (heatmap.current_streak, heatmap.longest_streak) == (2, 2)
    assert heatmap.insight == "You logged outfits 2 of 28 days"


def test_day_detail_lists_each_wear() -> None:
    items = [
        WardrobeItem("a", "u1", "tops", name="Linen Shirt"),
        WardrobeItem("b", "u1", "shoes", sub_category="loafers"),
    ]
    logs = [
        WearLogEntry(item_id="a", worn_date="2026-02-03"),
        WearLogEntry(item_id="b", worn_date="2026-02-03"),
        WearLogEntry(item_id="a", worn_date="2026-02-04"),
        WearLogEntry(item_id="gone", worn_date="2026-02-03"),
    ]
    detail = day_detail(date(2026, 2, 3), logs, items)
    assert detail.item_names == ["Linen Shirt", "loafers", "Item"]
