"""Rule-based gap detection, ordering and dismissal handling."""

from datetime import date, datetime, timezone
from typing import List

from logic.gap_analysis import SEVERITY_ORDER, Gap, apply_dismissals, detect_basic_gaps, sort_gaps
from models.wardrobe_item import WardrobeItem

WINTER_DAY = date(2026, 1, 15)


def _wardrobe(per_category: int = 2, **kwargs) -> List[WardrobeItem]:
    categories = ["tops", "bottoms", "dresses", "outerwear", "shoes", "accessories"]
    return [
        WardrobeItem(f"{category}-{idx}", "u1", category, **kwargs)
        for category in categories
        for idx in range(per_category)
    ]


def _ids(gaps: List[Gap]) -> List[str]:
    return [gap.id for gap in gaps]


def test_empty_wardrobe_has_one_critical_gap_per_category() -> None:
    gaps = detect_basic_gaps([], today=WINTER_DAY)
    assert len(gaps) == 6
    assert all(gap.severity == "critical" and gap.type == "category" for gap in gaps)
    assert all(not gap.dismissed for gap in gaps)


def test_men_skip_the_dresses_category() -> None:
    gaps = detect_basic_gaps([], gender="man", today=WINTER_DAY)
    assert len(gaps) == 5
    assert "cat-dresses" not in _ids(gaps)


def test_single_item_category_is_important() -> None:
    items = _wardrobe(seasons=["winter"], occasions=["work"])
    items = [item for item in items if item.item_id != "shoes-1"]
    gaps = detect_basic_gaps(items, today=WINTER_DAY)
    assert _ids(gaps) == ["cat-low-shoes"]
    assert gaps[0].severity == "important"


def test_critical_gaps_come_first() -> None:
    items = [WardrobeItem("t1", "u1", "tops")]
    gaps = detect_basic_gaps(items, today=WINTER_DAY)
    severities = [SEVERITY_ORDER[gap.severity] for gap in gaps]
    assert severities == sorted(severities)
    assert gaps[-1].id == "cat-low-tops"


def test_mostly_dark_colors_raise_a_color_gap() -> None:
    items = _wardrobe(colors=["Black"], seasons=["winter"], occasions=["formal"])
    items[0].colors = ["red"]
    gaps = detect_basic_gaps(items, today=WINTER_DAY)
    assert _ids(gaps) == ["color-dark"]
    assert "92% of your item colors are dark" in gaps[0].description


def test_seventy_percent_dark_is_not_a_gap() -> None:
    items = [WardrobeItem(f"i{idx}", "u1", "tops", colors=["black"]) for idx in range(7)]
    items += [WardrobeItem(f"j{idx}", "u1", "tops", colors=["white"]) for idx in range(3)]
    assert "color-dark" not in _ids(detect_basic_gaps(items, today=WINTER_DAY))


def test_formality_gap_needs_five_items() -> None:
    four = [WardrobeItem(f"i{idx}", "u1", "tops", seasons=["winter"]) for idx in range(4)]
    assert "formality-no-formal" not in _ids(detect_basic_gaps(four, today=WINTER_DAY))

    five = four + [WardrobeItem("i5", "u1", "tops", seasons=["winter"], occasions=["casual"])]
    assert "formality-no-formal" in _ids(detect_basic_gaps(five, today=WINTER_DAY))

    five[0].occasions = ["formal"]
    assert "formality-no-formal" not in _ids(detect_basic_gaps(five, today=WINTER_DAY))


def test_current_season_gap_when_few_items_are_tagged() -> None:
    items = _wardrobe(occasions=["work"], seasons=["summer"])
    gaps = detect_basic_gaps(items, today=WINTER_DAY)
    assert _ids(gaps) == ["season-winter"]
    assert gaps[0].type == "weather"
    assert gaps[0].description == "Only 0 items tagged for winter."


def test_important_gaps_order_by_type() -> None:
    items = _wardrobe(colors=["black"], seasons=["summer"])
    gaps = detect_basic_gaps(items, today=WINTER_DAY)
    assert _ids(gaps) == ["formality-no-formal", "color-dark", "season-winter"]


def test_sort_gaps_is_stable_within_a_tier() -> None:
    gaps = [
        Gap("b", "category", "important", "", "", ""),
        Gap("a", "category", "critical", "", "", ""),
        Gap("c", "category", "important", "", "", ""),
        Gap("d", "category", "optional", "", "", ""),
    ]
    assert _ids(sort_gaps(gaps)) == ["a", "b", "c", "d"]


def test_apply_dismissals_recounts_active_gaps() -> None:
    gaps = detect_basic_gaps([], gender="man", today=WINTER_DAY)
    analyzed_at = datetime(2026, 1, 15, tzinfo=timezone.utc)
    result = apply_dismissals(gaps, {"cat-tops", "cat-shoes", "unknown"}, analyzed_at=analyzed_at)

    assert result.total_gaps == 3
    assert result.critical_count == 3
    assert result.last_analyzed_at == analyzed_at
    assert [gap.dismissed for gap in result.gaps] == [False, False, False, True, True]
    assert {gap.id for gap in result.gaps if gap.dismissed} == {"cat-tops", "cat-shoes"}
