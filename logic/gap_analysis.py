"""Rule-based wardrobe gap detection and dismissal handling."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from logic.periods import get_season_for_month
from logic.rounding import percentage, round_half_up
from models.taxonomy import CATEGORIES, DARK_COLORS, FORMAL_OCCASIONS, GENDER_SKIP_CATEGORIES
from models.wardrobe_item import WardrobeItem, complete_items

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {"critical": 0, "important": 1, "optional": 2}
TYPE_ORDER = {"category": 0, "formality": 1, "color": 2, "weather": 3}

DARK_COLOR_THRESHOLD = 70
MIN_ITEMS_FOR_COMPOSITION_RULES = 5
MIN_SEASON_ITEMS = 3


@dataclass(frozen=True)
class Gap:
    id: str
    type: str
    severity: str
    title: str
    description: str
    suggestion: str
    dismissed: bool = False


@dataclass(frozen=True)
class GapAnalysisResult:
    gaps: List[Gap]
    total_gaps: int
    critical_count: int
    last_analyzed_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["last_analyzed_at"] = self.last_analyzed_at.isoformat()
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GapAnalysisResult":
        return cls(
            gaps=[Gap(**gap) for gap in payload.get("gaps", [])],
            total_gaps=int(payload.get("total_gaps", 0)),
            critical_count=int(payload.get("critical_count", 0)),
            last_analyzed_at=datetime.fromisoformat(payload["last_analyzed_at"]),
        )


def sort_gaps(gaps: Iterable[Gap]) -> List[Gap]:
    """Critical before important before optional, then by gap type."""

    return sorted(gaps, key=lambda gap: (SEVERITY_ORDER[gap.severity], TYPE_ORDER.get(gap.type, len(TYPE_ORDER))))


def _category_gaps(items: List[WardrobeItem], categories: List[str]) -> List[Gap]:
    counts: Dict[str, int] = {}
    for item in items:
        counts[item.category] = counts.get(item.category, 0) + 1

    gaps = []
    for category in categories:
        count = counts.get(category, 0)
        if count == 0:
            gaps.append(
                Gap(
                    id=f"cat-{category}",
                    type="category",
                    severity="critical",
                    title=f"No {category.capitalize()}",
                    description=f"You have no {category} in your wardrobe.",
                    suggestion=f"Consider adding some {category} to complete your wardrobe.",
                )
            )
        elif count == 1:
            gaps.append(
                Gap(
                    id=f"cat-low-{category}",
                    type="category",
                    severity="important",
                    title=f"Only 1 {category.capitalize()} item",
                    description=f"You only have 1 {category} item, which limits variety.",
                    suggestion=f"Add another {category} piece for more outfit combinations.",
                )
            )
    return gaps


def _color_gap(items: List[WardrobeItem]) -> Optional[Gap]:
    colors = [color for item in items for color in item.colors]
    if not colors:
        return None
    dark_pct = percentage(sum(1 for color in colors if color in DARK_COLORS), len(colors))
    if dark_pct <= DARK_COLOR_THRESHOLD:
        return None
    return Gap(
        id="color-dark",
        type="color",
        severity="important",
        title="Limited color variety",
        description=f"{round_half_up(dark_pct)}% of your item colors are dark.",
        suggestion="Add items in lighter or brighter colors for a balanced, versatile wardrobe.",
    )


def _season_gap(items: List[WardrobeItem], today: date) -> Optional[Gap]:
    if len(items) < MIN_ITEMS_FOR_COMPOSITION_RULES:
        return None
    season = get_season_for_month(today.month)
    tagged = sum(1 for item in items if season in item.seasons)
    if tagged >= MIN_SEASON_ITEMS:
        return None
    return Gap(
        id=f"season-{season}",
        type="weather",
        severity="important",
        title=f"Low {season.capitalize()} readiness",
        description=f"Only {tagged} item{'s' if tagged != 1 else ''} tagged for {season}.",
        suggestion=f"Tag your {season}-appropriate items or add new {season} pieces.",
    )


def _formality_gap(items: List[WardrobeItem]) -> Optional[Gap]:
    if len(items) < MIN_ITEMS_FOR_COMPOSITION_RULES:
        return None
    if any(FORMAL_OCCASIONS.intersection(item.occasions) for item in items):
        return None
    return Gap(
        id="formality-no-formal",
        type="formality",
        severity="important",
        title="No formal options",
        description="None of your items are tagged for formal or business occasions.",
        suggestion="Consider adding a formal outfit for professional or special occasion needs.",
    )


def detect_basic_gaps(
    items: Iterable[WardrobeItem], gender: Optional[str] = None, today: Optional[date] = None
) -> List[Gap]:
    """Detect composition gaps over complete items, most severe first."""

    complete = complete_items(items)
    skipped = set(GENDER_SKIP_CATEGORIES.get(gender or "", []))
    categories = [category for category in CATEGORIES if category not in skipped]

    gaps = _category_gaps(complete, categories)
    for gap in (
        _color_gap(complete),
        _season_gap(complete, today or date.today()),
        _formality_gap(complete),
    ):
        if gap is not None:
            gaps.append(gap)

    logger.debug("Detected %s gaps across %s items", len(gaps), len(complete))
    return sort_gaps(gaps)


def apply_dismissals(
    gaps: Iterable[Gap], dismissed_ids: Iterable[str], analyzed_at: Optional[datetime] = None
) -> GapAnalysisResult:
    """Mark dismissed gaps, list them after active ones and count the rest."""

    gaps = list(gaps)
    dismissed = set(dismissed_ids)
    active = [replace(gap, dismissed=False) for gap in gaps if gap.id not in dismissed]
    hidden = [replace(gap, dismissed=True) for gap in gaps if gap.id in dismissed]
    return GapAnalysisResult(
        gaps=active + hidden,
        total_gaps=len(active),
        critical_count=sum(1 for gap in active if gap.severity == "critical"),
        last_analyzed_at=analyzed_at or datetime.now(timezone.utc),
    )


__all__ = [
    "Gap",
    "GapAnalysisResult",
    "apply_dismissals",
    "detect_basic_gaps",
    "sort_gaps",
]
