"""Trip packing lists: one outfit per day, items deduplicated across days."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from logic.periods import iter_dates
from models.wardrobe_item import WardrobeItem, complete_items, parse_calendar_date

logger = logging.getLogger(__name__)

MIN_ITEMS_FOR_OUTFIT = 3

OCCASION_BY_EVENT_TYPE = {
    "work": "work",
    "formal": "formal",
    "social": "social",
    "active": "sport",
}
DEFAULT_OCCASION = "casual"


@dataclass(frozen=True)
class TripEvent:
    trip_id: str
    title: str
    start_date: date
    end_date: date
    location: Optional[str] = None

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class DayEvent:
    """A calendar event that falls on one day of the trip."""

    title: str
    day: date
    event_type: Optional[str] = None
    formality_score: Optional[int] = None


@dataclass(frozen=True)
class OutfitItem:
    id: str
    name: str
    category: str


@dataclass
class PackingDay:
    date: str
    event_title: Optional[str]
    occasion_type: str
    outfit_items: List[OutfitItem] = field(default_factory=list)


@dataclass
class PackingItem:
    id: str
    name: str
    category: str
    days: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    packed: bool = False


@dataclass
class PackingList:
    trip_id: str
    trip_title: str
    start_date: str
    end_date: str
    days: List[PackingDay]
    items: List[PackingItem]
    summary: str
    generated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PackingList":
        data = dict(payload)
        data["days"] = [
            PackingDay(
                date=day["date"],
                event_title=day.get("event_title"),
                occasion_type=day.get("occasion_type", DEFAULT_OCCASION),
                outfit_items=[OutfitItem(**entry) for entry in day.get("outfit_items", [])],
            )
            for day in data.get("days", [])
        ]
        data["items"] = [PackingItem(**entry) for entry in data.get("items", [])]
        return cls(**data)


OutfitSelector = Callable[[Optional[DayEvent], List[WardrobeItem]], List[str]]


def trip_dates(start: date | str, end: date | str) -> List[str]:
    """Inclusive ISO dates from ``start`` to ``end``; empty when reversed."""

    return [day.isoformat() for day in iter_dates(parse_calendar_date(start), parse_calendar_date(end))]


def map_occasion(event_type: Optional[str]) -> str:
    return OCCASION_BY_EVENT_TYPE.get(event_type or "", DEFAULT_OCCASION)


def fallback_outfit(event: Optional[DayEvent], items: List[WardrobeItem]) -> List[str]:
    """A dress, or a top with bottoms, plus shoes and outerwear when owned."""

    complete = complete_items(items)

    def first(category: str) -> Optional[WardrobeItem]:
        return next((item for item in complete if item.category == category), None)

    dress, top, bottom = first("dresses"), first("tops"), first("bottoms")
    if dress:
        outfit = [dress.item_id]
    elif top and bottom:
        outfit = [top.item_id, bottom.item_id]
    else:
        return []

    for category in ("shoes", "outerwear"):
        extra = first(category)
        if extra:
            outfit.append(extra.item_id)
    return outfit


def _top_event(events: Sequence[DayEvent]) -> Optional[DayEvent]:
    # sorted() is stable, so the earliest listed event wins formality ties.
    ranked = sorted(events, key=lambda event: -(event.formality_score or 0))
    return ranked[0] if ranked else None


def build_packing_days(
    dates: Sequence[str],
    events: Iterable[DayEvent],
    items: Sequence[WardrobeItem],
    select_outfit: Optional[OutfitSelector] = None,
) -> List[PackingDay]:
    """Assign one outfit per trip day, dressed for that day's most formal event."""

    selector = select_outfit or fallback_outfit
    by_id = {item.item_id: item for item in items}
    events_by_day: Dict[str, List[DayEvent]] = {}
    for event in events:
        events_by_day.setdefault(event.day.isoformat(), []).append(event)

    days = []
    for day in dates:
        top_event = _top_event(events_by_day.get(day, []))
        outfit_ids: List[str] = []
        if len(items) >= MIN_ITEMS_FOR_OUTFIT:
            outfit_ids = selector(top_event, list(items))
            if not outfit_ids and selector is not fallback_outfit:
                outfit_ids = fallback_outfit(top_event, list(items))

        outfit_items = [
            OutfitItem(id=item.item_id, name=item.display_name, category=item.category)
            for item in (by_id.get(item_id) for item_id in outfit_ids)
            if item is not None
        ]
        days.append(
            PackingDay(
                date=day,
                event_title=top_event.title if top_event else None,
                occasion_type=map_occasion(top_event.event_type) if top_event else DEFAULT_OCCASION,
                outfit_items=outfit_items,
            )
        )
    return days


def deduplicate_packing_items(
    days: Iterable[PackingDay], image_urls: Optional[Dict[str, Optional[str]]] = None
) -> List[PackingItem]:
    """Collapse repeated items into one entry listing every day it is worn."""

    image_urls = image_urls or {}
    packed: Dict[str, PackingItem] = {}
    for day in days:
        for outfit_item in day.outfit_items:
            existing = packed.get(outfit_item.id)
            if existing is not None:
                existing.days.append(day.date)
                continue
            packed[outfit_item.id] = PackingItem(
                id=outfit_item.id,
                name=outfit_item.name,
                category=outfit_item.category,
                days=[day.date],
                image_url=image_urls.get(outfit_item.id),
            )
    return list(packed.values())


def build_summary(days: Sequence[PackingDay]) -> str:
    """Outfit counts per occasion, most frequent first, e.g. "3 work, 1 casual outfits"."""

    counts: Dict[str, int] = {}
    for day in days:
        occasion = day.occasion_type or DEFAULT_OCCASION
        counts[occasion] = counts.get(occasion, 0) + 1
    if not counts:
        return "No outfits"
    parts = [f"{count} {occasion}" for occasion, count in sorted(counts.items(), key=lambda entry: -entry[1])]
    return ", ".join(parts) + (" outfit" if len(days) == 1 else " outfits")


def build_packing_list(
    trip: TripEvent,
    events: Iterable[DayEvent],
    items: Sequence[WardrobeItem],
    select_outfit: Optional[OutfitSelector] = None,
    generated_at: Optional[datetime] = None,
) -> PackingList:
    dates = trip_dates(trip.start_date, trip.end_date)
    days = build_packing_days(dates, events, items, select_outfit)
    packing_items = deduplicate_packing_items(days, {item.item_id: item.image_url for item in items})
    logger.info(
        "Built packing list for trip %s: %s days, %s items", trip.trip_id, len(days), len(packing_items)
    )
    return PackingList(
        trip_id=trip.trip_id,
        trip_title=trip.title,
        start_date=trip.start_date.isoformat(),
        end_date=trip.end_date.isoformat(),
        days=days,
        items=packing_items,
        summary=build_summary(days),
        generated_at=(generated_at or datetime.now(timezone.utc)).isoformat(),
    )


def _weekday(value: str) -> str:
    return parse_calendar_date(value).strftime("%a")


def export_packing_list(packing_list: PackingList) -> str:
    """Plain-text rendering with a checkbox per item."""

    lines = [
        f"Packing List: {packing_list.trip_title} ({packing_list.start_date} to {packing_list.end_date})",
        "",
    ]
    for index, day in enumerate(packing_list.days, start=1):
        names = ", ".join(item.name for item in day.outfit_items)
        lines.append(f"Day {index} ({_weekday(day.date)}): {day.event_title or 'Free day'} → {names or 'No outfit'}")

    lines.append("")
    lines.append(f"Items to pack ({len(packing_list.items)} total):")
    for item in packing_list.items:
        check = "☑" if item.packed else "☐"
        days_note = f" ({' + '.join(_weekday(day) for day in item.days)})" if len(item.days) > 1 else ""
        lines.append(f"{check} {item.name}{days_note}")
    return "\n".join(lines)


def mark_item_packed(packing_list: PackingList, item_id: str, packed: bool) -> bool:
    """Toggle an item's packed flag; returns False when the item is not listed."""

    for item in packing_list.items:
        if item.id == item_id:
            item.packed = packed
            return True
    return False


__all__ = [
    "DayEvent",
    "OutfitItem",
    "PackingDay",
    "PackingItem",
    "PackingList",
    "TripEvent",
    "build_packing_days",
    "build_packing_list",
    "build_summary",
    "deduplicate_packing_items",
    "export_packing_list",
    "fallback_outfit",
    "map_occasion",
    "mark_item_packed",
    "trip_dates",
]
