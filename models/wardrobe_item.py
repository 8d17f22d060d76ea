"""Wardrobe item and wear log data models and helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import (
    normalize_color_name,
    normalize_season,
    normalise_tags,
    validate_category,
)

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "complete"


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _normalise_colors(values: Iterable[str]) -> List[str]:
    """Normalise color names using the canonical taxonomy mapping."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_color_name(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def _normalise_seasons(values: Iterable[str]) -> List[str]:
    seasons = []
    for value in values:
        season = normalize_season(str(value))
        if season and season not in seasons:
            seasons.append(season)
    return seasons


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp into an aware UTC datetime.

    Naive values are assumed to already be UTC.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_calendar_date(value: Any) -> date:
    """Parse a ``YYYY-MM-DD`` string (or datetime) into a :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


@dataclass
class WardrobeItem:
    """Represents a catalogued item in the user's wardrobe."""

    item_id: str
    user_id: str
    category: str
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    name: Optional[str] = None
    colors: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    wear_count: int = 0
    purchase_price: Optional[float] = None
    last_worn_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    neglect_status: bool = False
    status: str = STATUS_COMPLETE
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.colors = _normalise_colors(_ensure_list(self.colors))
        self.seasons = _normalise_seasons(_ensure_list(self.seasons))
        self.occasions = normalise_tags(_ensure_list(self.occasions))
        self.wear_count = int(self.wear_count or 0)
        if self.wear_count < 0:
            raise ValueError(f"wear_count cannot be negative for item '{self.item_id}'")
        if self.purchase_price is not None:
            self.purchase_price = float(self.purchase_price)
            if self.purchase_price < 0:
                raise ValueError(f"purchase_price cannot be negative for item '{self.item_id}'")
        if self.brand is not None:
            self.brand = str(self.brand).strip() or None
        self.last_worn_at = parse_timestamp(self.last_worn_at)
        self.created_at = parse_timestamp(self.created_at)
        self.neglect_status = bool(self.neglect_status)

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def display_name(self) -> str:
        return self.name or self.sub_category or self.category or "Item"


@dataclass
class WearLogEntry:
    """One recorded wear of an item on a calendar day."""

    item_id: str
    worn_date: date
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.worn_date = parse_calendar_date(self.worn_date)


def complete_items(items: Iterable[WardrobeItem]) -> List[WardrobeItem]:
    """Drop items that have not finished processing."""

    return [item for item in items if item.is_complete]


def from_raw_row(row: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose backend row."""

    required_fields = ["id", "user_id", "category"]
    missing = [name for name in required_fields if not row.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        item_id=str(row["id"]),
        user_id=str(row["user_id"]),
        category=str(row["category"]),
        sub_category=row.get("sub_category"),
        brand=row.get("brand"),
        name=row.get("name"),
        colors=_ensure_list(row.get("colors")),
        seasons=_ensure_list(row.get("seasons")),
        occasions=_ensure_list(row.get("occasions")),
        wear_count=row.get("wear_count") or 0,
        purchase_price=row.get("purchase_price"),
        last_worn_at=row.get("last_worn_at"),
        created_at=row.get("created_at"),
        neglect_status=bool(row.get("neglect_status")),
        status=str(row.get("status") or STATUS_COMPLETE),
        image_url=row.get("image_url"),
    )


def wear_log_from_raw_row(row: Dict[str, Any]) -> WearLogEntry:
    if not row.get("item_id") or not row.get("worn_date"):
        raise ValueError("Wear log rows need 'item_id' and 'worn_date'")
    return WearLogEntry(
        item_id=str(row["item_id"]),
        worn_date=row["worn_date"],
        user_id=row.get("user_id"),
    )


def coerce_items(rows: Iterable[Dict[str, Any]]) -> List[WardrobeItem]:
    """Build items from backend rows, skipping rows that fail validation."""

    items = []
    for row in rows:
        try:
            items.append(from_raw_row(row))
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping wardrobe row due to validation error: %s", exc)
    return items


def count_wears_by_item(wear_logs: Iterable[WearLogEntry]) -> Dict[str, int]:
    """Each wear log row counts as one wear, duplicates included."""

    counts: Dict[str, int] = {}
    for log in wear_logs:
        counts[log.item_id] = counts.get(log.item_id, 0) + 1
    return counts


__all__ = [
    "STATUS_COMPLETE",
    "WardrobeItem",
    "WearLogEntry",
    "complete_items",
    "coerce_items",
    "count_wears_by_item",
    "from_raw_row",
    "parse_calendar_date",
    "parse_timestamp",
    "wear_log_from_raw_row",
]
