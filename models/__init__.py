"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.wardrobe_item import (
    WardrobeItem,
    WearLogEntry,
    coerce_items,
    complete_items,
    from_raw_row,
    wear_log_from_raw_row,
)

__all__ = [
    "WardrobeItem",
    "WearLogEntry",
    "coerce_items",
    "complete_items",
    "from_raw_row",
    "wear_log_from_raw_row",
]
