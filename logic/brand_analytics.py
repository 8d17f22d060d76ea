"""Brand value analytics built on cost-per-wear (CPW).

A brand's average CPW is its total spend divided by the number of wear log
rows across its items. Brands with no logged wears get ``math.inf``, which
always sorts after every finite CPW.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from models.taxonomy import validate_category
from models.wardrobe_item import WardrobeItem, WearLogEntry, complete_items, count_wears_by_item

logger = logging.getLogger(__name__)

MIN_ITEMS_PER_BRAND = 3
CURRENCY_SYMBOL = "£"
EMPTY_BRAND_INSIGHT = "Add brands and prices to your items to see value insights"
MISSING_PRICE_INSIGHT = "Add purchase prices and brand names to unlock brand insights"


@dataclass
class BrandStats:
    brand: str
    item_count: int
    total_spent: float
    total_wears: int
    avg_cpw: float
    best_item: Optional[str] = None
    best_item_cpw: Optional[float] = None


@dataclass
class BrandAnalytics:
    brands: List[BrandStats] = field(default_factory=list)
    top_brand: Optional[BrandStats] = None
    insight: str = EMPTY_BRAND_INSIGHT
    category_filter: Optional[str] = None


def calculate_cpw(price: Optional[float], wear_count: int) -> Optional[float]:
    """Cost per wear, or ``None`` when either side is missing."""

    if not price or price <= 0 or wear_count <= 0:
        return None
    return price / wear_count


def cpw_sort_key(value: float) -> tuple[int, float]:
    """Ascending CPW with infinity last."""

    if math.isinf(value) or math.isnan(value):
        return 1, 0.0
    return 0, value


def _best_item(items: List[WardrobeItem], wear_counts: Dict[str, int]) -> tuple[Optional[str], Optional[float]]:
    priced = [item for item in items if item.purchase_price and item.purchase_price > 0]
    worn = [item for item in priced if wear_counts.get(item.item_id, 0) > 0]
    pool = worn or priced
    best: Optional[WardrobeItem] = None
    best_cpw: Optional[float] = None
    for item in pool:
        item_cpw = item.purchase_price / max(wear_counts.get(item.item_id, 0), 1)
        if best_cpw is None or item_cpw < best_cpw:
            best, best_cpw = item, item_cpw
    if best is None:
        return None, None
    return best.name or best.sub_category or best.category or best.brand, best_cpw


def calculate_brand_stats(
    items: Iterable[WardrobeItem],
    wear_logs: Iterable[WearLogEntry],
    category_filter: Optional[str] = None,
) -> List[BrandStats]:
    """Group branded complete items and rank brands by average CPW."""

    candidates = [item for item in complete_items(items) if item.brand]
    if category_filter:
        category = validate_category(category_filter)
        candidates = [item for item in candidates if item.category == category]

    wear_counts = count_wears_by_item(wear_logs)
    grouped: Dict[str, List[WardrobeItem]] = {}
    for item in candidates:
        grouped.setdefault(item.brand, []).append(item)

    brands: List[BrandStats] = []
    for brand, brand_items in grouped.items():
        if len(brand_items) < MIN_ITEMS_PER_BRAND:
            continue
        total_spent = sum(item.purchase_price or 0 for item in brand_items)
        total_wears = sum(wear_counts.get(item.item_id, 0) for item in brand_items)
        avg_cpw = total_spent / total_wears if total_wears > 0 else math.inf
        best_item, best_item_cpw = _best_item(brand_items, wear_counts)
        brands.append(
            BrandStats(
                brand=brand,
                item_count=len(brand_items),
                total_spent=total_spent,
                total_wears=total_wears,
                avg_cpw=avg_cpw,
                best_item=best_item,
                best_item_cpw=best_item_cpw,
            )
        )

    brands.sort(key=lambda stats: cpw_sort_key(stats.avg_cpw))
    logger.debug("Ranked %s brands out of %s branded groups", len(brands), len(grouped))
    return brands


def generate_brand_insight(brands: List[BrandStats], currency: str = CURRENCY_SYMBOL) -> str:
    """One-line summary naming the best-value brand."""

    if not brands:
        return EMPTY_BRAND_INSIGHT
    top = brands[0]
    if math.isinf(top.avg_cpw) or top.total_wears == 0:
        return MISSING_PRICE_INSIGHT
    sentence = f"Your {top.brand} items cost {currency}{top.avg_cpw:.2f}/wear"
    if (
        top.best_item
        and top.best_item_cpw is not None
        and not math.isclose(top.best_item_cpw, top.avg_cpw)
    ):
        return (
            f"{sentence}, and your {top.brand} {top.best_item} is your best value "
            f"at {currency}{top.best_item_cpw:.2f}/wear"
        )
    return f"{sentence}, great value!"


def get_brand_analytics(
    items: Iterable[WardrobeItem],
    wear_logs: Iterable[WearLogEntry],
    category_filter: Optional[str] = None,
    currency: str = CURRENCY_SYMBOL,
) -> BrandAnalytics:
    brands = calculate_brand_stats(items, wear_logs, category_filter)
    return BrandAnalytics(
        brands=brands,
        top_brand=brands[0] if brands else None,
        insight=generate_brand_insight(brands, currency),
        category_filter=category_filter or None,
    )


__all__ = [
    "BrandStats",
    "BrandAnalytics",
    "MIN_ITEMS_PER_BRAND",
    "calculate_cpw",
    "calculate_brand_stats",
    "cpw_sort_key",
    "generate_brand_insight",
    "get_brand_analytics",
]
