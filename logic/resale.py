"""Resale price estimation, candidate scoring and prompt selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from logic.brand_analytics import CURRENCY_SYMBOL, calculate_cpw
from logic.neglect import days_since_worn, format_neglected_label
from logic.rounding import round_half_up
from models.taxonomy import is_premium_brand
from models.wardrobe_item import WardrobeItem, complete_items

DEFAULT_RESALE_PRICE = 15
MIN_RESALE_PRICE = 5
PREMIUM_RETENTION = 0.7
STANDARD_RETENTION = 0.5
WEAR_DISCOUNT_PER_WEAR = 0.01
MAX_WEAR_DISCOUNT = 0.3

RESALE_THRESHOLD_DAYS = 90
HIGH_PRICE_THRESHOLD = 100
HIGH_CPW_THRESHOLD = 5
MAX_PROMPTS_PER_SESSION = 3


@dataclass
class ResaleCandidate:
    item: WardrobeItem
    score: int
    reasons: List[str] = field(default_factory=list)
    days_since_worn: int = 0
    cpw: Optional[float] = None


@dataclass
class ResalePrompt:
    item: WardrobeItem
    estimated_price: int
    message: str
    days_since_worn: int


def estimate_resale_price(item: WardrobeItem) -> int:
    """Brand-tier retention, then a wear-based condition discount capped at 30%."""

    if not item.purchase_price or item.purchase_price <= 0:
        return DEFAULT_RESALE_PRICE

    retention = PREMIUM_RETENTION if is_premium_brand(item.brand) else STANDARD_RETENTION
    price = item.purchase_price * retention
    if item.wear_count > 0:
        price *= 1 - min(item.wear_count * WEAR_DISCOUNT_PER_WEAR, MAX_WEAR_DISCOUNT)
    return max(MIN_RESALE_PRICE, round_half_up(price))


def days_idle(item: WardrobeItem, now: Optional[datetime] = None) -> int:
    """Days since last worn, or since the item was added when never worn."""

    days = days_since_worn(item, now)
    if days is not None:
        return days
    if item.created_at is None:
        return 0
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return (current - item.created_at).days


def score_resale_candidate(item: WardrobeItem, idle_days: int) -> tuple[int, List[str]]:
    score = 50
    reasons = []
    if idle_days > 180:
        score += 20
        reasons.append("Not worn in 6+ months")
    else:
        reasons.append("Not worn in 3+ months")

    if item.purchase_price and item.purchase_price > HIGH_PRICE_THRESHOLD:
        score += 20
        reasons.append("High original value")

    if is_premium_brand(item.brand):
        score += 10
        reasons.append("Premium brand")

    cpw = calculate_cpw(item.purchase_price, item.wear_count)
    if cpw is not None:
        if cpw > HIGH_CPW_THRESHOLD:
            score += 10
            reasons.append("High cost-per-wear")
    elif item.purchase_price and item.wear_count == 0:
        score += 15
        reasons.append("Never worn")

    return min(score, 100), reasons


def get_resale_candidates(items: Iterable[WardrobeItem], now: Optional[datetime] = None) -> List[ResaleCandidate]:
    """Complete items idle for 90+ days, best resale prospects first."""

    candidates = []
    for item in complete_items(items):
        idle = days_idle(item, now)
        if idle < RESALE_THRESHOLD_DAYS:
            continue
        score, reasons = score_resale_candidate(item, idle)
        candidates.append(
            ResaleCandidate(
                item=item,
                score=score,
                reasons=reasons,
                days_since_worn=idle,
                cpw=calculate_cpw(item.purchase_price, item.wear_count),
            )
        )
    candidates.sort(key=lambda candidate: -candidate.score)
    return candidates


def build_prompt_message(
    item: WardrobeItem, price: int, now: Optional[datetime] = None, currency: str = CURRENCY_SYMBOL
) -> str:
    name = item.name or item.category or "item"
    return (
        f"You haven't worn your {name} in a while. {format_neglected_label(item, now)}. "
        f"Sell for {currency}{price}?"
    )


def select_resale_prompts(
    items: Iterable[WardrobeItem],
    dismissed_ids: Iterable[str] = (),
    recently_prompted_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
    limit: int = MAX_PROMPTS_PER_SESSION,
    currency: str = CURRENCY_SYMBOL,
) -> List[ResalePrompt]:
    """Pick neglected items worth suggesting for resale."""

    excluded = set(dismissed_ids) | set(recently_prompted_ids)
    eligible = [
        item for item in complete_items(items) if item.neglect_status and item.item_id not in excluded
    ]
    scored = []
    for item in eligible:
        idle = days_idle(item, now)
        score, _ = score_resale_candidate(item, idle)
        scored.append((score, idle, item))
    scored.sort(key=lambda entry: -entry[0])

    prompts = []
    for _, idle, item in scored[:limit]:
        price = estimate_resale_price(item)
        prompts.append(
            ResalePrompt(
                item=item,
                estimated_price=price,
                message=build_prompt_message(item, price, now, currency),
                days_since_worn=idle,
            )
        )
    return prompts


__all__ = [
    "ResaleCandidate",
    "ResalePrompt",
    "build_prompt_message",
    "days_idle",
    "estimate_resale_price",
    "get_resale_candidates",
    "score_resale_candidate",
    "select_resale_prompts",
]
