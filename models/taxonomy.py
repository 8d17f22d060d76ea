"""Canonical taxonomy definitions for wardrobe items.

This module centralises the canonical labels for categories, seasons, colors
and occasions. Helper functions keep normalisation consistent across the
analytics engines, services and data models.
"""

from typing import Dict, Iterable, List, Optional


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


CATEGORIES: Dict[str, List[str]] = {
    "tops": ["t-shirt", "shirt", "blouse", "sweater", "hoodie", "tank-top", "polo", "crop-top"],
    "bottoms": ["jeans", "pants", "shorts", "skirt", "leggings", "sweatpants", "chinos"],
    "dresses": ["casual-dress", "formal-dress", "maxi-dress", "mini-dress", "midi-dress"],
    "outerwear": ["jacket", "coat", "blazer", "cardigan", "vest", "parka", "bomber"],
    "shoes": ["sneakers", "boots", "heels", "sandals", "loafers", "flats", "oxford"],
    "accessories": ["bag", "hat", "scarf", "belt", "jewelry", "watch", "sunglasses"],
}

CATEGORY_ALIASES = {
    "top": "tops",
    "bottom": "bottoms",
    "dress": "dresses",
    "shoe": "shoes",
    "accessory": "accessories",
}

# Swatches used by the category breakdown chart.
CATEGORY_COLORS: Dict[str, str] = {
    "tops": "#3b82f6",
    "bottoms": "#22c55e",
    "dresses": "#ec4899",
    "outerwear": "#f97316",
    "shoes": "#8b5cf6",
    "accessories": "#14b8a6",
}
DEFAULT_CATEGORY_COLOR = "#9ca3af"

SEASONS = ["spring", "summer", "fall", "winter"]
SEASON_ALIASES = {"autumn": "fall"}

# Categories a season needs covered before it counts as ready.
KEY_SEASON_CATEGORIES = ("tops", "bottoms", "outerwear", "shoes")

COLOR_MAP = {
    "navy blue": "navy",
    "navy": "navy",
    "light blue": "light blue",
    "sky blue": "light blue",
    "blue": "blue",
    "black": "black",
    "white": "white",
    "off white": "white",
    "cream": "beige",
    "beige": "beige",
    "tan": "beige",
    "brown": "brown",
    "gray": "gray",
    "grey": "gray",
    "charcoal": "gray",
    "green": "green",
    "olive": "olive",
    "teal": "teal",
    "red": "red",
    "burgundy": "burgundy",
    "maroon": "burgundy",
    "pink": "pink",
    "yellow": "yellow",
    "orange": "orange",
    "purple": "purple",
}

DARK_COLORS = frozenset({"black", "navy", "gray", "burgundy", "brown", "olive", "teal"})

FORMAL_OCCASIONS = frozenset({"formal", "business", "work"})

# Brands that tend to hold resale value.
PREMIUM_BRANDS = frozenset(
    {
        "gucci", "prada", "louis vuitton", "chanel", "hermes", "dior",
        "burberry", "balenciaga", "saint laurent", "bottega veneta",
        "versace", "fendi", "valentino", "celine", "loewe",
        "nike", "adidas", "new balance", "north face", "patagonia",
        "ralph lauren", "tommy hilfiger", "calvin klein", "hugo boss",
        "levi's", "levis", "cos", "arket", "sandro", "maje",
        "acne studios", "apc", "a.p.c.", "isabel marant",
    }
)

# Categories skipped in gap analysis per gender.
GENDER_SKIP_CATEGORIES: Dict[str, List[str]] = {
    "man": ["dresses"],
    "woman": [],
}


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy. Singular forms ("top", "dress") are accepted.
    """

    key = _normalize_key(value)
    key = CATEGORY_ALIASES.get(key, key)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(CATEGORIES)}")
    return key


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color name."""

    key = raw_string.strip().lower()
    return COLOR_MAP.get(key, key)


def normalize_season(raw_string: str) -> Optional[str]:
    """Return the canonical season name or ``None`` for unknown values."""

    key = _normalize_key(raw_string)
    key = SEASON_ALIASES.get(key, key)
    return key if key in SEASONS else None


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Lower-case and deduplicate free-form tags preserving order."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def is_premium_brand(brand: Optional[str]) -> bool:
    if not brand:
        return False
    return brand.strip().lower() in PREMIUM_BRANDS


__all__ = [
    "CATEGORIES",
    "CATEGORY_COLORS",
    "DEFAULT_CATEGORY_COLOR",
    "SEASONS",
    "KEY_SEASON_CATEGORIES",
    "COLOR_MAP",
    "DARK_COLORS",
    "FORMAL_OCCASIONS",
    "PREMIUM_BRANDS",
    "GENDER_SKIP_CATEGORIES",
    "validate_category",
    "normalize_color_name",
    "normalize_season",
    "normalise_tags",
    "is_premium_brand",
]
