"""Canonical wardrobe categories.

Categories are matched case-sensitively against the six labels below. Items
carrying any other label stay in the wardrobe but are invisible to the outfit
engines: they never land in a category pool and are never counted.
"""

from typing import Tuple

CATEGORIES: Tuple[str, ...] = ("Top", "Bottom", "Shoes", "Dress", "Outerwear", "Accessory")

# Slots that make an outfit wearable on their own.
CORE_CATEGORIES: Tuple[str, ...] = ("Top", "Bottom", "Dress", "Shoes")
OPTIONAL_CATEGORIES: Tuple[str, ...] = ("Outerwear", "Accessory")


def is_known_category(value: object) -> bool:
    """Return True when ``value`` is exactly one of the canonical labels."""

    return isinstance(value, str) and value in CATEGORIES


def slot_name(category: str) -> str:
    """Map a category label to the matching :class:`Outfit` attribute name."""

    return category.lower()


def validate_category(value: str) -> str:
    """Validate a category supplied by a request.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy. The engines themselves never validate; this is for callers that
    want to reject bad input early.
    """

    if not is_known_category(value):
        raise ValueError(f"Unsupported category '{value}'. Allowed: {list(CATEGORIES)}")
    return value


__all__ = [
    "CATEGORIES",
    "CORE_CATEGORIES",
    "OPTIONAL_CATEGORIES",
    "is_known_category",
    "slot_name",
    "validate_category",
]
