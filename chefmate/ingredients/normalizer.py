"""Ingredient normalization and deduplication.

Pure functions over an ingredient set: an ordered tuple of cleaned strings in
which no two elements share a comparison key (lowercased, decorative emoji
stripped, trimmed). Inputs are never mutated; every operation returns a new
tuple.

Core Functions:
- clean_ingredient(): Strip decorative markers and surrounding whitespace
- comparison_key(): Case- and decoration-insensitive key used for dedup
- add_ingredient(): Append unless empty or already present by key
- remove_ingredient(): Exact-match removal of an element as added
- parse_bulk_input(): Split free text on ",", "&" or "and" and fold through add_ingredient
- normalize_ingredients(): Fold an arbitrary list through add_ingredient
"""

import re
from typing import Iterable, Sequence

IngredientSet = tuple[str, ...]

# Emoji used to decorate the quick-add suggestions
DECORATIVE_MARKERS = "🍗🥩🐟🍤🥚🍚🍝🥔🧄🧅🥕🥬🍅🫑🥒🧀🥛🧈🫒🧂"

_MARKER_PATTERN = re.compile(f"[{DECORATIVE_MARKERS}]")
_BULK_SEPARATOR = re.compile(r"[,&]|\band\b", re.IGNORECASE)

COMMON_INGREDIENTS: tuple[str, ...] = (
    "🍗 Chicken", "🥩 Beef", "🐟 Fish", "🍤 Shrimp", "🥚 Eggs",
    "🍚 Rice", "🍝 Pasta", "🥔 Potatoes", "🧄 Garlic", "🧅 Onions",
    "🥕 Carrots", "🥬 Lettuce", "🍅 Tomatoes", "🫑 Bell Peppers", "🥒 Cucumbers",
    "🧀 Cheese", "🥛 Milk", "🧈 Butter", "🫒 Olive Oil", "🧂 Salt",
)


def clean_ingredient(raw: str) -> str:
    """Strip decorative markers and surrounding whitespace."""
    return _MARKER_PATTERN.sub("", raw or "").strip()


def comparison_key(value: str) -> str:
    """Key under which two ingredients count as the same."""
    return clean_ingredient(value).lower()


def add_ingredient(existing: Sequence[str], raw: str) -> IngredientSet:
    """Add one ingredient to the set.

    Args:
        existing: Current ingredient set.
        raw: Free-text token, possibly decorated (e.g. "🍗 Chicken").

    Returns:
        The set with the cleaned ingredient appended. Unchanged if the cleaned
        value is empty or an element with the same comparison key exists.
    """
    current = tuple(existing)
    cleaned = clean_ingredient(raw)
    if not cleaned:
        return current

    key = cleaned.lower()
    if any(comparison_key(item) == key for item in current):
        return current

    return current + (cleaned,)


def remove_ingredient(existing: Sequence[str], target: str) -> IngredientSet:
    """Remove `target` by exact match on the element as added (no case folding)."""
    return tuple(item for item in existing if item != target)


def parse_bulk_input(raw: str, existing: Sequence[str] = ()) -> IngredientSet:
    """Parse a typed ingredient list such as "chicken, rice and carrots".

    Splits on ",", "&" or the whole word "and" (any case), trims each segment,
    drops empty ones and folds the rest through add_ingredient in order, so the
    first occurrence wins and insertion order is preserved.

    Args:
        raw: Free text typed by the user.
        existing: Set to extend. Default: empty.

    Returns:
        The extended ingredient set.
    """
    result = tuple(existing)
    segments = (segment.strip() for segment in _BULK_SEPARATOR.split(raw or ""))
    for segment in segments:
        if segment:
            result = add_ingredient(result, segment)
    return result


def normalize_ingredients(values: Iterable[str]) -> IngredientSet:
    """Fold a caller-supplied list through add_ingredient."""
    result: IngredientSet = ()
    for value in values or ():
        if isinstance(value, str):
            result = add_ingredient(result, value)
    return result


def is_suggestion_taken(existing: Sequence[str], suggestion: str) -> bool:
    """Whether a quick-add suggestion is already covered by the set.

    Matches when either the cleaned suggestion contains an ingredient or an
    ingredient contains the cleaned suggestion (case-insensitive), so "Olive Oil"
    is taken once "oil" or "Extra Virgin Olive Oil" is present.
    """
    wanted = comparison_key(suggestion)
    if not wanted:
        return False
    for item in existing:
        have = comparison_key(item)
        if have and (have in wanted or wanted in have):
            return True
    return False
