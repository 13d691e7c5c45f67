"""
Canonical vocabulary for meal planning and meal prep.

This file provides the authoritative vocabulary for:
- Meal slots and their share of the daily calorie target
- Prep groups and the order in which they are prepared
- Food tags used for likes/dislikes (hard exclusion vs soft bias)

All planning and prep modules read their constants from here.
"""

from typing import Iterable, Optional, Set

# =============================================================================
# MEAL SLOTS
# =============================================================================
MEAL_TYPES: tuple = ("breakfast", "lunch", "dinner")

# Share of the daily calorie (and macro) target assigned to each slot
SLOT_CALORIE_SHARE: dict[str, float] = {
    "breakfast": 0.3,
    "lunch": 0.4,
    "dinner": 0.3,
}
DEFAULT_SLOT_SHARE = 0.33  # Unknown slot names


def slot_share(meal_type: str) -> float:
    """Return the daily-target share for a meal slot."""
    return SLOT_CALORIE_SHARE.get(meal_type, DEFAULT_SLOT_SHARE)


# =============================================================================
# PREP GROUPS
# =============================================================================
CHOPPED_AROMATICS = "Chopped Aromatics"
CHOPPED_VEGGIES = "Chopped Veggies"
BOILED_GRAINS = "Boiled Grains"
BOILED_LEGUMES = "Boiled Legumes"
BOILED_EGGS = "Boiled Eggs"
COOKED_VEGGIES = "Cooked Veggies"
COOKED_PROTEINS = "Cooked Proteins"

# Lower runs earlier in a prep session
PREP_GROUP_PRIORITIES: dict[str, int] = {
    CHOPPED_AROMATICS: 1,
    CHOPPED_VEGGIES: 2,
    BOILED_GRAINS: 3,
    BOILED_LEGUMES: 3,
    BOILED_EGGS: 3,
    COOKED_VEGGIES: 4,
    COOKED_PROTEINS: 5,
}
DEFAULT_PREP_PRIORITY = 99

# Groups collapsed into one shared chopping step
CHOP_GROUPS: Set[str] = {CHOPPED_AROMATICS, CHOPPED_VEGGIES}

# Groups that need reheating when assembled from the fridge
REHEAT_GROUPS: Set[str] = {COOKED_PROTEINS, BOILED_GRAINS}

# Substrings of a group name that put its items in the wash/rinse step
WASH_GROUP_MARKERS: tuple = ("Veggies", "Grains", "Legumes")

# Prep method keywords that require a hot oven
OVEN_KEYWORDS: tuple = ("oven", "bake", "roast")


def prep_priority(group_name: str) -> int:
    """Return the sort priority of a prep group (unknown groups sort last)."""
    return PREP_GROUP_PRIORITIES.get(group_name, DEFAULT_PREP_PRIORITY)


# =============================================================================
# FOOD TAGS
# =============================================================================
# Broad food categories carried on recipes next to their ingredient tags
CANON_FOOD_TAGS: Set[str] = {
    "dairy",
    "meat",
    "poultry",
    "fish",
    "seafood",
    "eggs",
    "gluten",
    "nuts",
    "legumes",
    "vegetarian",
    "vegan",
}

# Maps canonical tag -> other names for the whole category. Member foods
# ("beef", "salmon", "lentils") are not listed: they only match recipes
# tagged with that exact word.
TAG_SYNONYMS: dict[str, Set[str]] = {
    "dairy": {"dairy", "dairy products", "lactose"},
    "meat": {"meat", "red meat"},
    "poultry": {"poultry", "fowl"},
    "fish": {"fish"},
    "seafood": {"seafood", "shellfish"},
    "eggs": {"eggs", "egg"},
    "gluten": {"gluten"},
    "nuts": {"nuts", "nut", "tree nuts"},
    "legumes": {"legumes", "pulses"},
    "vegetarian": {"vegetarian", "veggie", "meatless"},
    "vegan": {"vegan", "plant-based", "plant based"},
}


def normalize_tag(user_input: str) -> Optional[str]:
    """
    Normalize user input to a canonical food tag.

    Args:
        user_input: Raw user text (e.g., "Dairy", "shellfish", "plant based")

    Returns:
        Canonical tag string if recognized, None otherwise

    Examples:
        normalize_tag("Lactose") -> "dairy"
        normalize_tag("plant based") -> "vegan"
        normalize_tag("beef") -> None
    """
    lower = user_input.lower().strip()

    if lower in CANON_FOOD_TAGS:
        return lower

    for canon, variants in TAG_SYNONYMS.items():
        if lower in variants:
            return canon

    return None


def normalize_tags(values: Iterable[str]) -> frozenset:
    """
    Normalize a collection of like/dislike entries.

    Every entry is kept lower-cased so it matches recipe tags exactly;
    category names additionally add their canonical tag.
    """
    tags = set()
    for value in values:
        if not value or not str(value).strip():
            continue
        raw = str(value).lower().strip()
        tags.add(raw)
        canon = normalize_tag(raw)
        if canon:
            tags.add(canon)
    return frozenset(tags)
