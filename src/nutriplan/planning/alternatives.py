"""
Alternative meal finder.

Every eligible recipe for the slot is scaled to the current meal's
calories, then filtered by calorie and protein tolerance and ranked by
weighted distance. The pool is exhaustive; there is no liked-tag bias.
"""

import logging
import random
from typing import List, Optional, Sequence

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import Meal, PreppedComponentGroup, Profile, Recipe
from nutriplan.planning.scaler import scale_meal

logger = logging.getLogger(__name__)

CALORIE_TOLERANCE = 75
PROTEIN_TOLERANCE = 10
PROTEIN_WEIGHT = 2
MAX_ALTERNATIVES = 6


def alternative_pool(
    catalog: Catalog,
    meal_type: str,
    current_id: Optional[str],
    disliked_tags,
) -> List[Recipe]:
    """Recipes for the slot, minus the current one and anything disliked."""
    disliked = frozenset(t.lower() for t in disliked_tags)
    return [
        r for r in catalog.recipes_for(meal_type)
        if r.id != current_id and not r.has_any_tag(disliked)
    ]


def match_score(candidate: Meal, reference: Meal) -> float:
    """Distance to the reference meal; protein counts double."""
    return (
        abs(candidate.total_calories - reference.total_calories)
        + PROTEIN_WEIGHT * abs(candidate.total_protein - reference.total_protein)
    )


def within_tolerance(candidate: Meal, reference: Meal) -> bool:
    return (
        abs(candidate.total_calories - reference.total_calories) <= CALORIE_TOLERANCE
        and abs(candidate.total_protein - reference.total_protein) <= PROTEIN_TOLERANCE
    )


def find_alternatives(
    catalog: Catalog,
    profile: Optional[Profile],
    meal_type: str,
    current_meal: Meal,
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> List[Meal]:
    """
    Find replacement meals comparable to current_meal.

    Args:
        catalog: Recipe catalog
        profile: Supplies disliked foods and macro targets (optional)
        meal_type: Slot being replaced
        current_meal: Reference meal (its calories and protein)
        prepped_components: Optional prep groups; candidates use prep mode
        rng: Random source for scaling jitter

    Returns:
        Up to six meals, best match first; empty when nothing qualifies
    """
    rng = rng or random.Random()
    disliked = profile.disliked_foods if profile is not None else frozenset()
    pool = alternative_pool(catalog, meal_type, current_meal.id, disliked)

    scored = []
    for recipe in pool:
        candidate = scale_meal(
            catalog,
            recipe,
            current_meal.total_calories,
            meal_type,
            profile=profile,
            prepped_components=prepped_components,
            rng=rng,
        )
        if within_tolerance(candidate, current_meal):
            scored.append((match_score(candidate, current_meal), candidate))

    # sorted() is stable, so ties keep catalog order
    scored.sort(key=lambda pair: pair[0])
    alternatives = [meal for _, meal in scored[:MAX_ALTERNATIVES]]

    logger.info(
        f"[ALTERNATIVES] {meal_type}: {len(pool)} candidates, "
        f"{len(scored)} within tolerance, returning {len(alternatives)}"
    )
    return alternatives
