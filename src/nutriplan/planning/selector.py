"""
Recipe selection for a single meal slot.

Candidates are drawn through a fixed relaxation chain: each stage drops
one more filter and only runs when the previous stage produced an empty
pool. Within the final pool, recipes matching a liked tag are favored.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import Recipe

logger = logging.getLogger(__name__)

# Probability of picking from the liked subset when it is non-empty
LIKED_BIAS = 0.7


@dataclass(frozen=True)
class RelaxationStage:
    """Which filters a candidate pool enforces (meal type is always enforced)."""
    name: str
    enforce_dietary: bool
    enforce_exclusions: bool

    def admits(self, recipe: Recipe, disliked_tags: frozenset, exclude_ids: frozenset) -> bool:
        if self.enforce_dietary and recipe.has_any_tag(disliked_tags):
            return False
        if self.enforce_exclusions and recipe.id in exclude_ids:
            return False
        return True


RELAXATION_STAGES = (
    RelaxationStage("strict", enforce_dietary=True, enforce_exclusions=True),
    RelaxationStage("allow_repeats", enforce_dietary=True, enforce_exclusions=False),
    RelaxationStage("ignore_dislikes", enforce_dietary=False, enforce_exclusions=True),
    # Last resort: any recipe for the meal type, so a slot is never left empty
    RelaxationStage("meal_type_only", enforce_dietary=False, enforce_exclusions=False),
)


def candidate_pool(
    catalog: Catalog,
    meal_type: str,
    stage: RelaxationStage,
    disliked_tags: Iterable[str] = (),
    exclude_ids: Iterable[str] = (),
) -> List[Recipe]:
    """
    Recipes for a meal type admitted by one relaxation stage.

    Args:
        catalog: Recipe catalog
        meal_type: "breakfast", "lunch" or "dinner"
        stage: Relaxation stage deciding which filters apply
        disliked_tags: Tags that exclude a recipe (hard filter)
        exclude_ids: Recipe ids already used

    Returns:
        Matching recipes in catalog order
    """
    disliked = frozenset(t.lower() for t in disliked_tags)
    excluded = frozenset(exclude_ids)
    return [
        r for r in catalog.recipes_for(meal_type)
        if stage.admits(r, disliked, excluded)
    ]


def select_recipe(
    catalog: Catalog,
    meal_type: str,
    liked_tags: Iterable[str] = (),
    disliked_tags: Iterable[str] = (),
    exclude_ids: Iterable[str] = (),
    rng: Optional[random.Random] = None,
) -> Optional[Recipe]:
    """
    Choose a recipe for a meal slot.

    Args:
        catalog: Recipe catalog
        meal_type: Slot to fill
        liked_tags: Soft preference; liked recipes are picked 70% of the time
        disliked_tags: Hard exclusion, relaxed only when nothing else fits
        exclude_ids: Recipe ids to avoid (e.g. already used today)
        rng: Random source (a fresh generator if omitted)

    Returns:
        Selected Recipe, or None if the catalog has no recipe for meal_type
    """
    rng = rng or random.Random()
    disliked = list(disliked_tags)
    excluded = list(exclude_ids)

    pool: List[Recipe] = []
    for stage in RELAXATION_STAGES:
        pool = candidate_pool(catalog, meal_type, stage, disliked, excluded)
        if pool:
            if stage is RELAXATION_STAGES[-1] and (disliked or excluded):
                logger.warning(
                    f"[SELECT] {meal_type}: no recipe satisfies dislikes/exclusions, "
                    f"falling back to any {meal_type} recipe"
                )
            elif stage is not RELAXATION_STAGES[0]:
                logger.info(f"[SELECT] {meal_type}: relaxed to stage '{stage.name}'")
            break

    if not pool:
        logger.warning(f"[SELECT] Catalog has no recipes for meal type '{meal_type}'")
        return None

    liked = frozenset(t.lower() for t in liked_tags)
    liked_pool = [r for r in pool if r.has_any_tag(liked)] if liked else []

    if liked_pool and rng.random() < LIKED_BIAS:
        choice = rng.choice(liked_pool)
    else:
        choice = rng.choice(pool)

    logger.debug(
        f"[SELECT] {meal_type}: picked '{choice.id}' from {len(pool)} candidates "
        f"({len(liked_pool)} liked)"
    )
    return choice
