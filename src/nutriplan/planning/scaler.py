"""
Meal scaling.

Turns a recipe template into a Meal sized to a calorie target: ingredient
amounts are scaled, calories carry a small preparation-variance jitter,
and macros come either from the profile's targets or from fixed
calorie ratios. When prepped components are supplied, the meal is
rewritten as an assembly from the fridge (PrepModeMeal).
"""

import logging
import math
import random
from typing import Dict, List, Optional, Sequence

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import (
    CategorizedIngredients,
    Meal,
    MealIngredient,
    PrepManifest,
    PrepModeMeal,
    PreppedComponentGroup,
    Profile,
    Recipe,
    StandardMeal,
    round_half_up,
)
from nutriplan.tag_canon import REHEAT_GROUPS, slot_share

logger = logging.getLogger(__name__)

CALORIE_JITTER = (0.98, 1.02)
MACRO_JITTER = (0.9, 1.1)

# Share of calories and kcal per gram, used when the profile has no macro targets
CALORIE_MACRO_RATIOS: Dict[str, tuple] = {
    "carbs": (0.45, 4),
    "protein": (0.30, 4),
    "fats": (0.25, 9),
}

PLACEHOLDER_NAME = "No recipe available"


def placeholder_meal(meal_type: str) -> StandardMeal:
    """Zero-value meal used when no recipe exists for a slot."""
    return StandardMeal(
        id=None,
        name=PLACEHOLDER_NAME,
        meal_type=meal_type,
        instructions=[f"No {meal_type} recipe is available in the catalog."],
        ingredients=[],
        total_calories=0,
        total_protein=0,
        total_carbs=0,
        total_fats=0,
        is_placeholder=True,
    )


def jittered_calories(target_calories: float, rng: random.Random) -> int:
    """
    Apply preparation variance to a calorie target.

    The rounded result is clamped into [ceil(0.98T), floor(1.02T)] so it
    never leaves the jitter band because of rounding.
    """
    low, high = CALORIE_JITTER
    value = round_half_up(target_calories * rng.uniform(low, high))
    lower = math.ceil(target_calories * low)
    upper = math.floor(target_calories * high)
    if lower > upper:
        return value
    return min(max(value, lower), upper)


def compute_macros(
    total_calories: float,
    meal_type: str,
    profile: Optional[Profile],
    rng: random.Random,
) -> Dict[str, int]:
    """
    Macro grams for a meal.

    Uses the profile's daily macro targets times the slot share when all
    three are present, otherwise derives grams from total_calories.
    Every macro draws its own jitter.
    """
    low, high = MACRO_JITTER
    if profile is not None and profile.has_macro_targets:
        share = slot_share(meal_type)
        return {
            "protein": round_half_up(profile.target_protein * share * rng.uniform(low, high)),
            "carbs": round_half_up(profile.target_carbs * share * rng.uniform(low, high)),
            "fats": round_half_up(profile.target_fats * share * rng.uniform(low, high)),
        }

    macros = {}
    for macro in ("protein", "carbs", "fats"):
        ratio, kcal_per_gram = CALORIE_MACRO_RATIOS[macro]
        macros[macro] = round_half_up(
            total_calories * ratio / kcal_per_gram * rng.uniform(low, high)
        )
    return macros


def _scaled_lines(catalog: Catalog, recipe: Recipe, factor: float) -> List[MealIngredient]:
    """All recipe ingredients with amounts scaled and rounded (zeros kept)."""
    return [
        MealIngredient(
            name=catalog.ingredient_name(ing.ingredient_id),
            amount=round_half_up(ing.amount * factor),
            unit=ing.unit,
            ingredient_id=ing.ingredient_id,
        )
        for ing in recipe.ingredients
    ]


def _join_names(lines: Sequence[MealIngredient]) -> str:
    return ", ".join(line.name for line in lines)


def prep_mode_instructions(
    prepped: Sequence[MealIngredient],
    fresh: Sequence[MealIngredient],
    item_groups: Dict[str, str],
) -> List[str]:
    """Assembly instructions for a meal built from prepped components."""
    instructions = []
    if fresh:
        instructions.append(f"Prepare the fresh ingredients: {_join_names(fresh)}.")
    if prepped:
        instructions.append(
            f"Take the prepped components from the fridge: {_join_names(prepped)}."
        )
    instructions.append("Combine all components on a plate or in a bowl.")
    if any(item_groups.get(line.ingredient_id) in REHEAT_GROUPS for line in prepped):
        instructions.append(
            "Reheat the cooked proteins and grains in a pan or microwave until hot."
        )
    instructions.append("Serve and enjoy!")
    return instructions


def scale_meal(
    catalog: Catalog,
    recipe: Optional[Recipe],
    target_calories: float,
    meal_type: str,
    profile: Optional[Profile] = None,
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> Meal:
    """
    Scale a recipe to a calorie target.

    Args:
        catalog: Catalog used to resolve ingredient names
        recipe: Recipe to scale; None yields the placeholder meal
        target_calories: Calories this meal should provide
        meal_type: Slot the meal fills (drives the macro share)
        profile: Optional profile carrying daily macro targets
        prepped_components: Prep groups already cooked; enables prep mode
        rng: Random source (a fresh generator if omitted)

    Returns:
        StandardMeal, or PrepModeMeal when prepped components are given
    """
    if recipe is None:
        logger.warning(f"[SCALE] No recipe for {meal_type}, returning placeholder meal")
        return placeholder_meal(meal_type)

    rng = rng or random.Random()
    factor = target_calories / recipe.base_calories

    lines = _scaled_lines(catalog, recipe, factor)
    # Lines rounding to zero are hidden from the display list only
    displayed = [line for line in lines if line.amount > 0]

    total_calories = jittered_calories(recipe.base_calories * factor, rng)
    macros = compute_macros(total_calories, meal_type, profile, rng)

    common = dict(
        id=recipe.id,
        name=recipe.name,
        meal_type=meal_type,
        image_url=recipe.image_url,
        ingredients=displayed,
        total_calories=total_calories,
        total_protein=macros["protein"],
        total_carbs=macros["carbs"],
        total_fats=macros["fats"],
    )

    manifest = PrepManifest.coerce(prepped_components)
    if not manifest.groups:
        logger.debug(f"[SCALE] {recipe.id} x{factor:.2f} -> {total_calories} kcal")
        return StandardMeal(instructions=list(recipe.instructions), **common)

    item_groups = manifest.item_groups()
    prepped = [line for line in lines if line.ingredient_id in item_groups]
    fresh = [line for line in lines if line.ingredient_id not in item_groups]

    logger.debug(
        f"[SCALE] {recipe.id} x{factor:.2f} -> {total_calories} kcal "
        f"(prep mode: {len(prepped)} prepped, {len(fresh)} fresh)"
    )
    return PrepModeMeal(
        instructions=prep_mode_instructions(prepped, fresh, item_groups),
        categorized_ingredients=CategorizedIngredients(prepped=prepped, fresh=fresh),
        **common,
    )
