"""
Day plan generation and single-meal regeneration.

A day plan fills breakfast, lunch and dinner in order; each later slot
excludes the recipes already used that day. Regeneration replaces one
slot and always recomputes the plan totals from scratch.
"""

import logging
import random
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import DayPlan, Meal, PreppedComponentGroup, Profile
from nutriplan.planning.scaler import scale_meal
from nutriplan.planning.selector import select_recipe
from nutriplan.tag_canon import MEAL_TYPES, slot_share

logger = logging.getLogger(__name__)

DEFAULT_PLAN_DAYS = 7


def slot_calories(profile: Profile, meal_type: str) -> float:
    """Calorie target of one slot."""
    return profile.target_calories * slot_share(meal_type)


def generate_day_plan(
    catalog: Catalog,
    profile: Profile,
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> Optional[DayPlan]:
    """
    Generate breakfast, lunch and dinner for one day.

    Args:
        catalog: Recipe catalog
        profile: Nutrition targets and food preferences
        prepped_components: Optional prep groups; meals are built in prep mode
        rng: Random source (a fresh generator if omitted)

    Returns:
        DayPlan with consistent totals, or None if the profile has no
        calorie target yet
    """
    if not profile.can_plan:
        logger.info("[PLAN] Profile has no calorie target, cannot plan yet")
        return None

    rng = rng or random.Random()
    used_ids: List[str] = []
    meals: List[Meal] = []

    for meal_type in MEAL_TYPES:
        recipe = select_recipe(
            catalog,
            meal_type,
            liked_tags=profile.liked_foods,
            disliked_tags=profile.disliked_foods,
            exclude_ids=used_ids,
            rng=rng,
        )
        if recipe is not None:
            used_ids.append(recipe.id)
        meals.append(
            scale_meal(
                catalog,
                recipe,
                slot_calories(profile, meal_type),
                meal_type,
                profile=profile,
                prepped_components=prepped_components,
                rng=rng,
            )
        )

    plan = DayPlan.from_meals(meals)
    logger.info(
        f"[PLAN] Generated day plan: {[m.id for m in meals]} "
        f"({plan.totals.calories}/{profile.target_calories} kcal)"
    )
    return plan


def regenerate_meal(
    catalog: Catalog,
    profile: Profile,
    meal_type: str,
    old_meal: Optional[Meal],
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Meal]:
    """
    Produce a replacement meal for one slot.

    The caller replaces the slot and recomputes totals (see
    regenerate_plan_slot for a helper that does both).

    Returns:
        New Meal, or None if the profile has no calorie target yet
    """
    if not profile.can_plan:
        logger.info(f"[REGEN] Profile has no calorie target, cannot regenerate {meal_type}")
        return None

    rng = rng or random.Random()
    exclude = [old_meal.id] if old_meal is not None and old_meal.id else []
    recipe = select_recipe(
        catalog,
        meal_type,
        liked_tags=profile.liked_foods,
        disliked_tags=profile.disliked_foods,
        exclude_ids=exclude,
        rng=rng,
    )
    meal = scale_meal(
        catalog,
        recipe,
        slot_calories(profile, meal_type),
        meal_type,
        profile=profile,
        prepped_components=prepped_components,
        rng=rng,
    )
    logger.info(
        f"[REGEN] {meal_type}: {old_meal.id if old_meal else None} -> {meal.id}"
    )
    return meal


def regenerate_plan_slot(
    catalog: Catalog,
    profile: Profile,
    day_plan: DayPlan,
    index: int,
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> Optional[DayPlan]:
    """
    Regenerate the meal at index and return the updated plan.

    Raises:
        IndexError: If index is not a slot of day_plan

    Returns:
        New DayPlan with recomputed totals, or None if the profile has
        no calorie target yet
    """
    if index < 0 or index >= len(day_plan.plan):
        raise IndexError(f"Meal index {index} out of range (0-{len(day_plan.plan) - 1})")

    old_meal = day_plan.plan[index]
    meal_type = old_meal.meal_type or MEAL_TYPES[index % len(MEAL_TYPES)]
    new_meal = regenerate_meal(
        catalog, profile, meal_type, old_meal,
        prepped_components=prepped_components, rng=rng,
    )
    if new_meal is None:
        return None
    return day_plan.replace_meal(index, new_meal)


def apply_alternative(day_plan: DayPlan, index: int, meal: Meal) -> DayPlan:
    """
    Swap a chosen alternative into a plan.

    Raises:
        IndexError: If index is not a slot of day_plan
    """
    updated = day_plan.replace_meal(index, meal)
    logger.info(f"[SWAP] Slot {index}: {day_plan.plan[index].id} -> {meal.id}")
    return updated


# =============================================================================
# Multi-day helpers
# =============================================================================

def date_window(start: date, days: int) -> List[str]:
    """ISO dates for `days` consecutive days starting at start."""
    return [(start + timedelta(days=i)).isoformat() for i in range(days)]


def missing_plan_dates(
    existing_dates: Iterable[str],
    start: date,
    days: int = DEFAULT_PLAN_DAYS,
) -> List[str]:
    """Dates in the window that have no stored plan yet."""
    existing = set(existing_dates)
    return [d for d in date_window(start, days) if d not in existing]


def generate_plans_for_dates(
    catalog: Catalog,
    profile: Profile,
    dates: Iterable[str],
    prepped_components: Optional[Sequence[PreppedComponentGroup]] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, DayPlan]:
    """
    Plan several dates, each independently.

    Returns:
        Mapping of date -> DayPlan; empty if the profile cannot be planned
    """
    if not profile.can_plan:
        logger.info("[PLAN] Profile has no calorie target, skipping multi-day planning")
        return {}

    rng = rng or random.Random()
    plans: Dict[str, DayPlan] = {}
    for plan_date in dates:
        plan = generate_day_plan(catalog, profile, prepped_components, rng=rng)
        if plan is not None:
            plans[plan_date] = plan
    logger.info(f"[PLAN] Generated {len(plans)} day plans")
    return plans
