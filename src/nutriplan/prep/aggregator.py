"""
Prep list aggregation.

Scans several days of stored plans and sums the amounts of every
preppable ingredient by (prep group, ingredient id). Meal lines carry
the ingredient id; older stored plans that only carry a display name
are resolved through the catalog's name index.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import (
    DatedPlan,
    DayPlan,
    Ingredient,
    MealIngredient,
    PrepManifest,
    PreppedComponentGroup,
    PreppedItem,
    round_half_up,
)
from nutriplan.planning.generator import date_window

logger = logging.getLogger(__name__)

DEFAULT_PREP_DAYS = 3

PlanLike = Union[DatedPlan, DayPlan, Dict]


def _as_day_plan(entry: PlanLike) -> Optional[DayPlan]:
    """Accept a DatedPlan, a DayPlan or a stored row ({plan_date, plan_data})."""
    if isinstance(entry, DatedPlan):
        return entry.plan
    if isinstance(entry, DayPlan):
        return entry
    if isinstance(entry, dict):
        if entry.get("plan_data") and entry["plan_data"].get("plan") is not None:
            return DatedPlan.from_dict(entry).plan
        if entry.get("plan") is not None:
            return DayPlan.from_dict(entry)
    return None


def resolve_ingredient(catalog: Catalog, line: MealIngredient) -> Optional[Ingredient]:
    """Find the catalog ingredient behind a meal line (id first, then name)."""
    ingredient = catalog.get_ingredient(line.ingredient_id)
    if ingredient is not None:
        return ingredient
    return catalog.find_ingredient_by_name(line.name)


def aggregate_prep_list(catalog: Catalog, daily_plans: Iterable[PlanLike]) -> PrepManifest:
    """
    Sum preppable ingredient amounts over several days of plans.

    Args:
        catalog: Catalog holding prep metadata for each ingredient
        daily_plans: DatedPlan / DayPlan objects or stored plan rows

    Returns:
        PrepManifest with groups in first-seen order; ingredient names
        that could not be resolved are listed in manifest.unresolved
    """
    sums: Dict[str, Dict[str, float]] = {}
    unresolved: List[str] = []

    for entry in daily_plans:
        plan = _as_day_plan(entry)
        if plan is None:
            logger.warning(f"[PREP] Skipping invalid plan entry: {entry!r}")
            continue

        for meal in plan.plan:
            for line in meal.ingredients:
                ingredient = resolve_ingredient(catalog, line)
                if ingredient is None:
                    logger.warning(f"[PREP] Ingredient not in catalog: '{line.name}'")
                    unresolved.append(line.name)
                    continue
                if not ingredient.is_preppable:
                    continue

                group = sums.setdefault(ingredient.prep_info.prep_group, {})
                group[ingredient.id] = group.get(ingredient.id, 0) + (line.amount or 0)

    groups = []
    for group_name, amounts in sums.items():
        items = []
        for ingredient_id, total in amounts.items():
            ingredient = catalog.get_ingredient(ingredient_id)
            items.append(PreppedItem(
                id=ingredient_id,
                name=ingredient.name,
                total_amount=round_half_up(total),
                unit=ingredient.unit or "g",
                method=ingredient.prep_info.method or "",
            ))
        groups.append(PreppedComponentGroup(group_name=group_name, items=items))

    if unresolved:
        logger.info(f"[PREP] {len(unresolved)} ingredient lines could not be resolved")
    logger.info(
        f"[PREP] Aggregated {sum(len(g.items) for g in groups)} items in {len(groups)} groups"
    )
    return PrepManifest(groups=groups, unresolved=unresolved)


def select_prep_window(
    stored_plans: Iterable[DatedPlan],
    start: date,
    days: int = DEFAULT_PREP_DAYS,
) -> List[DatedPlan]:
    """Stored plans falling in the next `days` days, in date order."""
    window = set(date_window(start, days))
    selected = [p for p in stored_plans if p.plan_date in window]
    return sorted(selected, key=lambda p: p.plan_date)
