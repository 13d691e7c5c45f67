"""
Plan generation: recipe selection, scaling, regeneration and alternatives.
"""

from nutriplan.planning.alternatives import find_alternatives
from nutriplan.planning.generator import (
    apply_alternative,
    generate_day_plan,
    generate_plans_for_dates,
    missing_plan_dates,
    regenerate_meal,
    regenerate_plan_slot,
)
from nutriplan.planning.scaler import scale_meal
from nutriplan.planning.selector import select_recipe

__all__ = [
    "apply_alternative",
    "find_alternatives",
    "generate_day_plan",
    "generate_plans_for_dates",
    "missing_plan_dates",
    "regenerate_meal",
    "regenerate_plan_slot",
    "scale_meal",
    "select_recipe",
]
