"""
Nutriplan - personalized daily meal planning and batch meal-prep.

Core entry points are re-exported here; see the submodules for details.
"""

__version__ = "0.1.0"

from nutriplan.data.catalog import Catalog, default_catalog
from nutriplan.data.models import DayPlan, Meal, PrepManifest, PrepStep, Profile
from nutriplan.planner import MealPlanner
from nutriplan.planning import (
    find_alternatives,
    generate_day_plan,
    regenerate_meal,
    scale_meal,
    select_recipe,
)
from nutriplan.prep import aggregate_prep_list, build_prep_steps
