"""
MealPlanner: one catalog and one random source bound to the planning API.

The planning functions themselves are stateless; this class only saves
callers from threading the catalog and rng through every call.
"""

import logging
import random
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from nutriplan.data.catalog import Catalog, default_catalog
from nutriplan.data.models import DatedPlan, DayPlan, Meal, PrepManifest, PrepStep, Profile
from nutriplan.planning.alternatives import find_alternatives
from nutriplan.planning.generator import (
    apply_alternative,
    generate_day_plan,
    generate_plans_for_dates,
    missing_plan_dates,
    regenerate_meal,
    regenerate_plan_slot,
)
from nutriplan.prep.aggregator import DEFAULT_PREP_DAYS, aggregate_prep_list, select_prep_window
from nutriplan.prep.sequencer import build_prep_steps

logger = logging.getLogger(__name__)


class MealPlanner:
    """Planning and prep operations over a single catalog."""

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the planner.

        Args:
            catalog: Catalog to plan from (defaults to the bundled one)
            seed: Seed for a private random source (ignored if rng is given)
            rng: Explicit random source
        """
        self.catalog = catalog if catalog is not None else default_catalog()
        self.rng = rng or random.Random(seed)
        logger.info(f"MealPlanner initialized with {self.catalog!r} (seed={seed})")

    def plan_day(self, profile: Profile, prepped_components=None) -> Optional[DayPlan]:
        return generate_day_plan(self.catalog, profile, prepped_components, rng=self.rng)

    def plan_dates(
        self,
        profile: Profile,
        dates: Iterable[str],
        prepped_components=None,
    ) -> Dict[str, DayPlan]:
        return generate_plans_for_dates(
            self.catalog, profile, dates, prepped_components, rng=self.rng
        )

    def fill_week(
        self,
        profile: Profile,
        existing_dates: Iterable[str],
        start: Optional[date] = None,
        days: int = 7,
    ) -> Dict[str, DayPlan]:
        """Plan every day of the window that has no stored plan yet."""
        missing = missing_plan_dates(existing_dates, start or date.today(), days)
        return self.plan_dates(profile, missing)

    def regenerate(
        self,
        profile: Profile,
        meal_type: str,
        old_meal: Optional[Meal],
        prepped_components=None,
    ) -> Optional[Meal]:
        return regenerate_meal(
            self.catalog, profile, meal_type, old_meal, prepped_components, rng=self.rng
        )

    def regenerate_slot(
        self,
        profile: Profile,
        day_plan: DayPlan,
        index: int,
        prepped_components=None,
    ) -> Optional[DayPlan]:
        return regenerate_plan_slot(
            self.catalog, profile, day_plan, index, prepped_components, rng=self.rng
        )

    def alternatives(
        self,
        profile: Optional[Profile],
        meal_type: str,
        current_meal: Meal,
        prepped_components=None,
    ) -> List[Meal]:
        return find_alternatives(
            self.catalog, profile, meal_type, current_meal, prepped_components, rng=self.rng
        )

    def swap(self, day_plan: DayPlan, index: int, meal: Meal) -> DayPlan:
        return apply_alternative(day_plan, index, meal)

    def prep(self, daily_plans: Iterable) -> PrepManifest:
        return aggregate_prep_list(self.catalog, daily_plans)

    def prep_session(
        self,
        stored_plans: Sequence[DatedPlan],
        start: Optional[date] = None,
        days: int = DEFAULT_PREP_DAYS,
    ) -> Dict:
        """
        Prep list and steps for the next `days` days of stored plans.

        Returns:
            Dictionary with the selected dates, the manifest and its steps
        """
        window = select_prep_window(stored_plans, start or date.today(), days)
        manifest = self.prep(window)
        steps: List[PrepStep] = build_prep_steps(manifest)
        return {
            "dates": [p.plan_date for p in window],
            "manifest": manifest,
            "steps": steps,
        }
