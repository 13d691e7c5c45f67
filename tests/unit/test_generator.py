"""
Unit tests for nutriplan.planning.generator.

Tests cover:
- Day plan shape, slot targets and totals consistency
- Dietary exclusion and same-day variety
- Missing profile data and missing recipes
- Single-meal regeneration and slot replacement
- Multi-day helpers
"""

import random
from datetime import date

import pytest

from nutriplan.data.catalog import Catalog
from nutriplan.data.models import PrepModeMeal, Profile
from nutriplan.planning.generator import (
    apply_alternative,
    generate_day_plan,
    generate_plans_for_dates,
    missing_plan_dates,
    regenerate_meal,
    regenerate_plan_slot,
)
from nutriplan.planning.scaler import scale_meal

from tests.conftest import SMALL_INGREDIENTS, SMALL_RECIPES, make_recipe


class TestGenerateDayPlan:
    """Tests for generate_day_plan."""

    def test_missing_calorie_target(self, catalog, empty_profile, rng):
        """No calorie target means no plan, not an exception."""
        assert generate_day_plan(catalog, empty_profile, rng=rng) is None

    def test_shape(self, catalog, profile, rng):
        """Three meals in breakfast, lunch, dinner order."""
        plan = generate_day_plan(catalog, profile, rng=rng)
        assert [m.meal_type for m in plan.plan] == ["breakfast", "lunch", "dinner"]
        assert plan.is_consistent()

    @pytest.mark.parametrize("seed", range(25))
    def test_slot_targets(self, catalog, seed):
        """Slots get 30/40/30% of the daily target within the jitter band."""
        profile = Profile(target_calories=2000)
        plan = generate_day_plan(catalog, profile, rng=random.Random(seed))
        for meal, target in zip(plan.plan, (600, 800, 600)):
            assert 0.98 * target <= meal.total_calories <= 1.02 * target
        assert 1960 <= plan.totals.calories <= 2040

    @pytest.mark.parametrize("seed", range(25))
    def test_dairy_excluded(self, catalog, dairy_free_profile, seed):
        """A dairy dislike keeps dairy recipes out when alternatives exist."""
        plan = generate_day_plan(catalog, dairy_free_profile, rng=random.Random(seed))
        for meal in plan.plan:
            assert not catalog.get_recipe(meal.id).has_any_tag({"dairy"})

    @pytest.mark.parametrize("seed", range(25))
    def test_member_food_dislike_matches_exact_tag(self, seed):
        """Disliking "beef" excludes a recipe tagged only "beef"."""
        beef_catalog = Catalog(SMALL_INGREDIENTS, SMALL_RECIPES + [
            make_recipe("beef-bowl", ["lunch", "dinner"], 520, ["beef"],
                        [("quinoa", 80, "g"), ("onion", 40, "g")]),
        ])
        beefless = Profile(target_calories=2000, disliked_foods=["beef"])

        plan = generate_day_plan(beef_catalog, beefless, rng=random.Random(seed))
        assert "beef-bowl" not in [m.id for m in plan.plan]

    @pytest.mark.parametrize("seed", range(25))
    def test_lunch_and_dinner_differ(self, catalog, profile, seed):
        """Dinner excludes the recipe already used for lunch."""
        plan = generate_day_plan(catalog, profile, rng=random.Random(seed))
        assert plan.plan[1].id != plan.plan[2].id

    def test_prep_mode_plan(self, catalog, profile, rng, chicken_prep):
        """Prepped components turn every meal into a prep-mode meal."""
        plan = generate_day_plan(catalog, profile, chicken_prep, rng=rng)
        assert all(isinstance(m, PrepModeMeal) for m in plan.plan)
        assert plan.is_consistent()

    def test_missing_recipes_give_placeholders(self, profile, rng):
        """A catalog with only breakfasts still yields a valid plan."""
        breakfast_only = Catalog(SMALL_INGREDIENTS, [r for r in SMALL_RECIPES if r.serves("breakfast")])
        plan = generate_day_plan(breakfast_only, profile, rng=rng)

        assert not plan.plan[0].is_placeholder
        assert plan.plan[1].is_placeholder
        assert plan.plan[2].is_placeholder
        assert plan.totals.calories == plan.plan[0].total_calories
        assert plan.is_consistent()

    def test_reproducible_with_seed(self, catalog, profile):
        """The same seed gives the same plan."""
        first = generate_day_plan(catalog, profile, rng=random.Random(21))
        second = generate_day_plan(catalog, profile, rng=random.Random(21))
        assert first == second


class TestRegenerateMeal:
    """Tests for regenerate_meal and slot replacement."""

    def test_missing_calorie_target(self, catalog, empty_profile, rng):
        """Regeneration also needs a calorie target."""
        old = scale_meal(catalog, catalog.get_recipe("chicken-quinoa"), 800, "lunch", rng=rng)
        assert regenerate_meal(catalog, empty_profile, "lunch", old, rng=rng) is None

    @pytest.mark.parametrize("seed", range(25))
    def test_new_recipe_differs(self, catalog, dairy_free_profile, seed):
        """With two eligible lunches the replacement is always the other one."""
        rng = random.Random(seed)
        old = scale_meal(catalog, catalog.get_recipe("chicken-quinoa"), 800, "lunch", rng=rng)
        new = regenerate_meal(catalog, dairy_free_profile, "lunch", old, rng=rng)
        assert new.id == "veggie-stir-fry"
        assert 784 <= new.total_calories <= 816

    def test_only_recipe_is_reused(self, catalog, rng):
        """When the old recipe is the only option it comes back."""
        profile = Profile(target_calories=2000, disliked_foods=["dairy"])
        old = scale_meal(catalog, catalog.get_recipe("egg-scramble"), 600, "breakfast", rng=rng)
        new = regenerate_meal(catalog, profile, "breakfast", old, rng=rng)
        assert new.id == "egg-scramble"

    def test_regenerate_plan_slot(self, catalog, profile, rng):
        """Only the chosen slot changes and totals are recomputed."""
        plan = generate_day_plan(catalog, profile, rng=rng)
        updated = regenerate_plan_slot(catalog, profile, plan, 1, rng=rng)

        assert updated.plan[0] == plan.plan[0]
        assert updated.plan[2] == plan.plan[2]
        assert updated.plan[1].id != plan.plan[1].id
        assert updated.plan[1].meal_type == "lunch"
        assert updated.is_consistent()

    def test_regenerate_plan_slot_out_of_range(self, catalog, profile, rng):
        """Bad indexes raise IndexError."""
        plan = generate_day_plan(catalog, profile, rng=rng)
        with pytest.raises(IndexError):
            regenerate_plan_slot(catalog, profile, plan, 3, rng=rng)

    def test_apply_alternative(self, catalog, profile, rng):
        """Swapping in a meal keeps totals consistent."""
        plan = generate_day_plan(catalog, profile, rng=rng)
        replacement = scale_meal(catalog, catalog.get_recipe("creamy-chicken"), 600, "dinner", rng=rng)
        updated = apply_alternative(plan, 2, replacement)

        assert updated.plan[2] is replacement
        assert updated.totals.calories == sum(m.total_calories for m in updated.plan)


class TestMultiDay:
    """Tests for the multi-day helpers."""

    def test_missing_plan_dates(self):
        """Only dates without a stored plan are listed."""
        missing = missing_plan_dates(["2025-03-02", "2025-03-04"], date(2025, 3, 1), days=5)
        assert missing == ["2025-03-01", "2025-03-03", "2025-03-05"]

    def test_missing_plan_dates_week_default(self):
        """The default window is a week."""
        assert len(missing_plan_dates([], date(2025, 12, 29))) == 7

    def test_generate_plans_for_dates(self, catalog, profile, rng):
        """Each requested date gets its own plan."""
        plans = generate_plans_for_dates(catalog, profile, ["2025-03-01", "2025-03-02"], rng=rng)
        assert list(plans) == ["2025-03-01", "2025-03-02"]
        assert all(p.is_consistent() for p in plans.values())

    def test_generate_plans_missing_profile(self, catalog, empty_profile, rng):
        """Missing calorie targets give an empty mapping."""
        assert generate_plans_for_dates(catalog, empty_profile, ["2025-03-01"], rng=rng) == {}
