"""
Unit tests for nutriplan.planning.selector.

Tests cover:
- Each relaxation stage in isolation
- The full relaxation chain through select_recipe
- The liked-tag bias
- Reproducibility with an injected random source
"""

import random

import pytest

from nutriplan.planning.selector import (
    LIKED_BIAS,
    RELAXATION_STAGES,
    candidate_pool,
    select_recipe,
)


def _stage(name):
    return next(s for s in RELAXATION_STAGES if s.name == name)


class TestRelaxationStages:
    """Tests for candidate_pool per stage."""

    def test_stage_order(self):
        """Stages drop filters in the documented order."""
        assert [s.name for s in RELAXATION_STAGES] == [
            "strict", "allow_repeats", "ignore_dislikes", "meal_type_only",
        ]

    def test_strict_applies_both_filters(self, catalog):
        """Strict stage removes disliked and excluded recipes."""
        pool = candidate_pool(catalog, "lunch", _stage("strict"), {"dairy"}, {"chicken-quinoa"})
        assert [r.id for r in pool] == ["veggie-stir-fry"]

    def test_allow_repeats_keeps_dietary_filter(self, catalog):
        """Second stage ignores exclusions but still removes dislikes."""
        pool = candidate_pool(
            catalog, "lunch", _stage("allow_repeats"), {"dairy"},
            {"chicken-quinoa", "veggie-stir-fry"},
        )
        assert [r.id for r in pool] == ["chicken-quinoa", "veggie-stir-fry"]

    def test_ignore_dislikes_keeps_exclusions(self, catalog):
        """Third stage ignores dislikes but still removes excluded ids."""
        pool = candidate_pool(
            catalog, "breakfast", _stage("ignore_dislikes"), {"dairy", "eggs"}, {"oats-bowl"},
        )
        assert [r.id for r in pool] == ["egg-scramble"]

    def test_meal_type_only(self, catalog):
        """Last stage only filters by meal type."""
        pool = candidate_pool(
            catalog, "breakfast", _stage("meal_type_only"), {"dairy", "eggs"},
            {"oats-bowl", "egg-scramble"},
        )
        assert len(pool) == 2


class TestSelectRecipe:
    """Tests for select_recipe."""

    @pytest.mark.parametrize("seed", range(20))
    def test_strict_pool_respected(self, catalog, seed):
        """With a non-empty strict pool, dislikes and exclusions always hold."""
        recipe = select_recipe(
            catalog, "lunch", disliked_tags=["dairy"], exclude_ids=["chicken-quinoa"],
            rng=random.Random(seed),
        )
        assert recipe.id == "veggie-stir-fry"

    def test_repeats_allowed_before_dislikes(self, catalog, rng):
        """An excluded recipe is reused before a disliked one is chosen."""
        recipe = select_recipe(
            catalog, "breakfast", disliked_tags=["dairy"], exclude_ids=["egg-scramble"], rng=rng,
        )
        assert recipe.id == "egg-scramble"

    def test_dislikes_relaxed_when_nothing_fits(self, catalog, rng):
        """When every breakfast is disliked, exclusions still apply."""
        recipe = select_recipe(
            catalog, "breakfast", disliked_tags=["dairy", "eggs"], exclude_ids=["oats-bowl"],
            rng=rng,
        )
        assert recipe.id == "egg-scramble"

    def test_last_resort_never_returns_none(self, catalog, rng, caplog):
        """Any recipe for the meal type is returned as a last resort."""
        recipe = select_recipe(
            catalog, "breakfast", disliked_tags=["dairy", "eggs"],
            exclude_ids=["oats-bowl", "egg-scramble"], rng=rng,
        )
        assert recipe is not None
        assert recipe.serves("breakfast")
        assert "falling back" in caplog.text

    def test_unknown_meal_type_returns_none(self, catalog, rng):
        """None only when the catalog has no recipe for the slot."""
        assert select_recipe(catalog, "brunch", rng=rng) is None

    def test_liked_bias(self, catalog):
        """Liked recipes are picked about 70% of the time plus their fair share."""
        rng = random.Random(1234)
        trials = 1000
        hits = sum(
            select_recipe(catalog, "lunch", liked_tags=["vegan"], rng=rng).id == "veggie-stir-fry"
            for _ in range(trials)
        )
        expected = LIKED_BIAS + (1 - LIKED_BIAS) / 3
        assert abs(hits / trials - expected) < 0.08

    def test_no_liked_match_is_uniform(self, catalog):
        """Without liked matches every candidate can be picked."""
        rng = random.Random(99)
        picked = {
            select_recipe(catalog, "lunch", liked_tags=["seafood"], rng=rng).id
            for _ in range(200)
        }
        assert picked == {"chicken-quinoa", "veggie-stir-fry", "creamy-chicken"}

    def test_same_seed_same_choice(self, catalog):
        """Injected random sources make selection reproducible."""
        first = [select_recipe(catalog, "dinner", rng=random.Random(5)).id for _ in range(5)]
        second = [select_recipe(catalog, "dinner", rng=random.Random(5)).id for _ in range(5)]
        assert first == second
