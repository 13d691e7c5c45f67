"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import random

import pytest

from nutriplan.config import Settings
from nutriplan.data.catalog import Catalog
from nutriplan.data.models import (
    Ingredient,
    PrepInfo,
    PreppedComponentGroup,
    PreppedItem,
    Profile,
    Recipe,
    RecipeIngredient,
)


def make_recipe(recipe_id, meal_types, base_calories, tags, ingredients, instructions=None):
    """Build a Recipe from (ingredient_id, amount, unit) tuples."""
    return Recipe(
        id=recipe_id,
        name=recipe_id.replace("-", " ").title(),
        meal_types=frozenset(meal_types),
        base_calories=base_calories,
        tags=frozenset(tags),
        ingredients=tuple(RecipeIngredient(i, a, u) for i, a, u in ingredients),
        instructions=tuple(instructions or [f"Cook the {recipe_id}."]),
    )


SMALL_INGREDIENTS = [
    Ingredient("chicken_breast", "Chicken Breast", "g",
               PrepInfo(True, "Grill or bake", "Cooked Proteins")),
    Ingredient("quinoa", "Quinoa", "g",
               PrepInfo(True, "Boil according to instructions", "Boiled Grains")),
    Ingredient("onion", "Onion", "g", PrepInfo(True, "Dice", "Chopped Aromatics")),
    Ingredient("garlic", "Garlic", "cloves", PrepInfo(True, "Mince", "Chopped Aromatics")),
    Ingredient("bell_pepper", "Bell Pepper", "pcs", PrepInfo(True, "Slice", "Chopped Veggies")),
    Ingredient("eggs", "Eggs", "pcs", PrepInfo(True, "Hard boil", "Boiled Eggs")),
    Ingredient("oats", "Rolled Oats", "g", PrepInfo(False)),
    Ingredient("greek_yogurt", "Greek Yogurt", "g", PrepInfo(False)),
    Ingredient("spinach", "Spinach", "g"),
    Ingredient("salt", "Salt", "g"),
]

SMALL_RECIPES = [
    make_recipe("oats-bowl", ["breakfast"], 400, ["dairy", "oats", "greek_yogurt"],
                [("oats", 60, "g"), ("greek_yogurt", 150, "g")]),
    make_recipe("egg-scramble", ["breakfast"], 300, ["eggs", "vegetarian"],
                [("eggs", 3, "pcs"), ("spinach", 50, "g"), ("salt", 0.2, "g")]),
    make_recipe("chicken-quinoa", ["lunch", "dinner"], 500, ["poultry", "chicken_breast"],
                [("chicken_breast", 150, "g"), ("quinoa", 80, "g"), ("onion", 40, "g"),
                 ("garlic", 2, "cloves"), ("bell_pepper", 1, "pcs")]),
    make_recipe("veggie-stir-fry", ["lunch", "dinner"], 450, ["vegan", "vegetarian"],
                [("quinoa", 70, "g"), ("bell_pepper", 2, "pcs"), ("onion", 50, "g"),
                 ("spinach", 80, "g")]),
    make_recipe("creamy-chicken", ["lunch", "dinner"], 550, ["dairy", "poultry"],
                [("chicken_breast", 140, "g"), ("greek_yogurt", 100, "g"),
                 ("garlic", 1, "cloves")]),
]


@pytest.fixture
def catalog():
    """Small in-memory catalog: 2 breakfasts, 3 lunch/dinner recipes."""
    return Catalog(SMALL_INGREDIENTS, SMALL_RECIPES)


@pytest.fixture
def rng():
    """Seeded random source so outcomes are reproducible."""
    return random.Random(42)


@pytest.fixture
def profile():
    """2000 kcal profile with full macro targets and no preferences."""
    return Profile(
        target_calories=2000,
        target_protein=150,
        target_carbs=200,
        target_fats=67,
    )


@pytest.fixture
def dairy_free_profile():
    """Calorie-only profile that dislikes dairy."""
    return Profile(target_calories=2000, disliked_foods=["dairy"])


@pytest.fixture
def empty_profile():
    """Profile that has not been set up yet (no calorie target)."""
    return Profile()


@pytest.fixture
def chicken_prep():
    """Prep groups with cooked chicken and chopped onion."""
    return [
        PreppedComponentGroup("Cooked Proteins", [
            PreppedItem("chicken_breast", "Chicken Breast", 450, "g", "Grill or bake"),
        ]),
        PreppedComponentGroup("Chopped Aromatics", [
            PreppedItem("onion", "Onion", 120, "g", "Dice"),
        ]),
    ]


@pytest.fixture
def app(catalog):
    """Flask app wired to the small catalog with a fixed seed."""
    from nutriplan.web.app import create_app

    app = create_app(catalog=catalog, settings=Settings(seed=7))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
