"""
Recipe and ingredient catalog.

The catalog is an explicitly constructed, read-only value that is passed
into every planning function. Several catalogs (per test, per locale) can
coexist; nothing here is a module-level singleton except the cached
bundled default.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from nutriplan.data.models import Ingredient, Recipe
from nutriplan.errors import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog.json"


class Catalog:
    """Immutable registry of ingredients and recipes.

    Args:
        ingredients: Ingredient objects (keyed by their id)
        recipes: Recipe objects; iteration order is preserved

    Raises:
        CatalogError: If a recipe references an unknown ingredient id
            or two recipes share an id
    """

    def __init__(self, ingredients: Iterable[Ingredient], recipes: Iterable[Recipe]):
        ingredient_map: Dict[str, Ingredient] = {}
        for ing in ingredients:
            ingredient_map[ing.id] = ing
        self._ingredients = MappingProxyType(ingredient_map)

        recipe_list: List[Recipe] = []
        seen_ids = set()
        for recipe in recipes:
            if recipe.id in seen_ids:
                raise CatalogError(f"Duplicate recipe id '{recipe.id}'")
            seen_ids.add(recipe.id)
            for ing in recipe.ingredients:
                if ing.ingredient_id not in ingredient_map:
                    raise CatalogError(
                        f"Recipe '{recipe.id}' references unknown ingredient '{ing.ingredient_id}'"
                    )
            recipe_list.append(recipe)
        self._recipes: Tuple[Recipe, ...] = tuple(recipe_list)
        self._recipes_by_id = MappingProxyType({r.id: r for r in self._recipes})

        # Reverse lookup built once; duplicate display names are last-wins
        name_index: Dict[str, Ingredient] = {}
        for ing in ingredient_map.values():
            key = ing.name.lower().strip()
            if key in name_index:
                logger.warning(
                    f"[CATALOG] Duplicate ingredient name '{ing.name}': "
                    f"'{name_index[key].id}' replaced by '{ing.id}'"
                )
            name_index[key] = ing
        self._name_index = MappingProxyType(name_index)

        logger.debug(
            f"[CATALOG] Loaded {len(self._ingredients)} ingredients, {len(self._recipes)} recipes"
        )

    @property
    def ingredients(self) -> Mapping[str, Ingredient]:
        return self._ingredients

    @property
    def recipes(self) -> Tuple[Recipe, ...]:
        return self._recipes

    def get_ingredient(self, ingredient_id: Optional[str]) -> Optional[Ingredient]:
        if ingredient_id is None:
            return None
        return self._ingredients.get(ingredient_id)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes_by_id.get(recipe_id)

    def recipes_for(self, meal_type: str) -> List[Recipe]:
        """All recipes serving a meal type, in catalog order."""
        return [r for r in self._recipes if r.serves(meal_type)]

    def ingredient_name(self, ingredient_id: str) -> str:
        ing = self._ingredients.get(ingredient_id)
        return ing.name if ing else ingredient_id

    def find_ingredient_by_name(self, name: str) -> Optional[Ingredient]:
        """
        Resolve a display name back to a catalog ingredient.

        Tries an exact (case-insensitive) match first, then a containment
        match in either direction (e.g. "Chicken" vs "Chicken Breast").

        Returns:
            Ingredient if found, None otherwise
        """
        if not name:
            return None
        key = name.lower().strip()
        exact = self._name_index.get(key)
        if exact is not None:
            return exact

        for ing_name, ing in self._name_index.items():
            if key in ing_name or ing_name in key:
                return ing
        return None

    def __len__(self) -> int:
        return len(self._recipes)

    def __repr__(self) -> str:
        return f"Catalog({len(self._ingredients)} ingredients, {len(self._recipes)} recipes)"

    def to_dict(self) -> Dict:
        return {
            "ingredients": [ing.to_dict() for ing in self._ingredients.values()],
            "recipes": [r.to_dict() for r in self._recipes],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Catalog":
        """
        Create Catalog from its JSON form.

        Ingredients may be given as a list or as a mapping keyed by id.
        """
        raw_ingredients = data.get("ingredients", [])
        if isinstance(raw_ingredients, dict):
            raw_ingredients = [
                {"id": key, **value} for key, value in raw_ingredients.items()
            ]
        ingredients = [Ingredient.from_dict(i) for i in raw_ingredients]
        recipes = [Recipe.from_dict(r) for r in data.get("recipes", [])]
        return cls(ingredients, recipes)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Catalog":
        """
        Load a catalog JSON file.

        Raises:
            CatalogError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not load catalog from {path}: {e}") from e

        catalog = cls.from_dict(data)
        logger.info(f"[CATALOG] Loaded {catalog!r} from {path}")
        return catalog


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The bundled catalog, loaded once per process."""
    return Catalog.load(DEFAULT_CATALOG_PATH)
