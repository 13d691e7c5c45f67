"""
Data models for the meal planning core.

These models define the core entities used throughout the system:
- Ingredient / Recipe: static catalog entries (immutable)
- Profile: per-user nutrition targets and food likes/dislikes
- Meal / DayPlan: generated plans, mutated only by slot replacement
- PreppedComponentGroup / PrepManifest / PrepStep: batch-prep outputs

Dictionary forms use the persisted wire keys (camelCase where the stored
plans use them) so plans round-trip losslessly through the external layer.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from nutriplan.errors import CatalogError
from nutriplan.tag_canon import normalize_tags

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (0.5 -> 1)."""
    return int(math.floor(value + 0.5))


def as_number(value, field_name: str = "value") -> float:
    """
    Coerce a stored numeric field to a number.

    Stored plans may carry numbers as strings ("80"). Anything that is not a
    finite number becomes 0 with a warning.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            logger.warning(f"[MODELS] Non-numeric {field_name}={value!r}, using 0")
            return 0
    if not math.isfinite(number):
        logger.warning(f"[MODELS] Non-finite {field_name}={value!r}, using 0")
        return 0
    return number


def _as_tag_set(value) -> frozenset:
    """Accept a list/set of tags or a comma-separated string."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return normalize_tags(value)


# =============================================================================
# Catalog entities
# =============================================================================

@dataclass(frozen=True)
class PrepInfo:
    """How an ingredient can be prepared ahead of time."""
    can_prep: bool = False
    method: Optional[str] = None  # e.g. "Boil according to instructions"
    prep_group: Optional[str] = None  # e.g. "Boiled Grains"

    def to_dict(self) -> Dict:
        data = {"canPrep": self.can_prep}
        if self.method is not None:
            data["method"] = self.method
        if self.prep_group is not None:
            data["prepGroup"] = self.prep_group
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "PrepInfo":
        return cls(
            can_prep=bool(data.get("canPrep", data.get("can_prep", False))),
            method=data.get("method"),
            prep_group=data.get("prepGroup", data.get("prep_group")),
        )


@dataclass(frozen=True)
class Ingredient:
    """Catalog ingredient, keyed by id."""
    id: str
    name: str
    unit: str = "g"  # Unit used when prep amounts are reported
    prep_info: Optional[PrepInfo] = None

    @property
    def is_preppable(self) -> bool:
        """True if the ingredient can be batch-prepped into a prep group."""
        return bool(
            self.prep_info is not None
            and self.prep_info.can_prep
            and self.prep_info.prep_group
        )

    def to_dict(self) -> Dict:
        data = {"id": self.id, "name": self.name, "unit": self.unit}
        if self.prep_info is not None:
            data["prepInfo"] = self.prep_info.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Ingredient":
        prep_data = data.get("prepInfo", data.get("prep_info"))
        return cls(
            id=data["id"],
            name=data["name"],
            unit=data.get("unit") or "g",
            prep_info=PrepInfo.from_dict(prep_data) if prep_data else None,
        )


@dataclass(frozen=True)
class RecipeIngredient:
    """A quantity of a catalog ingredient used by a recipe."""
    ingredient_id: str
    amount: float
    unit: str

    def to_dict(self) -> Dict:
        return {"ingredientId": self.ingredient_id, "amount": self.amount, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: Dict) -> "RecipeIngredient":
        return cls(
            ingredient_id=data.get("ingredientId", data.get("ingredient_id")),
            amount=data["amount"],
            unit=data["unit"],
        )


@dataclass(frozen=True)
class Recipe:
    """Macro-scalable recipe template.

    Raises:
        CatalogError: If base calories or any ingredient amount is not positive
    """
    id: str
    name: str
    meal_types: frozenset
    base_calories: float
    tags: frozenset = frozenset()
    ingredients: Tuple[RecipeIngredient, ...] = ()
    instructions: Tuple[str, ...] = ()
    image_url: Optional[str] = None

    def __post_init__(self):
        # Frozen: normalize collections through object.__setattr__
        object.__setattr__(self, "meal_types", frozenset(self.meal_types))
        object.__setattr__(self, "tags", frozenset(t.lower() for t in self.tags))
        object.__setattr__(self, "ingredients", tuple(self.ingredients))
        object.__setattr__(self, "instructions", tuple(self.instructions))

        if not self.base_calories or self.base_calories <= 0:
            raise CatalogError(
                f"Recipe '{self.id}' has non-positive base calories: {self.base_calories}"
            )
        for ing in self.ingredients:
            if ing.amount is None or ing.amount <= 0:
                raise CatalogError(
                    f"Recipe '{self.id}' has non-positive amount for '{ing.ingredient_id}'"
                )

    def serves(self, meal_type: str) -> bool:
        return meal_type in self.meal_types

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return not self.tags.isdisjoint(tags)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "mealTypes": sorted(self.meal_types),
            "baseCalories": self.base_calories,
            "tags": sorted(self.tags),
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": list(self.instructions),
            "imageUrl": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Recipe":
        return cls(
            id=data["id"],
            name=data["name"],
            meal_types=frozenset(data.get("mealTypes", data.get("meal_types", []))),
            base_calories=data.get("baseCalories", data.get("base_calories")),
            tags=frozenset(data.get("tags", [])),
            ingredients=tuple(RecipeIngredient.from_dict(i) for i in data.get("ingredients", [])),
            instructions=tuple(data.get("instructions", [])),
            image_url=data.get("imageUrl", data.get("image_url")),
        )


# =============================================================================
# Profile
# =============================================================================

@dataclass
class Profile:
    """Nutrition targets and food preferences supplied per call.

    Disliked foods are a hard filter; liked foods are a soft bias.
    """
    target_calories: Optional[float] = None
    target_protein: Optional[float] = None
    target_carbs: Optional[float] = None
    target_fats: Optional[float] = None
    liked_foods: frozenset = field(default_factory=frozenset)
    disliked_foods: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        self.liked_foods = _as_tag_set(self.liked_foods)
        self.disliked_foods = _as_tag_set(self.disliked_foods)

    @property
    def can_plan(self) -> bool:
        """False when calorie targets are missing (profile not set up yet)."""
        return bool(self.target_calories)

    @property
    def has_macro_targets(self) -> bool:
        return bool(self.target_protein and self.target_carbs and self.target_fats)

    def to_dict(self) -> Dict:
        return {
            "targetCalories": self.target_calories,
            "targetProtein": self.target_protein,
            "targetCarbs": self.target_carbs,
            "targetFats": self.target_fats,
            "liked_foods": sorted(self.liked_foods),
            "disliked_foods": sorted(self.disliked_foods),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Profile":
        """Create Profile from a stored profile row (camelCase or snake_case)."""
        def pick(camel: str, snake: str):
            return data.get(camel, data.get(snake))

        return cls(
            target_calories=pick("targetCalories", "target_calories"),
            target_protein=pick("targetProtein", "target_protein"),
            target_carbs=pick("targetCarbs", "target_carbs"),
            target_fats=pick("targetFats", "target_fats"),
            liked_foods=pick("likedFoods", "liked_foods"),
            disliked_foods=pick("dislikedFoods", "disliked_foods"),
        )


# =============================================================================
# Meals and plans
# =============================================================================

@dataclass
class MealIngredient:
    """Scaled ingredient line on a meal."""
    name: str
    amount: float
    unit: str
    ingredient_id: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "ingredientId": self.ingredient_id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "MealIngredient":
        return cls(
            name=data.get("name", ""),
            amount=as_number(data.get("amount"), "amount"),
            unit=data.get("unit", ""),
            ingredient_id=data.get("ingredientId", data.get("ingredient_id")),
        )


@dataclass
class CategorizedIngredients:
    """Prep-mode split of a meal's ingredients."""
    prepped: List[MealIngredient] = field(default_factory=list)
    fresh: List[MealIngredient] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "prepped": [i.to_dict() for i in self.prepped],
            "fresh": [i.to_dict() for i in self.fresh],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "CategorizedIngredients":
        return cls(
            prepped=[MealIngredient.from_dict(i) for i in data.get("prepped", [])],
            fresh=[MealIngredient.from_dict(i) for i in data.get("fresh", [])],
        )


@dataclass
class Meal:
    """A recipe scaled to a calorie target for one meal slot.

    Concrete meals are either StandardMeal or PrepModeMeal; use
    Meal.from_dict to restore the right variant from stored data.
    """
    id: Optional[str]  # Recipe id, None for the placeholder meal
    name: str
    meal_type: str
    instructions: List[str] = field(default_factory=list)
    ingredients: List[MealIngredient] = field(default_factory=list)
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fats: float = 0
    image_url: Optional[str] = None
    is_placeholder: bool = False

    is_prep_mode: ClassVar[bool] = False

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.meal_type,
            "imageUrl": self.image_url,
            "instructions": list(self.instructions),
            "ingredients": [i.to_dict() for i in self.ingredients],
            "isPrepMode": self.is_prep_mode,
            "isPlaceholder": self.is_placeholder,
            "total_calories": self.total_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fats": self.total_fats,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Meal":
        """Restore a StandardMeal or PrepModeMeal from its dictionary form."""
        fields = dict(
            id=data.get("id"),
            name=data.get("name", ""),
            meal_type=data.get("type", data.get("meal_type", "")),
            instructions=list(data.get("instructions", [])),
            ingredients=[MealIngredient.from_dict(i) for i in data.get("ingredients", [])],
            total_calories=as_number(data.get("total_calories"), "total_calories"),
            total_protein=as_number(data.get("total_protein"), "total_protein"),
            total_carbs=as_number(data.get("total_carbs"), "total_carbs"),
            total_fats=as_number(data.get("total_fats"), "total_fats"),
            image_url=data.get("imageUrl", data.get("image_url")),
            is_placeholder=bool(data.get("isPlaceholder", False)),
        )
        if data.get("isPrepMode"):
            return PrepModeMeal(
                categorized_ingredients=CategorizedIngredients.from_dict(
                    data.get("categorizedIngredients") or {}
                ),
                **fields,
            )
        return StandardMeal(**fields)

    def __str__(self) -> str:
        return f"{self.meal_type.title()}: {self.name} ({self.total_calories} kcal)"


@dataclass
class StandardMeal(Meal):
    """Meal cooked from scratch with the recipe's own instructions."""
    pass


@dataclass
class PrepModeMeal(Meal):
    """Meal assembled partly from batch-prepped components."""
    categorized_ingredients: CategorizedIngredients = field(default_factory=CategorizedIngredients)

    is_prep_mode: ClassVar[bool] = True

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data["categorizedIngredients"] = self.categorized_ingredients.to_dict()
        return data


@dataclass
class Totals:
    """Summed nutrition of a day plan."""
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fats: int = 0

    @classmethod
    def from_meals(cls, meals: Iterable[Meal]) -> "Totals":
        """Sum all meals (full recomputation, never incremental)."""
        meals = list(meals)
        return cls(
            calories=round_half_up(sum(m.total_calories for m in meals)),
            protein=round_half_up(sum(m.total_protein for m in meals)),
            carbs=round_half_up(sum(m.total_carbs for m in meals)),
            fats=round_half_up(sum(m.total_fats for m in meals)),
        )

    def to_dict(self) -> Dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Totals":
        return cls(
            calories=round_half_up(as_number(data.get("calories"), "calories")),
            protein=round_half_up(as_number(data.get("protein"), "protein")),
            carbs=round_half_up(as_number(data.get("carbs"), "carbs")),
            fats=round_half_up(as_number(data.get("fats"), "fats")),
        )


@dataclass
class DayPlan:
    """One day of meals (breakfast, lunch, dinner) with consistent totals."""
    plan: List[Meal]
    totals: Totals = field(default_factory=Totals)

    @classmethod
    def from_meals(cls, meals: Iterable[Meal]) -> "DayPlan":
        meals = list(meals)
        return cls(plan=meals, totals=Totals.from_meals(meals))

    def is_consistent(self) -> bool:
        """True if totals equal the sum over all meals."""
        return self.totals == Totals.from_meals(self.plan)

    def meal_index(self, meal_type: str) -> Optional[int]:
        for i, meal in enumerate(self.plan):
            if meal.meal_type == meal_type:
                return i
        return None

    def replace_meal(self, index: int, meal: Meal) -> "DayPlan":
        """
        Return a new plan with one slot replaced and totals recomputed.

        Raises:
            IndexError: If index is not a slot of this plan
        """
        if index < 0 or index >= len(self.plan):
            raise IndexError(f"Meal index {index} out of range (0-{len(self.plan) - 1})")
        meals = list(self.plan)
        meals[index] = meal
        return DayPlan.from_meals(meals)

    def to_dict(self) -> Dict:
        return {
            "plan": [meal.to_dict() for meal in self.plan],
            "totals": self.totals.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "DayPlan":
        meals = [Meal.from_dict(m) for m in data.get("plan", [])]
        if "totals" in data and data["totals"]:
            return cls(plan=meals, totals=Totals.from_dict(data["totals"]))
        return cls.from_meals(meals)


@dataclass
class DatedPlan:
    """A stored day plan keyed by calendar date (YYYY-MM-DD)."""
    plan_date: str
    plan: DayPlan

    def to_dict(self) -> Dict:
        return {"plan_date": self.plan_date, "plan_data": self.plan.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict) -> "DatedPlan":
        return cls(
            plan_date=data.get("plan_date", ""),
            plan=DayPlan.from_dict(data.get("plan_data") or {}),
        )


# =============================================================================
# Meal prep
# =============================================================================

@dataclass
class PreppedItem:
    """Aggregated amount of one ingredient to prep ahead."""
    id: str  # Ingredient id
    name: str
    total_amount: float
    unit: str
    method: str

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "totalAmount": self.total_amount,
            "unit": self.unit,
            "method": self.method,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PreppedItem":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            total_amount=as_number(data.get("totalAmount", data.get("total_amount")), "totalAmount"),
            unit=data.get("unit") or "",
            method=data.get("method") or "",
        )


@dataclass
class PreppedComponentGroup:
    """Prepped items sharing a prep group (e.g. "Cooked Proteins")."""
    group_name: str
    items: List[PreppedItem] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {"groupName": self.group_name, "items": [i.to_dict() for i in self.items]}

    @classmethod
    def from_dict(cls, data: Dict) -> "PreppedComponentGroup":
        return cls(
            group_name=data.get("groupName", data.get("group_name", "")),
            items=[PreppedItem.from_dict(i) for i in data.get("items", [])],
        )


@dataclass
class PrepManifest:
    """Ordered prep groups aggregated over several days of plans.

    Iterates over its groups, so it can be passed anywhere a list of
    PreppedComponentGroup is accepted.
    """
    groups: List[PreppedComponentGroup] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)  # Ingredient names not in catalog

    def __iter__(self) -> Iterator[PreppedComponentGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def item_groups(self) -> Dict[str, str]:
        """Map ingredient id -> prep group name."""
        return {item.id: group.group_name for group in self.groups for item in group.items}

    def amounts(self) -> Dict[Tuple[str, str], float]:
        """Map (prep group, ingredient id) -> total amount."""
        return {
            (group.group_name, item.id): item.total_amount
            for group in self.groups
            for item in group.items
        }

    def to_dict(self) -> Dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "unresolved": list(self.unresolved),
        }

    @classmethod
    def from_dict(cls, data: Union[Dict, List]) -> "PrepManifest":
        if isinstance(data, list):
            return cls(groups=[PreppedComponentGroup.from_dict(g) for g in data])
        return cls(
            groups=[PreppedComponentGroup.from_dict(g) for g in data.get("groups", [])],
            unresolved=list(data.get("unresolved", [])),
        )

    @classmethod
    def coerce(cls, value) -> "PrepManifest":
        """Accept None, a manifest, or a list of groups (objects or dicts)."""
        if value is None:
            return cls()
        if isinstance(value, PrepManifest):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        groups = [
            g if isinstance(g, PreppedComponentGroup) else PreppedComponentGroup.from_dict(g)
            for g in value
        ]
        return cls(groups=groups)


@dataclass
class PrepStep:
    """One human-actionable step of a prep session."""
    id: str  # Stable, used for de-duplication and active-step tracking
    text: str
    ingredient_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {"id": self.id, "text": self.text, "ingredientIds": list(self.ingredient_ids)}

    @classmethod
    def from_dict(cls, data: Dict) -> "PrepStep":
        return cls(
            id=data["id"],
            text=data["text"],
            ingredient_ids=list(data.get("ingredientIds", data.get("ingredient_ids", []))),
        )
