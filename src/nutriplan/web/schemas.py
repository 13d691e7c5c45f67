"""
Request bodies for the JSON API.

Models validate the envelope (required keys, index ranges, basic types);
the nested plan and meal payloads are converted to domain objects with
their own from_dict methods.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nutriplan.data.models import DatedPlan, DayPlan, Meal, PrepManifest, Profile
from nutriplan.tag_canon import MEAL_TYPES


# =============================================================================
# Shared pieces
# =============================================================================

class ProfileIn(BaseModel):
    """Profile as sent by the client (camelCase or snake_case)."""
    model_config = ConfigDict(populate_by_name=True)

    target_calories: Optional[float] = Field(default=None, alias="targetCalories")
    target_protein: Optional[float] = Field(default=None, alias="targetProtein")
    target_carbs: Optional[float] = Field(default=None, alias="targetCarbs")
    target_fats: Optional[float] = Field(default=None, alias="targetFats")
    liked_foods: List[str] = Field(default_factory=list)
    disliked_foods: List[str] = Field(default_factory=list)

    @field_validator("liked_foods", "disliked_foods", mode="before")
    @classmethod
    def split_comma_string(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [v for v in value.split(",") if v.strip()]
        return value

    def to_profile(self) -> Profile:
        return Profile(
            target_calories=self.target_calories,
            target_protein=self.target_protein,
            target_carbs=self.target_carbs,
            target_fats=self.target_fats,
            liked_foods=self.liked_foods,
            disliked_foods=self.disliked_foods,
        )


class _PlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prepped_components: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="preppedComponents"
    )

    def manifest(self) -> Optional[PrepManifest]:
        if not self.prepped_components:
            return None
        return PrepManifest.from_dict(self.prepped_components)


# =============================================================================
# Endpoint bodies
# =============================================================================

class TargetsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sex: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    dob: Optional[str] = None
    activity: Optional[str] = None
    goal: Optional[str] = None
    weekly_target: Optional[float] = Field(default=None, alias="weeklyTarget")


class PlanRequest(_PlanRequest):
    profile: ProfileIn


class RegenerateMealRequest(_PlanRequest):
    profile: ProfileIn
    plan: Dict[str, Any]
    meal_index: int = Field(alias="mealIndex", ge=0)

    @model_validator(mode='after')
    def validate_index(self):
        meals = self.plan.get("plan") or []
        if self.meal_index >= len(meals):
            raise ValueError(
                f"mealIndex {self.meal_index} out of range for a plan with {len(meals)} meals"
            )
        return self

    def day_plan(self) -> DayPlan:
        return DayPlan.from_dict(self.plan)


class AlternativesRequest(_PlanRequest):
    profile: Optional[ProfileIn] = None
    meal: Dict[str, Any]
    meal_type: Optional[str] = Field(default=None, alias="mealType")

    @model_validator(mode='after')
    def default_meal_type(self):
        if not self.meal_type:
            self.meal_type = self.meal.get("type")
        if not self.meal_type:
            raise ValueError(f"mealType is required (one of {', '.join(MEAL_TYPES)})")
        return self

    def current_meal(self) -> Meal:
        return Meal.from_dict(self.meal)


class ApplyAlternativeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan: Dict[str, Any]
    meal_index: int = Field(alias="mealIndex", ge=0)
    meal: Dict[str, Any]

    @model_validator(mode='after')
    def validate_index(self):
        meals = self.plan.get("plan") or []
        if self.meal_index >= len(meals):
            raise ValueError(
                f"mealIndex {self.meal_index} out of range for a plan with {len(meals)} meals"
            )
        return self


class PrepRequest(BaseModel):
    """Stored plans, each {plan_date, plan_data}."""
    plans: List[Dict[str, Any]] = Field(default_factory=list)

    def dated_plans(self) -> List[DatedPlan]:
        return [DatedPlan.from_dict(p) for p in self.plans]
