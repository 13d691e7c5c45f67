"""
Daily nutrition target calculator.

Estimates BMR with the Mifflin-St Jeor equation, scales it by activity
level, then adjusts for the weekly weight-change goal. Incomplete body
metrics give all-zero targets so the caller can show a "set up your
profile" state instead of failing.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Union

from nutriplan.data.models import Profile, round_half_up

logger = logging.getLogger(__name__)

ACTIVITY_MULTIPLIERS: Dict[str, float] = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "active": 1.55,
    "very_active": 1.725,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

KCAL_PER_KG = 7700
PROTEIN_G_PER_KG = 1.8
FAT_CALORIE_SHARE = 0.25


@dataclass
class UserMetrics:
    """Body metrics and goal as entered during onboarding."""
    sex: Optional[str] = None
    weight: Optional[float] = None  # kg
    height: Optional[float] = None  # cm
    dob: Optional[str] = None  # YYYY-MM-DD
    activity: Optional[str] = None
    goal: Optional[str] = None  # e.g. "lose_weight", "get_leaner", "gain_muscle"
    weekly_target: Optional[float] = None  # kg per week

    def is_complete(self) -> bool:
        return bool(
            self.sex and self.weight and self.height and self.dob
            and self.activity and self.goal
            and self.weekly_target is not None
        )

    @classmethod
    def from_dict(cls, data: Dict) -> "UserMetrics":
        return cls(
            sex=data.get("sex"),
            weight=data.get("weight"),
            height=data.get("height"),
            dob=data.get("dob"),
            activity=data.get("activity"),
            goal=data.get("goal"),
            weekly_target=data.get("weeklyTarget", data.get("weekly_target")),
        )


@dataclass
class NutritionTargets:
    tdee: int = 0
    target_calories: int = 0
    target_protein: int = 0
    target_carbs: int = 0
    target_fats: int = 0

    def apply_to(self, profile: Optional[Profile] = None) -> Profile:
        """Planning profile with these targets (keeps the food preferences)."""
        return Profile(
            target_calories=self.target_calories,
            target_protein=self.target_protein,
            target_carbs=self.target_carbs,
            target_fats=self.target_fats,
            liked_foods=profile.liked_foods if profile else frozenset(),
            disliked_foods=profile.disliked_foods if profile else frozenset(),
        )

    def to_dict(self) -> Dict:
        return {
            "tdee": self.tdee,
            "targetCalories": self.target_calories,
            "targetProtein": self.target_protein,
            "targetCarbs": self.target_carbs,
            "targetFats": self.target_fats,
        }


def age_from_dob(dob: Union[str, date], today: Optional[date] = None) -> int:
    """Age as a plain calendar-year difference."""
    today = today or date.today()
    born = dob if isinstance(dob, date) else date.fromisoformat(str(dob)[:10])
    return today.year - born.year


def calculate_targets(metrics, today: Optional[date] = None) -> NutritionTargets:
    """
    Calculate daily calorie and macro targets.

    Args:
        metrics: UserMetrics or an equivalent dict (camelCase accepted)
        today: Reference date for the age calculation (defaults to today)

    Returns:
        NutritionTargets; all zero when required metrics are missing
    """
    if isinstance(metrics, dict):
        metrics = UserMetrics.from_dict(metrics)
    if metrics is None or not metrics.is_complete():
        logger.error(f"[TARGETS] Missing required user data: {metrics}")
        return NutritionTargets()

    age = age_from_dob(metrics.dob, today)
    bmr = 10 * metrics.weight + 6.25 * metrics.height - 5 * age
    bmr += 5 if metrics.sex == "male" else -161

    multiplier = ACTIVITY_MULTIPLIERS.get(metrics.activity, DEFAULT_ACTIVITY_MULTIPLIER)
    tdee = bmr * multiplier

    daily_change = metrics.weekly_target * KCAL_PER_KG / 7
    goal = metrics.goal.lower()
    if "lose" in goal or "leaner" in goal:
        calories = tdee - daily_change
    elif "gain" in goal:
        calories = tdee + daily_change
    else:
        calories = tdee

    protein = metrics.weight * PROTEIN_G_PER_KG
    fat_calories = calories * FAT_CALORIE_SHARE
    carb_calories = calories - protein * 4 - fat_calories

    targets = NutritionTargets(
        tdee=round_half_up(tdee),
        target_calories=round_half_up(calories),
        target_protein=round_half_up(protein),
        target_carbs=round_half_up(carb_calories / 4),
        target_fats=round_half_up(fat_calories / 9),
    )
    logger.info(
        f"[TARGETS] age={age} tdee={targets.tdee} -> {targets.target_calories} kcal "
        f"(P{targets.target_protein}/C{targets.target_carbs}/F{targets.target_fats})"
    )
    return targets
