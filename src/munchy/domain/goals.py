"""Domain models for calorie and macro goals."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Sex(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Activity levels mapped to TDEE multipliers."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


class WeightGoal(str, Enum):
    """Direction of the desired weight change."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class UserGoals:
    """Daily goals for a user, with the biometrics they were derived from."""

    user_id: UUID
    calorie_goal: int
    protein_goal: int
    carb_goal: int
    fat_goal: int
    weight_kg: float | None = None
    height_cm: float | None = None
    age: int | None = None
    sex: Sex | None = None
    activity_level: ActivityLevel | None = None
    weight_goal: WeightGoal | None = None
    id: UUID | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class GoalsInput:
    """Values saved from the goal settings screen."""

    calorie_goal: int
    protein_goal: int
    carb_goal: int
    fat_goal: int
    weight_kg: float | None = None
    height_cm: float | None = None
    age: int | None = None
    sex: Sex | None = None
    activity_level: ActivityLevel | None = None
    weight_goal: WeightGoal | None = None


@dataclass(frozen=True)
class BiometricInputs:
    """Calculator inputs; any missing field suppresses the calculation."""

    weight_kg: float | None
    height_cm: float | None
    age: int | None
    sex: Sex | None
    activity_level: ActivityLevel | None
    weight_goal: WeightGoal | None


@dataclass(frozen=True)
class MacroBreakdown:
    """Daily macro targets in grams."""

    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class CalculatedGoals:
    """Calculator output."""

    bmr: float
    tdee: float
    calorie_goal: int
    macros: MacroBreakdown
