"""Goal calculator and the user goals service."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from munchy.domain.errors import StoreError
from munchy.domain.goals import (
    ActivityLevel,
    BiometricInputs,
    CalculatedGoals,
    GoalsInput,
    MacroBreakdown,
    Sex,
    UserGoals,
    WeightGoal,
)
from munchy.domain.results import UNEXPECTED_ERROR, ActionResult

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

DEFAULT_CALORIE_GOAL = 2000
DEFAULT_PROTEIN_GOAL = 150
DEFAULT_CARB_GOAL = 250
DEFAULT_FAT_GOAL = 65

LOSE_DEFICIT = 500
GAIN_SURPLUS = 400

KG_PER_LB = 0.45359237
CM_PER_INCH = 2.54

_logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Basal metabolic rate using the Mifflin-St Jeor equation."""
    sex_offset = 5 if sex == Sex.MALE else -161
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + sex_offset


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Total daily energy expenditure for an activity level."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_calorie_goal(tdee: float, weight_goal: WeightGoal) -> int:
    """Daily calorie target for a weight goal."""
    if weight_goal == WeightGoal.LOSE:
        return round_half_up(tdee) - LOSE_DEFICIT
    if weight_goal == WeightGoal.GAIN:
        return round_half_up(tdee) + GAIN_SURPLUS
    return round_half_up(tdee)


def calculate_macros(calorie_goal: float) -> MacroBreakdown:
    """Split calories 30/40/30 into protein, carb and fat grams.

    Each macro is rounded on its own, so the grams may not add back up to
    the calorie goal exactly.
    """
    return MacroBreakdown(
        protein=round_half_up(calorie_goal * 0.3 / 4),
        carbs=round_half_up(calorie_goal * 0.4 / 4),
        fat=round_half_up(calorie_goal * 0.3 / 9),
    )


def calculate_goals(inputs: BiometricInputs) -> CalculatedGoals | None:
    """Run the full calculator, or return None when any input is missing."""
    if (
        inputs.weight_kg is None
        or inputs.height_cm is None
        or inputs.age is None
        or inputs.sex is None
        or inputs.activity_level is None
        or inputs.weight_goal is None
    ):
        return None
    bmr = calculate_bmr(inputs.weight_kg, inputs.height_cm, inputs.age, inputs.sex)
    tdee = calculate_tdee(bmr, inputs.activity_level)
    calorie_goal = calculate_calorie_goal(tdee, inputs.weight_goal)
    return CalculatedGoals(
        bmr=bmr,
        tdee=tdee,
        calorie_goal=calorie_goal,
        macros=calculate_macros(calorie_goal),
    )


def pounds_to_kg(pounds: float) -> float:
    """Convert pounds to kilograms."""
    return pounds * KG_PER_LB


def feet_inches_to_cm(feet: float, inches: float) -> float:
    """Convert a feet/inches height to centimeters."""
    return (feet * 12 + inches) * CM_PER_INCH


def default_goals(user_id: UUID) -> UserGoals:
    """Goals used until the user saves their own."""
    return UserGoals(
        user_id=user_id,
        calorie_goal=DEFAULT_CALORIE_GOAL,
        protein_goal=DEFAULT_PROTEIN_GOAL,
        carb_goal=DEFAULT_CARB_GOAL,
        fat_goal=DEFAULT_FAT_GOAL,
    )


class GoalsRepository(Protocol):
    """Persistence interface for user goals."""

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return the stored goals for a user, if any."""

    def create_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        """Insert a goals row and return it."""

    def update_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        """Update the user's goals row in place and return it."""


@dataclass
class GoalsService:
    """Service for reading, saving and deriving user goals."""

    repository: GoalsRepository

    def get_goals(self, user_id: UUID | None) -> ActionResult[UserGoals]:
        """Return the user's goals, or defaults when none are stored."""
        if user_id is None:
            return ActionResult.unauthenticated()
        try:
            stored = self.repository.get_goals(user_id)
        except StoreError as exc:
            _logger.exception("Error fetching user goals")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error fetching user goals")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok(stored or default_goals(user_id))

    def update_goals(
        self, user_id: UUID | None, goals: GoalsInput
    ) -> ActionResult[UserGoals]:
        """Create the goals row on first save, update it afterwards."""
        if user_id is None:
            return ActionResult.unauthenticated()
        error = _validate_goals(goals)
        if error:
            return ActionResult.fail(error, code="invalid")
        try:
            if self.repository.get_goals(user_id) is None:
                saved = self.repository.create_goals(user_id, goals)
            else:
                saved = self.repository.update_goals(user_id, goals)
        except StoreError as exc:
            _logger.exception("Error updating user goals")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error updating user goals")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok(saved)

    def calculate(self, inputs: BiometricInputs) -> ActionResult[CalculatedGoals]:
        """Derive goals from biometrics."""
        calculated = calculate_goals(inputs)
        if calculated is None:
            return ActionResult.fail(
                "Weight, height, age, sex, activity level and weight goal "
                "are all required",
                code="invalid",
            )
        return ActionResult.ok(calculated)


def _validate_goals(goals: GoalsInput) -> str | None:
    values = {
        "calorie_goal": goals.calorie_goal,
        "protein_goal": goals.protein_goal,
        "carb_goal": goals.carb_goal,
        "fat_goal": goals.fat_goal,
    }
    for name, value in values.items():
        if value <= 0:
            return f"{name} must be a positive number"
    return None
