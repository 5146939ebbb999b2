"""Tests for BMR, TDEE, calorie goal and macro calculations."""

import pytest

from munchy.domain.goals import ActivityLevel, BiometricInputs, Sex, WeightGoal
from munchy.services.goals import (
    calculate_bmr,
    calculate_calorie_goal,
    calculate_goals,
    calculate_macros,
    calculate_tdee,
    feet_inches_to_cm,
    pounds_to_kg,
    round_half_up,
)


def test_bmr_mifflin_st_jeor() -> None:
    assert calculate_bmr(70, 175, 30, Sex.MALE) == pytest.approx(1648.75)
    assert calculate_bmr(60, 165, 25, Sex.FEMALE) == pytest.approx(1345.25)


def test_tdee_applies_activity_multiplier() -> None:
    assert calculate_tdee(1648.75, ActivityLevel.MODERATELY_ACTIVE) == pytest.approx(
        2555.5625
    )


@pytest.mark.parametrize(
    ("goal", "expected"),
    [(WeightGoal.LOSE, 2056), (WeightGoal.MAINTAIN, 2556), (WeightGoal.GAIN, 2956)],
)
def test_calorie_goal_adjusts_for_weight_goal(goal: WeightGoal, expected: int) -> None:
    assert calculate_calorie_goal(2555.5625, goal) == expected


def test_macros_split_30_40_30() -> None:
    macros = calculate_macros(2000)

    assert macros.protein == 150
    assert macros.carbs == 200
    assert macros.fat == 67


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_calculate_goals_end_to_end() -> None:
    result = calculate_goals(
        BiometricInputs(
            weight_kg=70,
            height_cm=175,
            age=30,
            sex=Sex.MALE,
            activity_level=ActivityLevel.MODERATELY_ACTIVE,
            weight_goal=WeightGoal.LOSE,
        )
    )

    assert result is not None
    assert result.bmr == pytest.approx(1648.75)
    assert result.calorie_goal == 2056
    assert result.macros.protein == round_half_up(2056 * 0.3 / 4)


def test_calculate_goals_requires_every_input() -> None:
    result = calculate_goals(
        BiometricInputs(
            weight_kg=70,
            height_cm=None,
            age=30,
            sex=Sex.MALE,
            activity_level=ActivityLevel.SEDENTARY,
            weight_goal=WeightGoal.MAINTAIN,
        )
    )

    assert result is None


def test_imperial_conversions() -> None:
    assert pounds_to_kg(154) == pytest.approx(69.853, rel=1e-4)
    assert feet_inches_to_cm(5, 9) == pytest.approx(175.26)
