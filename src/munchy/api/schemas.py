"""Pydantic models for API request payloads."""

from typing import Literal

from pydantic import BaseModel, Field

from munchy.domain.food_log import FoodLogInput, FoodLogUpdate
from munchy.domain.goals import (
    ActivityLevel,
    BiometricInputs,
    GoalsInput,
    Sex,
    WeightGoal,
)
from munchy.services.goals import feet_inches_to_cm, pounds_to_kg


class FoodLogCreateRequest(BaseModel):
    """Food log entry with nutrients already scaled to the serving."""

    meal_name: str
    food_fdc_id: int
    food_description: str
    serving_amount: float
    serving_unit: str
    calories: float
    protein: float | None = None
    carbohydrates: float | None = None
    total_fat: float | None = None
    date: str | None = None
    barcode: str | None = None

    def to_input(self) -> FoodLogInput:
        """Convert to the domain input."""
        return FoodLogInput(**self.model_dump())


class ServingLogRequest(BaseModel):
    """Log a food by id or barcode; nutrients are computed server-side."""

    meal_name: str
    serving_amount: float
    serving_unit: str = "serving"
    fdc_id: int | None = None
    barcode: str | None = None
    date: str | None = None


class FoodLogUpdateRequest(BaseModel):
    """Serving change for an existing entry."""

    serving_amount: float
    serving_unit: str
    calories: float | None = None
    protein: float | None = None
    carbohydrates: float | None = None
    total_fat: float | None = None

    def to_update(self) -> FoodLogUpdate:
        """Convert to the domain update."""
        return FoodLogUpdate(**self.model_dump())


class GoalsUpdateRequest(BaseModel):
    """Daily goals plus the optional biometrics they came from."""

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

    def to_input(self) -> GoalsInput:
        """Convert to the domain input."""
        return GoalsInput(**self.model_dump())


class GoalsCalculateRequest(BaseModel):
    """Calculator inputs in metric or imperial units."""

    weight: float | None = Field(default=None, gt=0)
    weight_unit: Literal["kg", "lb"] = "kg"
    height_cm: float | None = Field(default=None, gt=0)
    height_feet: float | None = Field(default=None, ge=0)
    height_inches: float | None = Field(default=None, ge=0)
    age: int | None = Field(default=None, gt=0)
    sex: Sex | None = None
    activity_level: ActivityLevel | None = None
    weight_goal: WeightGoal | None = None

    def to_inputs(self) -> BiometricInputs:
        """Convert to metric calculator inputs."""
        weight_kg = self.weight
        if weight_kg is not None and self.weight_unit == "lb":
            weight_kg = pounds_to_kg(weight_kg)
        height_cm = self.height_cm
        if height_cm is None and (self.height_feet or self.height_inches):
            height_cm = feet_inches_to_cm(
                self.height_feet or 0, self.height_inches or 0
            )
        return BiometricInputs(
            weight_kg=weight_kg,
            height_cm=height_cm,
            age=self.age,
            sex=self.sex,
            activity_level=self.activity_level,
            weight_goal=self.weight_goal,
        )


class AgentRequest(BaseModel):
    """A chat message for the assistant."""

    message: str
    previous_response_id: str | None = None
