"""Domain models for food logging."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodLogEntry:
    """One logged food occurrence with nutrients already scaled to the serving."""

    id: UUID
    user_id: UUID
    meal_name: str
    food_fdc_id: int
    food_description: str
    serving_amount: float
    serving_unit: str
    calories: float
    protein: float | None
    carbohydrates: float | None
    total_fat: float | None
    logged_at: datetime
    date: str
    barcode: str | None = None


@dataclass(frozen=True)
class FoodLogInput:
    """Values for a new food log entry."""

    meal_name: str
    food_fdc_id: int
    food_description: str
    serving_amount: float
    serving_unit: str
    calories: float
    protein: float | None
    carbohydrates: float | None
    total_fat: float | None
    date: str | None = None
    barcode: str | None = None


@dataclass(frozen=True)
class FoodLogUpdate:
    """Serving change for an existing entry.

    Nutrient values are recomputed from the food record when ``calories`` is
    not supplied.
    """

    serving_amount: float
    serving_unit: str
    calories: float | None = None
    protein: float | None = None
    carbohydrates: float | None = None
    total_fat: float | None = None
