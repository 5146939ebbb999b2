"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Nutrient:
    """A single nutrient amount with its unit."""

    name: str
    amount: float
    unit: str


@dataclass(frozen=True)
class FoodSummary:
    """Search result for a food in FoodData Central."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None
    serving_size: float | None = None
    serving_size_unit: str | None = None


@dataclass(frozen=True)
class NutritionalData:
    """Per-serving nutrition for a food record."""

    fdc_id: int
    description: str
    brand_name: str | None
    serving_size: float | None
    serving_size_unit: str | None
    calories: float
    protein: Nutrient | None = None
    carbohydrates: Nutrient | None = None
    total_fat: Nutrient | None = None
    fiber: Nutrient | None = None
    sugars: Nutrient | None = None
    sodium: Nutrient | None = None
    potassium: Nutrient | None = None
    calcium: Nutrient | None = None
    iron: Nutrient | None = None
    vitamin_c: Nutrient | None = None
    vitamin_a: Nutrient | None = None


@dataclass(frozen=True)
class ScaledNutrition:
    """Calories and macros for a chosen serving."""

    calories: float
    protein: float | None
    carbohydrates: float | None
    total_fat: float | None
