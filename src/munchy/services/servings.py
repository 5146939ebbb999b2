"""Serving-unit normalization and serving-size arithmetic."""

from munchy.domain.nutrition import Nutrient, NutritionalData, ScaledNutrition

DEFAULT_SERVING_SIZE = 100.0
DEFAULT_SERVING_UNIT = "g"
SERVING = "serving"

_UNIT_SYNONYMS: dict[str, str] = {
    "g": "g",
    "gram": "g",
    "grams": "g",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "pound": "lb",
    "pounds": "lb",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "cup": "cup",
    "cups": "cup",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "piece": "piece",
    "pieces": "piece",
    "slice": "slice",
    "slices": "slice",
    "serving": SERVING,
    "servings": SERVING,
}


def normalize_unit(unit: str) -> str:
    """Map a free-text unit to its canonical token.

    Unknown units are returned trimmed and lower-cased.
    """
    normalized = unit.strip().lower()
    return _UNIT_SYNONYMS.get(normalized, normalized)


def compute_multiplier(
    requested_amount: float,
    requested_unit: str,
    reference_serving_size: float | None,
    reference_serving_unit: str | None,
) -> float:
    """Return the factor applied to per-serving nutrition values.

    Units that differ after normalization are not converted: the raw amount
    is used as the multiplier.
    """
    serving_size = reference_serving_size
    if serving_size is None or not serving_size > 0:
        serving_size = DEFAULT_SERVING_SIZE
    reference_unit = normalize_unit(reference_serving_unit or DEFAULT_SERVING_UNIT)
    unit = normalize_unit(requested_unit)

    if unit == SERVING:
        return requested_amount
    if unit == reference_unit:
        return requested_amount / serving_size
    return requested_amount


def scale_nutrition(
    data: NutritionalData, requested_amount: float, requested_unit: str
) -> ScaledNutrition:
    """Scale a food's per-serving calories and macros to the chosen serving."""
    multiplier = compute_multiplier(
        requested_amount,
        requested_unit,
        data.serving_size,
        data.serving_size_unit,
    )
    return ScaledNutrition(
        calories=data.calories * multiplier,
        protein=_scale(data.protein, multiplier),
        carbohydrates=_scale(data.carbohydrates, multiplier),
        total_fat=_scale(data.total_fat, multiplier),
    )


def _scale(nutrient: Nutrient | None, multiplier: float) -> float | None:
    if nutrient is None:
        return None
    return nutrient.amount * multiplier
