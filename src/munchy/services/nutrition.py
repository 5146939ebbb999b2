"""Nutrition lookups against USDA FoodData Central and Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from munchy.adapters.fdc_client import FdcClient
from munchy.domain.errors import FoodLookupError, FoodNotFoundError
from munchy.domain.nutrition import FoodSummary, Nutrient, NutritionalData
from munchy.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_NUTRIENT_IDS = {
    "energy_kcal": 1008,
    "energy_kj": 1062,
    "protein": 1003,
    "carbohydrates": 1005,
    "total_fat": 1004,
    "fiber": 1079,
    "sugars": 2000,
    "sodium": 1093,
    "potassium": 1092,
    "calcium": 1087,
    "iron": 1089,
    "vitamin_c": 1162,
    "vitamin_a": 1106,
}

KJ_PER_KCAL = 4.184
MAX_PAGE_SIZE = 200
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_SERVER_ERROR = 500

# Open Food Facts nutriment key, display name, unit, factor from grams.
_OFF_NUTRIENTS: dict[str, tuple[str, str, str, float]] = {
    "protein": ("proteins", "Protein", "g", 1.0),
    "carbohydrates": ("carbohydrates", "Carbohydrates", "g", 1.0),
    "total_fat": ("fat", "Total Fat", "g", 1.0),
    "fiber": ("fiber", "Fiber", "g", 1.0),
    "sugars": ("sugars", "Sugars", "g", 1.0),
    "sodium": ("sodium", "Sodium", "mg", 1000.0),
    "potassium": ("potassium", "Potassium", "mg", 1000.0),
    "calcium": ("calcium", "Calcium", "mg", 1000.0),
    "iron": ("iron", "Iron", "mg", 1000.0),
    "vitamin_c": ("vitamin-c", "Vitamin C", "mg", 1000.0),
    "vitamin_a": ("vitamin-a", "Vitamin A", "µg", 1_000_000.0),
}

_logger = logging.getLogger(__name__)


class BarcodeClient(Protocol):
    """Interface for barcode product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Return the raw product payload for a barcode."""


@dataclass
class NutritionService:
    """Service for food search, nutrition details and barcode lookups."""

    fdc_client: FdcClient
    barcode_client: BarcodeClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 25) -> list[FoodSummary]:
        """Search FDC foods by name."""
        cleaned = query.strip()
        if not cleaned:
            raise ValueError("Search query cannot be empty")
        page_size = max(1, min(limit, MAX_PAGE_SIZE))
        cache_key = f"fdc:search:{cleaned.lower()}:{page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.search_foods(cleaned, page_size=page_size),
                action="search",
            )
        except Exception as exc:
            status_code = _status_code_from_exception(exc)
            raise FoodLookupError(f"USDA API error: {status_code or exc}") from exc
        foods = [
            FoodSummary(
                fdc_id=food["fdcId"],
                description=food.get("description", ""),
                brand_owner=food.get("brandOwner"),
                brand_name=food.get("brandName"),
                data_type=food.get("dataType"),
                serving_size=_optional_float(food.get("servingSize")),
                serving_size_unit=food.get("servingSizeUnit"),
            )
            for food in payload.get("foods", [])
        ]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", cleaned, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> NutritionalData:
        """Return per-serving nutrition for an FDC food."""
        if fdc_id <= 0:
            raise ValueError("Invalid FDC ID")
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionalData):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.get_food(fdc_id),
                action=f"get_food:{fdc_id}",
            )
        except Exception as exc:
            status_code = _status_code_from_exception(exc)
            if status_code == HTTP_NOT_FOUND:
                raise FoodNotFoundError(
                    f"Food with FDC ID {fdc_id} not found. This food may not have "
                    "detailed nutritional data available."
                ) from exc
            if status_code == HTTP_BAD_REQUEST:
                raise FoodLookupError(
                    f"Invalid request for FDC ID {fdc_id}. "
                    "Please try a different food."
                ) from exc
            raise FoodLookupError(f"USDA API error: {status_code or exc}") from exc

        food_nutrients = payload.get("foodNutrients") or []
        if not food_nutrients:
            raise FoodLookupError(
                f"No nutritional data available for this food (FDC ID: {fdc_id})"
            )
        details = _nutrition_from_fdc(payload, food_nutrients)
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info("Food details: fdc_id=%s", fdc_id)
        return details

    async def lookup_barcode(self, barcode: str) -> NutritionalData:
        """Return nutrition for a scanned product barcode."""
        code = barcode.strip()
        if not code.isdigit():
            raise ValueError("Barcode must contain only digits")
        cache_key = f"barcode:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionalData):
            return cached

        try:
            payload = await self._call_with_retry(
                lambda: self.barcode_client.get_product(code),
                action=f"barcode:{code}",
            )
        except Exception as exc:
            if _status_code_from_exception(exc) == HTTP_NOT_FOUND:
                raise FoodNotFoundError(
                    f"No product found for barcode {code}"
                ) from exc
            raise FoodLookupError(f"Barcode lookup failed: {exc}") from exc

        product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(product, dict):
            raise FoodNotFoundError(f"No product found for barcode {code}")
        details = _nutrition_from_product(code, product)
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry on server errors."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                client_error = (
                    status_code is not None and status_code < HTTP_SERVER_ERROR
                )
                if client_error or attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract the HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None


def _matches(nutrient: dict[str, object], nutrient_id: int) -> bool:
    info = nutrient.get("nutrient") or {}
    if info.get("id") == nutrient_id or nutrient.get("nutrientId") == nutrient_id:
        return True
    number = nutrient.get("nutrientNumber")
    return isinstance(number, str) and number.isdigit() and int(number) == nutrient_id


def _find_nutrient(
    food_nutrients: list[dict[str, object]], nutrient_id: int
) -> Nutrient | None:
    for nutrient in food_nutrients:
        if not _matches(nutrient, nutrient_id):
            continue
        amount = nutrient.get("amount")
        if amount is None:
            return None
        info = nutrient.get("nutrient") or {}
        return Nutrient(
            name=str(info.get("name") or nutrient.get("nutrientName") or "Unknown"),
            amount=float(amount),
            unit=str(info.get("unitName") or nutrient.get("unitName") or ""),
        )
    return None


def _extract_calories(food_nutrients: list[dict[str, object]]) -> float:
    """Return kcal, converting from kJ when only energy in kJ is reported."""
    kcal = _find_nutrient(food_nutrients, _NUTRIENT_IDS["energy_kcal"])
    if kcal is not None:
        return kcal.amount
    kilojoules = _find_nutrient(food_nutrients, _NUTRIENT_IDS["energy_kj"])
    if kilojoules is not None:
        return kilojoules.amount / KJ_PER_KCAL
    return 0.0


def _nutrition_from_fdc(
    payload: dict[str, object], food_nutrients: list[dict[str, object]]
) -> NutritionalData:
    """Build per-serving nutrition; FDC reports nutrients per 100 units."""
    serving_size = _optional_float(payload.get("servingSize"))
    factor = serving_size / 100 if serving_size else 1.0

    def scaled(key: str) -> Nutrient | None:
        nutrient = _find_nutrient(food_nutrients, _NUTRIENT_IDS[key])
        if nutrient is None:
            return None
        return Nutrient(nutrient.name, nutrient.amount * factor, nutrient.unit)

    return NutritionalData(
        fdc_id=int(payload["fdcId"]),
        description=str(payload.get("description", "")),
        brand_name=payload.get("brandName"),
        serving_size=serving_size,
        serving_size_unit=payload.get("servingSizeUnit"),
        calories=_extract_calories(food_nutrients) * factor,
        protein=scaled("protein"),
        carbohydrates=scaled("carbohydrates"),
        total_fat=scaled("total_fat"),
        fiber=scaled("fiber"),
        sugars=scaled("sugars"),
        sodium=scaled("sodium"),
        potassium=scaled("potassium"),
        calcium=scaled("calcium"),
        iron=scaled("iron"),
        vitamin_c=scaled("vitamin_c"),
        vitamin_a=scaled("vitamin_a"),
    )


def _nutrition_from_product(
    barcode: str, product: dict[str, object]
) -> NutritionalData:
    """Map an Open Food Facts product onto per-serving nutrition.

    Values come from the per-100 g nutriments, scaled to the declared serving
    quantity when the product has one.
    """
    nutriments = product.get("nutriments") or {}
    serving_quantity = _optional_float(product.get("serving_quantity"))
    if serving_quantity and serving_quantity > 0:
        serving_size = serving_quantity
        serving_unit = str(product.get("serving_quantity_unit") or "g")
    else:
        serving_size = 100.0
        serving_unit = "g"
    factor = serving_size / 100

    calories = _optional_float(nutriments.get("energy-kcal_100g"))
    if calories is None:
        kilojoules = _optional_float(nutriments.get("energy_100g"))
        calories = kilojoules / KJ_PER_KCAL if kilojoules is not None else 0.0

    def scaled(key: str) -> Nutrient | None:
        off_key, name, unit, unit_factor = _OFF_NUTRIENTS[key]
        amount = _optional_float(nutriments.get(f"{off_key}_100g"))
        if amount is None:
            return None
        return Nutrient(name=name, amount=amount * unit_factor * factor, unit=unit)

    name = str(product.get("product_name") or f"Product {barcode}").strip()
    brand = str(product.get("brands") or "").split(",")[0].strip() or None
    return NutritionalData(
        fdc_id=0,
        description=name,
        brand_name=brand,
        serving_size=serving_size,
        serving_size_unit=serving_unit,
        calories=calories * factor,
        protein=scaled("protein"),
        carbohydrates=scaled("carbohydrates"),
        total_fat=scaled("total_fat"),
        fiber=scaled("fiber"),
        sugars=scaled("sugars"),
        sodium=scaled("sodium"),
        potassium=scaled("potassium"),
        calcium=scaled("calcium"),
        iron=scaled("iron"),
        vitamin_c=scaled("vitamin_c"),
        vitamin_a=scaled("vitamin_a"),
    )
