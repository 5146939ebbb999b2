"""Food logging service."""

import logging
import math
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from munchy.domain.dates import format_local_date, parse_local_date, today_in
from munchy.domain.errors import FoodLookupError, FoodNotFoundError, StoreError
from munchy.domain.food_log import FoodLogEntry, FoodLogInput, FoodLogUpdate
from munchy.domain.nutrition import NutritionalData, ScaledNutrition
from munchy.domain.results import UNEXPECTED_ERROR, ActionResult
from munchy.services.nutrition import NutritionService
from munchy.services.servings import scale_nutrition

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_entry(self, user_id: UUID, entry: FoodLogInput) -> FoodLogEntry:
        """Insert an entry (with its date resolved) and return it."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return one of the user's entries by id."""

    def list_for_date(self, user_id: UUID, day: str) -> list[FoodLogEntry]:
        """Return the user's entries for a date ordered by log time."""

    def list_for_range(
        self, user_id: UUID, start: str, end: str
    ) -> list[FoodLogEntry]:
        """Return the user's entries with ``start <= date <= end``."""

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        serving_amount: float,
        serving_unit: str,
        nutrition: ScaledNutrition,
    ) -> FoodLogEntry | None:
        """Change an entry's serving and nutrients and return it."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's entries."""


@dataclass
class FoodLogService:
    """Service that validates, scales and persists food log entries."""

    repository: FoodLogRepository
    nutrition_service: NutritionService
    timezone: str = "UTC"

    def today(self) -> str:
        """Return today's date string in the configured timezone."""
        return format_local_date(today_in(self.timezone))

    def log_entry(
        self, user_id: UUID | None, entry: FoodLogInput
    ) -> ActionResult[FoodLogEntry]:
        """Persist an entry whose nutrients are already scaled."""
        if user_id is None:
            return ActionResult.unauthenticated()
        error = _validate_serving(entry.serving_amount) or _validate_nutrition(
            ScaledNutrition(
                entry.calories, entry.protein, entry.carbohydrates, entry.total_fat
            )
        )
        if entry.date is not None and not _is_valid_date(entry.date):
            error = error or "Date must use the YYYY-MM-DD format"
        if error:
            return ActionResult.fail(error, code="invalid")
        resolved = replace(
            entry,
            meal_name=entry.meal_name.strip() or "Snack",
            date=entry.date or self.today(),
        )
        try:
            created = self.repository.create_entry(user_id, resolved)
        except StoreError as exc:
            _logger.exception("Error logging food entry")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error logging food entry")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok(created)

    async def log_serving(  # noqa: PLR0913
        self,
        user_id: UUID | None,
        *,
        meal_name: str,
        serving_amount: float,
        serving_unit: str,
        fdc_id: int | None = None,
        barcode: str | None = None,
        day: str | None = None,
    ) -> ActionResult[FoodLogEntry]:
        """Look a food up, scale it to the chosen serving and log it."""
        if user_id is None:
            return ActionResult.unauthenticated()
        lookup = await self._lookup(fdc_id, barcode)
        if not lookup.success or lookup.data is None:
            return ActionResult.fail(
                lookup.error or UNEXPECTED_ERROR, lookup.code or "upstream"
            )
        food = lookup.data
        scaled = scale_nutrition(food, serving_amount, serving_unit)
        return self.log_entry(
            user_id,
            FoodLogInput(
                meal_name=meal_name,
                food_fdc_id=food.fdc_id,
                food_description=food.description,
                serving_amount=serving_amount,
                serving_unit=serving_unit,
                calories=scaled.calories,
                protein=scaled.protein,
                carbohydrates=scaled.carbohydrates,
                total_fat=scaled.total_fat,
                date=day,
                barcode=barcode,
            ),
        )

    def get_entries_for_date(
        self, user_id: UUID | None, day: str
    ) -> ActionResult[list[FoodLogEntry]]:
        """Return the user's entries for a date."""
        if user_id is None:
            return ActionResult.unauthenticated()
        if not _is_valid_date(day):
            return ActionResult.fail(
                "Date must use the YYYY-MM-DD format", code="invalid"
            )
        try:
            entries = self.repository.list_for_date(user_id, day)
        except StoreError as exc:
            _logger.exception("Error fetching food logs")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error fetching food logs")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok(entries)

    def get_today_entries(
        self, user_id: UUID | None
    ) -> ActionResult[list[FoodLogEntry]]:
        """Return the user's entries for today."""
        return self.get_entries_for_date(user_id, self.today())

    def get_meal_summary(
        self, user_id: UUID | None, day: str
    ) -> ActionResult[dict[str, list[FoodLogEntry]]]:
        """Group a day's entries by meal name, in first-logged order."""
        result = self.get_entries_for_date(user_id, day)
        if not result.success:
            return ActionResult.fail(
                result.error or "Failed to fetch food logs", result.code or "store"
            )
        grouped: dict[str, list[FoodLogEntry]] = {}
        for entry in result.data or []:
            grouped.setdefault(entry.meal_name, []).append(entry)
        return ActionResult.ok(grouped)

    async def update_entry(
        self, user_id: UUID | None, entry_id: UUID, update: FoodLogUpdate
    ) -> ActionResult[FoodLogEntry]:
        """Change an entry's serving and recompute its nutrients."""
        if user_id is None:
            return ActionResult.unauthenticated()
        error = _validate_serving(update.serving_amount)
        if error:
            return ActionResult.fail(error, code="invalid")
        try:
            existing = self.repository.get_entry(user_id, entry_id)
        except StoreError as exc:
            _logger.exception("Error fetching food entry")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error fetching food entry")
            return ActionResult.fail(UNEXPECTED_ERROR)
        if existing is None:
            return ActionResult.fail("Food entry not found", code="not_found")

        if update.calories is not None:
            nutrition = ScaledNutrition(
                update.calories, update.protein, update.carbohydrates, update.total_fat
            )
        else:
            lookup = await self._lookup(
                existing.food_fdc_id or None, existing.barcode
            )
            if not lookup.success or lookup.data is None:
                return ActionResult.fail(
                    lookup.error or UNEXPECTED_ERROR, lookup.code or "upstream"
                )
            nutrition = scale_nutrition(
                lookup.data, update.serving_amount, update.serving_unit
            )
        error = _validate_nutrition(nutrition)
        if error:
            return ActionResult.fail(error, code="invalid")

        try:
            updated = self.repository.update_entry(
                user_id,
                entry_id,
                update.serving_amount,
                update.serving_unit,
                nutrition,
            )
        except StoreError as exc:
            _logger.exception("Error updating food entry")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error updating food entry")
            return ActionResult.fail(UNEXPECTED_ERROR)
        if updated is None:
            return ActionResult.fail("Food entry not found", code="not_found")
        return ActionResult.ok(updated)

    def delete_entry(self, user_id: UUID | None, entry_id: UUID) -> ActionResult[None]:
        """Delete one of the user's entries."""
        if user_id is None:
            return ActionResult.unauthenticated()
        try:
            self.repository.delete_entry(user_id, entry_id)
        except StoreError as exc:
            _logger.exception("Error deleting food entry")
            return ActionResult.fail(str(exc), code="store")
        except Exception:
            _logger.exception("Unexpected error deleting food entry")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok()

    async def _lookup(
        self, fdc_id: int | None, barcode: str | None
    ) -> ActionResult[NutritionalData]:
        try:
            if barcode:
                food = await self.nutrition_service.lookup_barcode(barcode)
            elif fdc_id:
                food = await self.nutrition_service.get_food(fdc_id)
            else:
                return ActionResult.fail(
                    "Either an FDC ID or a barcode is required", code="invalid"
                )
        except ValueError as exc:
            return ActionResult.fail(str(exc), code="invalid")
        except FoodNotFoundError as exc:
            return ActionResult.fail(str(exc), code="not_found")
        except FoodLookupError as exc:
            _logger.warning("Food lookup failed: %s", exc)
            return ActionResult.fail(str(exc), code="upstream")
        except Exception:
            _logger.exception("Unexpected error looking up food")
            return ActionResult.fail(UNEXPECTED_ERROR)
        return ActionResult.ok(food)


def _validate_serving(serving_amount: float) -> str | None:
    if not math.isfinite(serving_amount) or serving_amount <= 0:
        return "Serving amount must be a positive number"
    return None


def _validate_nutrition(nutrition: ScaledNutrition) -> str | None:
    values = {
        "calories": nutrition.calories,
        "protein": nutrition.protein,
        "carbohydrates": nutrition.carbohydrates,
        "total_fat": nutrition.total_fat,
    }
    for name, value in values.items():
        if value is None:
            continue
        if not math.isfinite(value) or value < 0:
            return f"{name} must be a finite, non-negative number"
    return None


def _is_valid_date(value: str) -> bool:
    try:
        parsed = parse_local_date(value)
    except ValueError:
        return False
    return format_local_date(parsed) == value
