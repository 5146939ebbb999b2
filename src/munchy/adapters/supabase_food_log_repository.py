"""Supabase repository for food log entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from munchy.adapters.supabase_errors import store_errors
from munchy.domain.errors import StoreError
from munchy.domain.food_log import FoodLogEntry, FoodLogInput
from munchy.domain.nutrition import ScaledNutrition
from munchy.services.food_log import FoodLogRepository

_TABLE = "food_logs"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log entries."""

    client: Client

    def create_entry(self, user_id: UUID, entry: FoodLogInput) -> FoodLogEntry:
        """Insert a food log row and return it."""
        with store_errors("log food entry"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "user_id": str(user_id),
                        "meal_name": entry.meal_name,
                        "food_fdc_id": entry.food_fdc_id,
                        "food_description": entry.food_description,
                        "serving_amount": entry.serving_amount,
                        "serving_unit": entry.serving_unit,
                        "calories": entry.calories,
                        "protein": entry.protein,
                        "carbohydrates": entry.carbohydrates,
                        "total_fat": entry.total_fat,
                        "date": entry.date,
                        "barcode": entry.barcode,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to log food entry")
        return _parse_entry(response.data[0])

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return one of the user's entries by id."""
        with store_errors("fetch food entry"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("id", str(entry_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_for_date(self, user_id: UUID, day: str) -> list[FoodLogEntry]:
        """Return the user's entries for a date ordered by log time."""
        with store_errors("fetch food logs"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("user_id", str(user_id))
                .eq("date", day)
                .order("logged_at", desc=False)
                .execute()
            )
        return [_parse_entry(row) for row in response.data or []]

    def list_for_range(
        self, user_id: UUID, start: str, end: str
    ) -> list[FoodLogEntry]:
        """Return the user's entries with ``start <= date <= end``."""
        with store_errors("fetch food logs"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("user_id", str(user_id))
                .gte("date", start)
                .lte("date", end)
                .order("date", desc=False)
                .execute()
            )
        return [_parse_entry(row) for row in response.data or []]

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        serving_amount: float,
        serving_unit: str,
        nutrition: ScaledNutrition,
    ) -> FoodLogEntry | None:
        """Update an entry's serving and nutrients and return the new row."""
        with store_errors("update food entry"):
            response = (
                self.client.table(_TABLE)
                .update(
                    {
                        "serving_amount": serving_amount,
                        "serving_unit": serving_unit,
                        "calories": nutrition.calories,
                        "protein": nutrition.protein,
                        "carbohydrates": nutrition.carbohydrates,
                        "total_fat": nutrition.total_fat,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .eq("id", str(entry_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's entries."""
        with store_errors("delete food entry"):
            self.client.table(_TABLE).delete().eq("id", str(entry_id)).eq(
                "user_id", str(user_id)
            ).execute()


def _parse_entry(row: dict[str, object]) -> FoodLogEntry:
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_name=str(row.get("meal_name", "")),
        food_fdc_id=int(row.get("food_fdc_id") or 0),
        food_description=str(row.get("food_description", "")),
        serving_amount=float(row.get("serving_amount") or 0.0),
        serving_unit=str(row.get("serving_unit", "")),
        calories=float(row.get("calories") or 0.0),
        protein=_optional_float(row.get("protein")),
        carbohydrates=_optional_float(row.get("carbohydrates")),
        total_fat=_optional_float(row.get("total_fat")),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        date=str(row["date"]),
        barcode=str(row["barcode"]) if row.get("barcode") else None,
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
