"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from munchy.adapters.supabase_errors import store_errors
from munchy.domain.errors import StoreError
from munchy.domain.goals import (
    ActivityLevel,
    GoalsInput,
    Sex,
    UserGoals,
    WeightGoal,
)
from munchy.services.goals import GoalsRepository

_TABLE = "user_goals"


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for user goals."""

    client: Client

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        """Return the stored goals row for a user."""
        with store_errors("fetch user goals"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_goals(response.data[0])

    def create_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        """Insert the user's goals row."""
        payload = {"user_id": str(user_id), **_goals_payload(goals)}
        with store_errors("create user goals"):
            response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise StoreError("Failed to create user goals")
        return _parse_goals(response.data[0])

    def update_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        """Update the user's goals row."""
        payload = {
            **_goals_payload(goals),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        with store_errors("update user goals"):
            response = (
                self.client.table(_TABLE)
                .update(payload)
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to update user goals")
        return _parse_goals(response.data[0])


def _goals_payload(goals: GoalsInput) -> dict[str, object]:
    return {
        "calorie_goal": goals.calorie_goal,
        "protein_goal": goals.protein_goal,
        "carb_goal": goals.carb_goal,
        "fat_goal": goals.fat_goal,
        "weight_kg": goals.weight_kg,
        "height_cm": goals.height_cm,
        "age": goals.age,
        "sex": goals.sex.value if goals.sex else None,
        "activity_level": goals.activity_level.value if goals.activity_level else None,
        "weight_goal": goals.weight_goal.value if goals.weight_goal else None,
    }


def _parse_goals(row: dict[str, object]) -> UserGoals:
    updated_at = row.get("updated_at")
    return UserGoals(
        id=UUID(str(row["id"])) if row.get("id") else None,
        user_id=UUID(str(row["user_id"])),
        calorie_goal=int(row["calorie_goal"]),
        protein_goal=int(row["protein_goal"]),
        carb_goal=int(row["carb_goal"]),
        fat_goal=int(row["fat_goal"]),
        weight_kg=_optional_float(row.get("weight_kg")),
        height_cm=_optional_float(row.get("height_cm")),
        age=int(row["age"]) if row.get("age") is not None else None,
        sex=Sex(row["sex"]) if row.get("sex") else None,
        activity_level=(
            ActivityLevel(row["activity_level"]) if row.get("activity_level") else None
        ),
        weight_goal=WeightGoal(row["weight_goal"]) if row.get("weight_goal") else None,
        updated_at=datetime.fromisoformat(str(updated_at)) if updated_at else None,
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
