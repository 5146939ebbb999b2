"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest
from supabase import PostgrestAPIError

from munchy.adapters.supabase_auth_gateway import SupabaseAuthGateway
from munchy.adapters.supabase_food_log_repository import SupabaseFoodLogRepository
from munchy.adapters.supabase_goals_repository import SupabaseGoalsRepository
from munchy.domain.errors import StoreError
from munchy.domain.food_log import FoodLogInput
from munchy.domain.goals import ActivityLevel, GoalsInput, Sex
from munchy.domain.nutrition import ScaledNutrition
from tests.conftest import USER_ID


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    error: dict[str, str] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise PostgrestAPIError(self.error)
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeAuth:
    users: dict[str, str] = field(default_factory=dict)

    def get_user(self, jwt: str) -> SimpleNamespace:
        if jwt not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.users[jwt]))


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    auth: FakeAuth = field(default_factory=FakeAuth)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _food_log_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(USER_ID),
        "meal_name": "Breakfast",
        "food_fdc_id": 123456,
        "food_description": "Oatmeal",
        "serving_amount": 1.5,
        "serving_unit": "cup",
        "calories": 225,
        "protein": 7.5,
        "carbohydrates": None,
        "total_fat": 4,
        "logged_at": datetime(2024, 3, 1, 8, tzinfo=UTC).isoformat(),
        "date": "2024-03-01",
        "barcode": None,
    }
    row.update(overrides)
    return row


def test_supabase_food_log_repository_create() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_logs")
    table.queue("insert", [_food_log_row()])

    repository = SupabaseFoodLogRepository(client)
    created = repository.create_entry(
        USER_ID,
        FoodLogInput(
            meal_name="Breakfast",
            food_fdc_id=123456,
            food_description="Oatmeal",
            serving_amount=1.5,
            serving_unit="cup",
            calories=225,
            protein=7.5,
            carbohydrates=None,
            total_fat=4,
            date="2024-03-01",
        ),
    )

    assert created.calories == 225.0
    assert created.carbohydrates is None
    assert created.logged_at.tzinfo is not None
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["user_id"] == str(USER_ID)
    assert table.last_payload["date"] == "2024-03-01"


def test_supabase_food_log_repository_range_filters() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_logs")
    table.queue("select", [_food_log_row(), _food_log_row(date="2024-03-02")])

    repository = SupabaseFoodLogRepository(client)
    entries = repository.list_for_range(USER_ID, "2024-03-01", "2024-03-07")

    assert [entry.date for entry in entries] == ["2024-03-01", "2024-03-02"]
    assert ("gte", "date", "2024-03-01") in table.last_filters
    assert ("lte", "date", "2024-03-07") in table.last_filters


def test_supabase_food_log_repository_update_missing_row() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseFoodLogRepository(client)

    updated = repository.update_entry(
        USER_ID, uuid4(), 2, "serving", ScaledNutrition(300, 10, 20, 5)
    )

    assert updated is None
    assert client.table("food_logs").last_payload["calories"] == 300


def test_supabase_food_log_repository_wraps_errors() -> None:
    client = FakeSupabaseClient()
    client.table("food_logs").error = {"message": "permission denied", "code": "42501"}
    repository = SupabaseFoodLogRepository(client)

    with pytest.raises(StoreError, match="permission denied"):
        repository.list_for_date(USER_ID, "2024-03-01")


def test_supabase_goals_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_goals")
    row = {
        "id": str(uuid4()),
        "user_id": str(USER_ID),
        "calorie_goal": 2100,
        "protein_goal": 150,
        "carb_goal": 230,
        "fat_goal": 70,
        "weight_kg": 72.5,
        "height_cm": None,
        "age": 34,
        "sex": "female",
        "activity_level": "lightly_active",
        "weight_goal": None,
        "updated_at": datetime(2024, 3, 1, tzinfo=UTC).isoformat(),
    }
    table.queue("insert", [row])
    table.queue("select", [row])

    repository = SupabaseGoalsRepository(client)
    created = repository.create_goals(
        USER_ID,
        GoalsInput(
            calorie_goal=2100,
            protein_goal=150,
            carb_goal=230,
            fat_goal=70,
            weight_kg=72.5,
            age=34,
            sex=Sex.FEMALE,
            activity_level=ActivityLevel.LIGHTLY_ACTIVE,
        ),
    )
    fetched = repository.get_goals(USER_ID)

    assert table.last_payload["sex"] == "female"
    assert table.last_payload["weight_goal"] is None
    assert created.activity_level == ActivityLevel.LIGHTLY_ACTIVE
    assert fetched is not None
    assert fetched.calorie_goal == 2100
    assert fetched.height_cm is None


def test_supabase_goals_repository_missing_row() -> None:
    repository = SupabaseGoalsRepository(FakeSupabaseClient())

    assert repository.get_goals(USER_ID) is None


def test_supabase_auth_gateway() -> None:
    client = FakeSupabaseClient()
    client.auth.users["token"] = str(USER_ID)
    gateway = SupabaseAuthGateway(client)

    assert gateway.get_user_id("token") == USER_ID
    assert gateway.get_user_id("expired") is None
    assert gateway.get_user_id("") is None
