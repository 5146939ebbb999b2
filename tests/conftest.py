"""Shared test fixtures."""

from dataclasses import asdict, dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import httpx
import pytest

from munchy.adapters.fdc_client import FdcClient
from munchy.config import Settings
from munchy.containers import AppContainer
from munchy.domain.agent import AgentTurn
from munchy.domain.errors import StoreError
from munchy.domain.food_log import FoodLogEntry, FoodLogInput
from munchy.domain.goals import GoalsInput, UserGoals
from munchy.domain.nutrition import ScaledNutrition
from munchy.services.agent import AgentClient, AgentService, WebSearchClient
from munchy.services.auth import AuthGateway
from munchy.services.cache import InMemoryCache
from munchy.services.food_log import FoodLogRepository, FoodLogService
from munchy.services.goals import GoalsRepository, GoalsService
from munchy.services.insights import InsightsService
from munchy.services.nutrition import BarcodeClient, NutritionService
from munchy.services.search import SearchGate

USER_ID = UUID("00000000-0000-0000-0000-000000000001")
VALID_TOKEN = "valid-token"


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    entries: dict[UUID, FoodLogEntry] = field(default_factory=dict)
    fail: bool = False

    def create_entry(self, user_id: UUID, entry: FoodLogInput) -> FoodLogEntry:
        self._check()
        created = FoodLogEntry(
            id=uuid4(),
            user_id=user_id,
            meal_name=entry.meal_name,
            food_fdc_id=entry.food_fdc_id,
            food_description=entry.food_description,
            serving_amount=entry.serving_amount,
            serving_unit=entry.serving_unit,
            calories=entry.calories,
            protein=entry.protein,
            carbohydrates=entry.carbohydrates,
            total_fat=entry.total_fat,
            logged_at=datetime.now(tz=UTC),
            date=entry.date or "",
            barcode=entry.barcode,
        )
        self.entries[created.id] = created
        return created

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        self._check()
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def list_for_date(self, user_id: UUID, day: str) -> list[FoodLogEntry]:
        self._check()
        return sorted(
            (
                e
                for e in self.entries.values()
                if e.user_id == user_id and e.date == day
            ),
            key=lambda e: e.logged_at,
        )

    def list_for_range(
        self, user_id: UUID, start: str, end: str
    ) -> list[FoodLogEntry]:
        self._check()
        return [
            e
            for e in self.entries.values()
            if e.user_id == user_id and start <= e.date <= end
        ]

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        serving_amount: float,
        serving_unit: str,
        nutrition: ScaledNutrition,
    ) -> FoodLogEntry | None:
        self._check()
        entry = self.get_entry(user_id, entry_id)
        if entry is None:
            return None
        updated = replace(
            entry,
            serving_amount=serving_amount,
            serving_unit=serving_unit,
            calories=nutrition.calories,
            protein=nutrition.protein,
            carbohydrates=nutrition.carbohydrates,
            total_fat=nutrition.total_fat,
        )
        self.entries[entry_id] = updated
        return updated

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        self._check()
        entry = self.entries.get(entry_id)
        if entry is not None and entry.user_id == user_id:
            del self.entries[entry_id]

    def add(self, user_id: UUID, day: str, **values: object) -> FoodLogEntry:
        """Insert an entry directly, bypassing validation."""
        defaults: dict[str, object] = {
            "meal_name": "Lunch",
            "food_fdc_id": 1,
            "food_description": "Food",
            "serving_amount": 1.0,
            "serving_unit": "serving",
            "calories": 100.0,
            "protein": 10.0,
            "carbohydrates": 10.0,
            "total_fat": 5.0,
            "date": day,
        }
        defaults.update(values)
        return self.create_entry(user_id, FoodLogInput(**defaults))

    def _check(self) -> None:
        if self.fail:
            raise StoreError("database unavailable")


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, UserGoals] = field(default_factory=dict)
    created: int = 0
    updated: int = 0
    fail: bool = False

    def get_goals(self, user_id: UUID) -> UserGoals | None:
        if self.fail:
            raise StoreError("database unavailable")
        return self.goals.get(user_id)

    def create_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        self.created += 1
        return self._save(user_id, goals, uuid4())

    def update_goals(self, user_id: UUID, goals: GoalsInput) -> UserGoals:
        self.updated += 1
        return self._save(user_id, goals, self.goals[user_id].id)

    def _save(self, user_id: UUID, goals: GoalsInput, row_id: UUID | None) -> UserGoals:
        saved = UserGoals(
            id=row_id,
            user_id=user_id,
            updated_at=datetime.now(tz=UTC),
            **asdict(goals),
        )
        self.goals[user_id] = saved
        return saved


CHICKEN_FOOD = {
    "fdcId": 123456,
    "description": "Chicken breast, grilled",
    "brandName": None,
    "servingSize": 100,
    "servingSizeUnit": "g",
    "foodNutrients": [
        {"nutrient": {"id": 1008, "name": "Energy", "unitName": "kcal"}, "amount": 165},
        {"nutrient": {"id": 1003, "name": "Protein", "unitName": "g"}, "amount": 31},
        {
            "nutrient": {"id": 1005, "name": "Carbohydrate", "unitName": "g"},
            "amount": 0,
        },
        {
            "nutrient": {"id": 1004, "name": "Total lipid", "unitName": "g"},
            "amount": 3.6,
        },
    ],
}


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 123456,
                    "description": "Chicken breast, grilled",
                    "brandOwner": None,
                    "brandName": None,
                    "dataType": "Foundation",
                    "servingSize": 100,
                    "servingSizeUnit": "g",
                }
            ]
        }
    )
    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: {123456: CHICKEN_FOOD}
    )
    search_calls: list[tuple[str, int]] = field(default_factory=list)
    food_calls: int = 0

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        self.search_calls.append((query, page_size))
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        if fdc_id not in self.foods:
            request = httpx.Request("GET", f"https://fdc.test/food/{fdc_id}")
            raise httpx.HTTPStatusError(
                "Not Found", request=request, response=httpx.Response(404)
            )
        return self.foods[fdc_id]


@dataclass
class FakeBarcodeClient(BarcodeClient):
    """Fake Open Food Facts client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "737628064502": {
                "status": 1,
                "product": {
                    "product_name": "Thai peanut noodle kit",
                    "brands": "Simply Asia, Thai Kitchen",
                    "serving_quantity": 50,
                    "serving_quantity_unit": "g",
                    "nutriments": {
                        "energy-kcal_100g": 400,
                        "proteins_100g": 10,
                        "carbohydrates_100g": 70,
                        "fat_100g": 8,
                        "sodium_100g": 0.5,
                    },
                },
            }
        }
    )

    async def get_product(self, barcode: str) -> dict[str, object]:
        return self.products.get(barcode, {"status": 0})


@dataclass
class FakeAgentClient(AgentClient):
    """Agent client that replays scripted turns and records requests."""

    turns: list[AgentTurn] = field(default_factory=list)
    requests: list[dict[str, object]] = field(default_factory=list)

    async def respond(
        self,
        *,
        model: str,
        instructions: str,
        input_items: str | list[dict[str, object]],
        tools: list[dict[str, object]],
        previous_response_id: str | None,
    ) -> AgentTurn:
        self.requests.append(
            {
                "model": model,
                "input": input_items,
                "previous_response_id": previous_response_id,
            }
        )
        return self.turns.pop(0)


@dataclass
class FakeWebSearchClient(WebSearchClient):
    """Web search returning canned results."""

    results: list[dict[str, str]] = field(
        default_factory=lambda: [
            {
                "title": "Protein needs",
                "description": "How much protein you need.",
                "url": "https://example.com/protein",
            }
        ]
    )

    async def search(self, query: str, count: int = 5) -> list[dict[str, str]]:
        return self.results[:count]


@dataclass
class FakeAuthGateway(AuthGateway):
    """Accepts a single known token."""

    tokens: dict[str, UUID] = field(default_factory=lambda: {VALID_TOKEN: USER_ID})

    def get_user_id(self, access_token: str) -> UUID | None:
        return self.tokens.get(access_token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        fdc_api_key="fdc-key",
        agent_api_key="agent-key",
        brave_api_key="brave-key",
    )


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def goals_repository() -> InMemoryGoalsRepository:
    return InMemoryGoalsRepository()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def nutrition_service(fdc_client: FakeFdcClient) -> NutritionService:
    return NutritionService(
        fdc_client=fdc_client,
        barcode_client=FakeBarcodeClient(),
        cache=InMemoryCache(),
        retry_attempts=0,
    )


@pytest.fixture
def food_log_service(
    food_log_repository: InMemoryFoodLogRepository,
    nutrition_service: NutritionService,
) -> FoodLogService:
    return FoodLogService(
        repository=food_log_repository, nutrition_service=nutrition_service
    )


@pytest.fixture
def goals_service(goals_repository: InMemoryGoalsRepository) -> GoalsService:
    return GoalsService(goals_repository)


@pytest.fixture
def agent_client() -> FakeAgentClient:
    return FakeAgentClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    food_log_repository: InMemoryFoodLogRepository,
    nutrition_service: NutritionService,
    food_log_service: FoodLogService,
    goals_service: GoalsService,
    agent_client: FakeAgentClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_gateway=FakeAuthGateway(),
        nutrition_service=nutrition_service,
        search_gate=SearchGate(nutrition_service, quiet_period_seconds=0),
        food_log_service=food_log_service,
        goals_service=goals_service,
        insights_service=InsightsService(
            repository=food_log_repository, goals_service=goals_service
        ),
        agent_service=AgentService(
            client=agent_client,
            model=settings.agent_model,
            nutrition_service=nutrition_service,
            food_log_service=food_log_service,
            web_search_client=FakeWebSearchClient(),
        ),
        close_resources=close_resources,
    )
