"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from munchy.adapters.brave_search_client import HttpxBraveSearchClient
from munchy.adapters.fdc_client import HttpxFdcClient
from munchy.adapters.open_food_facts_client import HttpxOpenFoodFactsClient
from munchy.adapters.openai_agent_client import OpenAIAgentClient
from munchy.adapters.supabase_auth_gateway import SupabaseAuthGateway
from munchy.adapters.supabase_food_log_repository import SupabaseFoodLogRepository
from munchy.adapters.supabase_goals_repository import SupabaseGoalsRepository
from munchy.config import Settings
from munchy.services.agent import AgentService
from munchy.services.auth import AuthGateway
from munchy.services.cache import InMemoryCache
from munchy.services.food_log import FoodLogService
from munchy.services.goals import GoalsService
from munchy.services.insights import InsightsService
from munchy.services.nutrition import NutritionService
from munchy.services.search import SearchGate


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_gateway: AuthGateway
    nutrition_service: NutritionService
    search_gate: SearchGate
    food_log_service: FoodLogService
    goals_service: GoalsService
    insights_service: InsightsService
    agent_service: AgentService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_log_repository = SupabaseFoodLogRepository(supabase_client)
    goals_repository = SupabaseGoalsRepository(supabase_client)
    timezone = resolved_settings.default_timezone

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        data_types=tuple(
            name.strip()
            for name in (resolved_settings.fdc_data_types or "").split(",")
            if name.strip()
        ),
    )
    barcode_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.open_food_facts_base_url
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        barcode_client=barcode_client,
        cache=InMemoryCache(),
        debug=resolved_settings.environment == "local",
    )
    food_log_service = FoodLogService(
        repository=food_log_repository,
        nutrition_service=nutrition_service,
        timezone=timezone,
    )
    goals_service = GoalsService(goals_repository)
    insights_service = InsightsService(
        repository=food_log_repository,
        goals_service=goals_service,
        timezone=timezone,
    )

    agent_client = (
        OpenAIAgentClient.create(
            resolved_settings.agent_api_key, resolved_settings.agent_base_url
        )
        if resolved_settings.agent_api_key
        else None
    )
    web_search_client = (
        HttpxBraveSearchClient.create(resolved_settings.brave_api_key)
        if resolved_settings.brave_api_key
        else None
    )
    agent_service = AgentService(
        client=agent_client,
        model=resolved_settings.agent_model,
        nutrition_service=nutrition_service,
        food_log_service=food_log_service,
        web_search_client=web_search_client,
        max_tool_rounds=resolved_settings.agent_max_tool_rounds,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await barcode_client.close()
        if agent_client is not None:
            await agent_client.close()
        if web_search_client is not None:
            await web_search_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_gateway=SupabaseAuthGateway(supabase_client),
        nutrition_service=nutrition_service,
        search_gate=SearchGate(
            nutrition_service=nutrition_service,
            quiet_period_seconds=resolved_settings.search_debounce_ms / 1000,
        ),
        food_log_service=food_log_service,
        goals_service=goals_service,
        insights_service=insights_service,
        agent_service=agent_service,
        close_resources=close_resources,
    )
