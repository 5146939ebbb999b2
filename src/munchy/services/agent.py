"""Conversational food-logging agent with tool calling."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from munchy.domain.agent import AgentReply, AgentTurn, DisplayMessage
from munchy.domain.food_log import FoodLogEntry
from munchy.domain.results import ActionResult
from munchy.services.food_log import FoodLogService
from munchy.services.nutrition import NutritionService

AGENT_NAME = "Munchy"

AGENT_TOOLS: list[dict[str, object]] = [
    {
        "type": "function",
        "name": "search_foods",
        "description": (
            "Search for foods in the USDA FoodData Central database by name or "
            "description. Returns matching foods with their FDC IDs, "
            "descriptions, brand names and serving sizes. Use this to find "
            "foods before getting nutrition info or logging them."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Food name to search for, e.g. 'chicken breast'",
                },
                "pageSize": {
                    "type": "integer",
                    "description": "Number of results to request (default 10)",
                },
            },
            "required": ["query"],
        },
    },
    {
        "type": "function",
        "name": "get_food_nutrition",
        "description": (
            "Get nutritional information for a food by FDC ID: serving size, "
            "calories, protein, carbohydrates and fat per serving. Always "
            "search for foods first to get the FDC ID."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "fdcId": {"type": "integer", "description": "FoodData Central ID"},
            },
            "required": ["fdcId"],
        },
    },
    {
        "type": "function",
        "name": "log_food",
        "description": (
            "Log a food to the user's daily food log. Calories and macros are "
            "computed from the food record for the given serving. Use the "
            "meal name the user gives (Breakfast, Lunch, Dinner or custom)."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "meal_name": {"type": "string"},
                "food_fdc_id": {"type": "integer"},
                "serving_amount": {
                    "type": "number",
                    "description": "Amount in serving_unit, e.g. 2 servings or 150 g",
                },
                "serving_unit": {
                    "type": "string",
                    "description": "Unit such as 'serving', 'g', 'oz' or 'cup'",
                },
                "date": {
                    "type": "string",
                    "description": "Date in YYYY-MM-DD format; defaults to today",
                },
            },
            "required": [
                "meal_name",
                "food_fdc_id",
                "serving_amount",
                "serving_unit",
            ],
        },
    },
    {
        "type": "function",
        "name": "get_daily_log",
        "description": (
            "Get the user's food log for a date, grouped by meal, with daily "
            "totals. Use this to answer questions about what the user ate."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "date": {"type": "string", "description": "Date in YYYY-MM-DD"},
            },
            "required": ["date"],
        },
    },
    {
        "type": "function",
        "name": "web_search",
        "description": (
            "Search the web for general nutrition, health or food questions "
            "that the other tools do not cover."
        ),
        "parameters": {
            "type": "object",
            "properties": {"query": {"type": "string"}},
            "required": ["query"],
        },
    },
]

_logger = logging.getLogger(__name__)


class AgentClient(Protocol):
    """Interface for a tool-calling language model endpoint."""

    async def respond(
        self,
        *,
        model: str,
        instructions: str,
        input_items: str | list[dict[str, object]],
        tools: list[dict[str, object]],
        previous_response_id: str | None,
    ) -> AgentTurn:
        """Run one model turn and return its tool calls or final text."""


class WebSearchClient(Protocol):
    """Interface for web search."""

    async def search(self, query: str, count: int = 5) -> list[dict[str, str]]:
        """Return title/description/url results for a query."""


@dataclass
class AgentService:
    """Runs the agent loop and executes its tools against the user's log."""

    client: AgentClient | None
    model: str
    nutrition_service: NutritionService
    food_log_service: FoodLogService
    web_search_client: WebSearchClient | None = None
    max_tool_rounds: int = 8

    async def run(
        self,
        user_id: UUID | None,
        message: str,
        previous_response_id: str | None = None,
    ) -> ActionResult[AgentReply]:
        """Send a user message and return the new transcript entries."""
        if user_id is None:
            return ActionResult.unauthenticated()
        if self.client is None:
            return ActionResult.fail(
                "The assistant is not configured. Set AGENT_API_KEY.",
                code="unavailable",
            )
        if not message.strip():
            return ActionResult.fail("Message cannot be empty", code="invalid")

        transcript: list[DisplayMessage] = []
        try:
            turn = await self.client.respond(
                model=self.model,
                instructions=self._instructions(),
                input_items=message,
                tools=AGENT_TOOLS,
                previous_response_id=previous_response_id,
            )
            rounds = 0
            while turn.tool_calls and rounds < self.max_tool_rounds:
                rounds += 1
                outputs: list[dict[str, object]] = []
                for call in turn.tool_calls:
                    arguments = _parse_arguments(call.arguments)
                    result = await self._execute_tool(user_id, call.name, arguments)
                    transcript.append(
                        DisplayMessage(
                            role="tool",
                            content="",
                            tool_name=call.name,
                            tool_args=arguments,
                            tool_result=result,
                        )
                    )
                    outputs.append(
                        {
                            "type": "function_call_output",
                            "call_id": call.call_id,
                            "output": result,
                        }
                    )
                turn = await self.client.respond(
                    model=self.model,
                    instructions=self._instructions(),
                    input_items=outputs,
                    tools=AGENT_TOOLS,
                    previous_response_id=turn.response_id,
                )
        except Exception as exc:
            _logger.exception("Agent error")
            return ActionResult(
                success=False,
                data=AgentReply(
                    response_id=None,
                    messages=[DisplayMessage(role="user", content=message)],
                ),
                error=str(exc) or "An unexpected error occurred",
                code="upstream",
            )

        if turn.output_text:
            transcript.append(
                DisplayMessage(role="assistant", content=turn.output_text)
            )
        return ActionResult.ok(
            AgentReply(response_id=turn.response_id, messages=transcript)
        )

    def _instructions(self) -> str:
        today = self.food_log_service.today()
        return (
            f"You are {AGENT_NAME}, a friendly assistant that helps users track "
            "their food and nutrition.\n\n"
            "You can search the USDA food database, get nutrition details, log "
            "foods to the user's daily food log, read the log for any date and "
            "search the web for nutrition and health questions.\n\n"
            "When logging food: search for the food to find its FDC ID, check "
            "its nutrition and serving size, then log it with the meal and "
            "serving the user asked for.\n\n"
            f"When the user asks what they ate, use get_daily_log with today's "
            f"date ({today}) unless they name another date.\n\n"
            "Be concise and encouraging."
        )

    async def _execute_tool(
        self, user_id: UUID, name: str, arguments: dict[str, object]
    ) -> str:
        """Run a tool and return its result as text for the model."""
        try:
            if name == "search_foods":
                return await self._search_foods(arguments)
            if name == "get_food_nutrition":
                return await self._get_food_nutrition(arguments)
            if name == "log_food":
                return await self._log_food(user_id, arguments)
            if name == "get_daily_log":
                return self._get_daily_log(user_id, arguments)
            if name == "web_search":
                return await self._web_search(arguments)
        except Exception as exc:
            _logger.warning("Agent tool %s failed: %s", name, exc)
            return f"Error running {name}: {exc}"
        return f"Unknown tool: {name}"

    async def _search_foods(self, arguments: dict[str, object]) -> str:
        query = str(arguments.get("query") or "")
        page_size = int(arguments.get("pageSize") or 10)
        results = await self.nutrition_service.search(query, limit=page_size)
        if not results:
            return f'No foods found matching "{query}". Try a different search term.'
        return json.dumps(
            [
                {
                    "fdcId": food.fdc_id,
                    "description": food.description,
                    "brandName": food.brand_name,
                    "brandOwner": food.brand_owner,
                    "dataType": food.data_type,
                    "servingSize": food.serving_size,
                    "servingSizeUnit": food.serving_size_unit,
                }
                for food in results[:5]
            ],
            indent=2,
        )

    async def _get_food_nutrition(self, arguments: dict[str, object]) -> str:
        food = await self.nutrition_service.get_food(int(arguments.get("fdcId") or 0))
        return json.dumps(
            {
                "description": food.description,
                "brandName": food.brand_name,
                "servingSize": food.serving_size,
                "servingSizeUnit": food.serving_size_unit,
                "calories": round(food.calories),
                "protein": _round_tenth(food.protein.amount if food.protein else None),
                "carbohydrates": _round_tenth(
                    food.carbohydrates.amount if food.carbohydrates else None
                ),
                "fat": _round_tenth(food.total_fat.amount if food.total_fat else None),
            },
            indent=2,
        )

    async def _log_food(self, user_id: UUID, arguments: dict[str, object]) -> str:
        meal_name = str(arguments.get("meal_name") or "Snack")
        result = await self.food_log_service.log_serving(
            user_id,
            meal_name=meal_name,
            serving_amount=float(arguments.get("serving_amount") or 0),
            serving_unit=str(arguments.get("serving_unit") or "serving"),
            fdc_id=int(arguments.get("food_fdc_id") or 0),
            day=str(arguments["date"]) if arguments.get("date") else None,
        )
        if result.success and result.data is not None:
            entry = result.data
            return (
                f"Successfully logged {entry.food_description} to {meal_name} "
                f"({round(entry.calories)} cal)!"
            )
        return f"Failed to log food: {result.error}"

    def _get_daily_log(self, user_id: UUID, arguments: dict[str, object]) -> str:
        day = str(arguments.get("date") or self.food_log_service.today())
        result = self.food_log_service.get_meal_summary(user_id, day)
        if not result.success:
            return f"Error getting logs: {result.error}"
        grouped = result.data or {}
        if not grouped:
            return f"No foods logged for {day}."
        return _format_daily_log(day, grouped)

    async def _web_search(self, arguments: dict[str, object]) -> str:
        if self.web_search_client is None:
            return "Web search is not configured. BRAVE_API_KEY is missing."
        query = str(arguments.get("query") or "")
        results = await self.web_search_client.search(query, count=5)
        if not results:
            return f'No results found for "{query}".'
        return "\n\n".join(
            f"**{result['title']}**\n{result['description']}\n{result['url']}"
            for result in results
        )


def _parse_arguments(raw: str) -> dict[str, object]:
    try:
        parsed = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _round_tenth(value: float | None) -> float | None:
    if not value:
        return None
    return round(value, 1)


def _format_daily_log(day: str, grouped: dict[str, list[FoodLogEntry]]) -> str:
    sections = []
    calories = protein = carbs = fat = 0.0
    for meal, entries in grouped.items():
        meal_calories = sum(entry.calories for entry in entries)
        lines = [f"{meal} ({round(meal_calories)} cal):"]
        for entry in entries:
            lines.append(
                f"  - {entry.food_description} ({round(entry.calories)} cal)"
            )
            calories += entry.calories
            protein += entry.protein or 0.0
            carbs += entry.carbohydrates or 0.0
            fat += entry.total_fat or 0.0
        sections.append("\n".join(lines))
    body = "\n\n".join(sections)
    return (
        f"Food log for {day}:\n\n{body}\n\n"
        f"Daily Totals: {round(calories)} calories, {round(protein)}g protein, "
        f"{round(carbs)}g carbs, {round(fat)}g fat"
    )
