"""Daily, weekly and monthly nutrition insights."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from munchy.domain.dates import (
    date_range,
    days_in_month,
    format_local_date,
    start_of_week,
    today_in,
)
from munchy.domain.food_log import FoodLogEntry
from munchy.domain.goals import UserGoals
from munchy.domain.insights import InsightsData
from munchy.domain.results import ActionResult
from munchy.services.aggregation import aggregate_by_day, fill_range, summarize
from munchy.services.food_log import FoodLogRepository
from munchy.services.goals import GoalsService

MAX_DAYS = 366
MAX_WEEKS = 53

_logger = logging.getLogger(__name__)


@dataclass
class InsightsService:
    """Builds gap-filled daily aggregates and summaries for a date range."""

    repository: FoodLogRepository
    goals_service: GoalsService
    timezone: str = "UTC"

    async def get_daily_insights(
        self, user_id: UUID | None, days: int = 7, today: date | None = None
    ) -> ActionResult[InsightsData]:
        """Insights for the last ``days`` calendar days ending today."""
        if user_id is None:
            return ActionResult.unauthenticated()
        if not 1 <= days <= MAX_DAYS:
            return ActionResult.fail(
                f"days must be between 1 and {MAX_DAYS}", code="invalid"
            )
        end = today or today_in(self.timezone)
        start = end - timedelta(days=days - 1)
        return await self._build(user_id, start, end, "Failed to fetch insights data")

    async def get_weekly_insights(
        self, user_id: UUID | None, weeks: int = 4, today: date | None = None
    ) -> ActionResult[InsightsData]:
        """Insights for ``weeks`` Sunday-aligned weeks, the current one last."""
        if user_id is None:
            return ActionResult.unauthenticated()
        if not 1 <= weeks <= MAX_WEEKS:
            return ActionResult.fail(
                f"weeks must be between 1 and {MAX_WEEKS}", code="invalid"
            )
        current_week = start_of_week(today or today_in(self.timezone))
        start = current_week - timedelta(weeks=weeks - 1)
        end = current_week + timedelta(days=6)
        return await self._build(
            user_id, start, end, "Failed to fetch weekly insights data"
        )

    async def get_monthly_insights(
        self,
        user_id: UUID | None,
        year: int | None = None,
        month: int | None = None,
        today: date | None = None,
    ) -> ActionResult[InsightsData]:
        """Insights for every day of one calendar month."""
        if user_id is None:
            return ActionResult.unauthenticated()
        current = today or today_in(self.timezone)
        target_year = year or current.year
        target_month = month or current.month
        try:
            start = date(target_year, target_month, 1)
        except ValueError:
            return ActionResult.fail("Invalid year or month", code="invalid")
        end = start.replace(day=days_in_month(target_year, target_month))
        return await self._build(
            user_id, start, end, "Failed to fetch monthly insights data"
        )

    async def _build(
        self, user_id: UUID, start: date, end: date, failure_message: str
    ) -> ActionResult[InsightsData]:
        start_date = format_local_date(start)
        end_date = format_local_date(end)
        try:
            entries, goals = await asyncio.gather(
                asyncio.to_thread(self._fetch_entries, user_id, start_date, end_date),
                asyncio.to_thread(self._fetch_goals, user_id),
            )
            aggregates = fill_range(
                date_range(start, end), aggregate_by_day(entries)
            )
            summary = summarize(aggregates, goals)
        except Exception:
            _logger.exception("Error building insights %s..%s", start_date, end_date)
            return ActionResult.fail(failure_message)
        return ActionResult.ok(
            InsightsData(
                start_date=start_date,
                end_date=end_date,
                aggregates=aggregates,
                goals=goals,
                summary=summary,
            )
        )

    def _fetch_entries(
        self, user_id: UUID, start_date: str, end_date: str
    ) -> list[FoodLogEntry]:
        """Return the range's entries, or an empty list if the store fails."""
        try:
            return self.repository.list_for_range(user_id, start_date, end_date)
        except Exception:
            _logger.exception("Error fetching food logs for range")
            return []

    def _fetch_goals(self, user_id: UUID) -> UserGoals | None:
        """Return the user's goals, or None if they could not be read."""
        result = self.goals_service.get_goals(user_id)
        return result.data if result.success else None
