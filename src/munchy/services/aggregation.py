"""Folding food log entries into daily aggregates and range summaries."""

from munchy.domain.food_log import FoodLogEntry
from munchy.domain.goals import UserGoals
from munchy.domain.insights import DailyAggregate, InsightsSummary
from munchy.services.goals import round_half_up

DEFAULT_CALORIE_GOAL = 2000
ADHERENCE_TOLERANCE = 0.1


def aggregate_by_day(entries: list[FoodLogEntry]) -> list[DailyAggregate]:
    """Sum entries per stored date string, sorted ascending by date.

    Dates without entries are not emitted.
    """
    by_date: dict[str, DailyAggregate] = {}
    for entry in entries:
        current = by_date.get(entry.date) or _empty_day(entry.date)
        by_date[entry.date] = DailyAggregate(
            date=entry.date,
            calories=current.calories + (entry.calories or 0.0),
            protein=current.protein + (entry.protein or 0.0),
            carbohydrates=current.carbohydrates + (entry.carbohydrates or 0.0),
            fat=current.fat + (entry.total_fat or 0.0),
            entry_count=current.entry_count + 1,
        )
    return [by_date[key] for key in sorted(by_date)]


def fill_range(
    dates: list[str], aggregates: list[DailyAggregate]
) -> list[DailyAggregate]:
    """Return one aggregate per date, zero-filled where nothing was logged."""
    by_date = {aggregate.date: aggregate for aggregate in aggregates}
    return [by_date.get(day) or _empty_day(day) for day in dates]


def summarize(
    aggregates: list[DailyAggregate], goals: UserGoals | None
) -> InsightsSummary:
    """Compute averages and goal adherence over the days with data."""
    logged = [aggregate for aggregate in aggregates if aggregate.entry_count > 0]
    days_logged = len(logged)
    if days_logged == 0:
        return InsightsSummary(
            avg_calories=0.0,
            avg_protein=0.0,
            avg_carbs=0.0,
            avg_fat=0.0,
            total_days_logged=0,
            goal_adherence_percent=0,
        )

    adherence = 0
    if goals is not None:
        calorie_goal = goals.calorie_goal or DEFAULT_CALORIE_GOAL
        lower = calorie_goal * (1 - ADHERENCE_TOLERANCE)
        upper = calorie_goal * (1 + ADHERENCE_TOLERANCE)
        within = sum(1 for day in logged if lower <= day.calories <= upper)
        adherence = round_half_up(within / days_logged * 100)

    return InsightsSummary(
        avg_calories=sum(day.calories for day in logged) / days_logged,
        avg_protein=sum(day.protein for day in logged) / days_logged,
        avg_carbs=sum(day.carbohydrates for day in logged) / days_logged,
        avg_fat=sum(day.fat for day in logged) / days_logged,
        total_days_logged=days_logged,
        goal_adherence_percent=adherence,
    )


def _empty_day(day: str) -> DailyAggregate:
    return DailyAggregate(
        date=day, calories=0.0, protein=0.0, carbohydrates=0.0, fat=0.0, entry_count=0
    )
