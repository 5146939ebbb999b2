"""Domain models for nutrition insights."""

from dataclasses import dataclass

from munchy.domain.goals import UserGoals


@dataclass(frozen=True)
class DailyAggregate:
    """Totals for one calendar date."""

    date: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    entry_count: int


@dataclass(frozen=True)
class InsightsSummary:
    """Averages and goal adherence over the days that have data."""

    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float
    total_days_logged: int
    goal_adherence_percent: int


@dataclass(frozen=True)
class InsightsData:
    """A gap-filled range of daily aggregates with its summary."""

    start_date: str
    end_date: str
    aggregates: list[DailyAggregate]
    goals: UserGoals | None
    summary: InsightsSummary
