"""Insights endpoints."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse  # noqa: TC002

from munchy.api.dependencies import current_user_id, get_container, result_response
from munchy.containers import AppContainer  # noqa: TC001

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/daily")
async def daily_insights(
    days: int = 7,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return the last ``days`` days of totals."""
    result = await container.insights_service.get_daily_insights(user_id, days)
    return result_response(result)


@router.get("/weekly")
async def weekly_insights(
    weeks: int = 4,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return ``weeks`` Sunday-aligned weeks of totals."""
    result = await container.insights_service.get_weekly_insights(user_id, weeks)
    return result_response(result)


@router.get("/monthly")
async def monthly_insights(
    year: int | None = None,
    month: int | None = None,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return every day of one calendar month."""
    result = await container.insights_service.get_monthly_insights(
        user_id, year, month
    )
    return result_response(result)
