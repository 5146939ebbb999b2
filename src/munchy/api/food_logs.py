"""Food log and meal endpoints."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse  # noqa: TC002

from munchy.api.dependencies import current_user_id, get_container, result_response
from munchy.api.schemas import (  # noqa: TC001
    FoodLogCreateRequest,
    FoodLogUpdateRequest,
    ServingLogRequest,
)
from munchy.containers import AppContainer  # noqa: TC001

router = APIRouter(prefix="/api", tags=["food-logs"])


@router.get("/food-logs")
def list_food_logs(
    date: str | None = None,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return the user's entries for a date, today by default."""
    service = container.food_log_service
    return result_response(
        service.get_entries_for_date(user_id, date or service.today())
    )


@router.get("/food-logs/today")
def list_today_food_logs(
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return the user's entries for today."""
    return result_response(container.food_log_service.get_today_entries(user_id))


@router.post("/food-logs")
def create_food_log(
    payload: FoodLogCreateRequest,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Log an entry whose nutrients the client already scaled."""
    return result_response(
        container.food_log_service.log_entry(user_id, payload.to_input())
    )


@router.post("/food-logs/serving")
async def create_food_log_from_serving(
    payload: ServingLogRequest,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Look a food up, scale it to the serving and log it."""
    result = await container.food_log_service.log_serving(
        user_id,
        meal_name=payload.meal_name,
        serving_amount=payload.serving_amount,
        serving_unit=payload.serving_unit,
        fdc_id=payload.fdc_id,
        barcode=payload.barcode,
        day=payload.date,
    )
    return result_response(result)


@router.patch("/food-logs/{entry_id}")
async def update_food_log(
    entry_id: UUID,
    payload: FoodLogUpdateRequest,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Change an entry's serving and recompute its nutrients."""
    result = await container.food_log_service.update_entry(
        user_id, entry_id, payload.to_update()
    )
    return result_response(result)


@router.delete("/food-logs/{entry_id}")
def delete_food_log(
    entry_id: UUID,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Delete one of the user's entries."""
    return result_response(container.food_log_service.delete_entry(user_id, entry_id))


@router.get("/meals")
def meal_summary(
    date: str | None = None,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return a day's entries grouped by meal name."""
    service = container.food_log_service
    return result_response(service.get_meal_summary(user_id, date or service.today()))
