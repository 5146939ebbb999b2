"""Goal endpoints."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse  # noqa: TC002

from munchy.api.dependencies import current_user_id, get_container, result_response
from munchy.api.schemas import (  # noqa: TC001
    GoalsCalculateRequest,
    GoalsUpdateRequest,
)
from munchy.containers import AppContainer  # noqa: TC001

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("")
def get_goals(
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Return the user's goals, or the defaults."""
    return result_response(container.goals_service.get_goals(user_id))


@router.put("")
def update_goals(
    payload: GoalsUpdateRequest,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Save the user's goals."""
    return result_response(
        container.goals_service.update_goals(user_id, payload.to_input())
    )


@router.post("/calculate")
def calculate_goals(
    payload: GoalsCalculateRequest,
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Derive BMR, TDEE, a calorie goal and macros from biometrics."""
    return result_response(container.goals_service.calculate(payload.to_inputs()))
