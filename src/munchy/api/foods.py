"""Food search, nutrition detail and barcode endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from munchy.api.dependencies import current_user_id, get_container, result_response
from munchy.containers import AppContainer  # noqa: TC001
from munchy.domain.errors import FoodLookupError, FoodNotFoundError
from munchy.domain.results import ActionResult

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from munchy.domain.nutrition import NutritionalData

router = APIRouter(prefix="/api/foods", tags=["foods"])


@router.get("/search")
async def search_foods(
    request: Request,
    q: str = "",
    limit: int = 20,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Search-as-you-type; superseded requests come back marked stale."""
    caller = str(user_id) if user_id else _client_host(request)
    try:
        foods = await container.search_gate.search(caller, q, limit=limit)
    except FoodLookupError as exc:
        return result_response(ActionResult.fail(str(exc), code="upstream"))
    if foods is None:
        return JSONResponse(content={"success": True, "data": [], "stale": True})
    return result_response(ActionResult.ok(foods))


@router.get("/barcode/{code}")
async def lookup_barcode(
    code: str, container: AppContainer = Depends(get_container)
) -> JSONResponse:
    """Return nutrition for a decoded product barcode."""
    return result_response(
        await _lookup(container.nutrition_service.lookup_barcode(code))
    )


@router.get("/{fdc_id}")
async def get_food(
    fdc_id: int, container: AppContainer = Depends(get_container)
) -> JSONResponse:
    """Return per-serving nutrition for an FDC food."""
    return result_response(await _lookup(container.nutrition_service.get_food(fdc_id)))


async def _lookup(
    pending: Awaitable[NutritionalData],
) -> ActionResult[NutritionalData]:
    try:
        food = await pending
    except ValueError as exc:
        return ActionResult.fail(str(exc), code="invalid")
    except FoodNotFoundError as exc:
        return ActionResult.fail(str(exc), code="not_found")
    except FoodLookupError as exc:
        return ActionResult.fail(str(exc), code="upstream")
    return ActionResult.ok(food)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "anonymous"
