"""Assistant chat endpoint."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse  # noqa: TC002

from munchy.api.dependencies import current_user_id, get_container, result_response
from munchy.api.schemas import AgentRequest  # noqa: TC001
from munchy.containers import AppContainer  # noqa: TC001

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.post("")
async def run_agent(
    payload: AgentRequest,
    user_id: UUID | None = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> JSONResponse:
    """Send a message to the assistant and return the new transcript entries."""
    result = await container.agent_service.run(
        user_id, payload.message, payload.previous_response_id
    )
    return result_response(result)
