"""Shared request dependencies and result serialization."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Header, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from munchy.containers import AppContainer  # noqa: TC001

if TYPE_CHECKING:
    from munchy.domain.results import ActionResult

_STATUS_BY_CODE = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "invalid": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "upstream": status.HTTP_502_BAD_GATEWAY,
    "unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


def current_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID | None:
    """Resolve the bearer token to a user id; None when absent or invalid."""
    token = bearer_token(authorization)
    if token is None:
        return None
    return get_container(request).auth_gateway.get_user_id(token)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def result_response(result: ActionResult[object]) -> JSONResponse:
    """Serialize a service result with the status code its failure maps to."""
    body: dict[str, object] = {"success": result.success}
    if result.data is not None:
        body["data"] = result.data
    if result.error:
        body["error"] = result.error
    status_code = status.HTTP_200_OK
    if not result.success:
        status_code = _STATUS_BY_CODE.get(
            result.code or "", status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
