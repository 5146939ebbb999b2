"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from munchy.api.agent import router as agent_router
from munchy.api.food_logs import router as food_logs_router
from munchy.api.foods import router as foods_router
from munchy.api.goals import router as goals_router
from munchy.api.insights import router as insights_router
from munchy.app_logging import configure_logging
from munchy.config import parse_allowed_origins
from munchy.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Munchy", lifespan=lifespan)
    app.state.container = container

    allowed_origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["*"],
            allow_headers=["Authorization", "Content-Type"],
        )

    app.include_router(food_logs_router)
    app.include_router(foods_router)
    app.include_router(goals_router)
    app.include_router(insights_router)
    app.include_router(agent_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
