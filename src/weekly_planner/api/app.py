"""FastAPI application factory."""

from fastapi import FastAPI

from weekly_planner.api.planned_weeks import router as planned_weeks_router
from weekly_planner.app_logging import configure_logging
from weekly_planner.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    app = FastAPI()
    app.state.container = container

    app.include_router(planned_weeks_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
