"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.product_api.api.http.app_data import ApplicationDependencies

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies

    if not app_deps.database_service.health_check():
        return JSONResponse(
            status_code=503,
            content={"error": "Database unavailable"},
        )

    return {
        "status": "ready",
        "database": app_deps.config.database.backend,
    }
