"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from loguru import logger
from starlette.responses import JSONResponse

from src.bookhub.api.http.app_data import ApplicationDependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy", "service": "bookhub-api"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    backend = app_deps.database_service.engine.url.get_backend_name()

    db_healthy = app_deps.database_service.health_check()
    body: dict[str, Any] = {
        "status": "ready" if db_healthy else "not_ready",
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": backend,
                "pool": app_deps.database_service.get_pool_status(),
            }
        },
    }
    if not db_healthy:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(status_code=503, content=body)
    return body
