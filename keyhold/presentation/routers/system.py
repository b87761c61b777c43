"""System router for non-versioned application endpoints.

These endpoints are lightweight and side-effect free to support health
checks from load balancers and orchestrators.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from keyhold.core.config import get_settings
from keyhold.core.container import get_database
from keyhold.schemas.response_schemas import HealthResponse

system_router = APIRouter(tags=["System"])


@system_router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse | JSONResponse:
    """Health check endpoint.

    Returns 200 when the database answers, 503 otherwise.
    """
    settings = get_settings()
    database_ok = await get_database().check_connection()
    body = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        version=settings.app_version,
        database="ok" if database_ok else "unavailable",
    )
    if not database_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )
    return body
