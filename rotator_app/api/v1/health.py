from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from rotator_app.dependencies import get_health_service
from rotator_app.schemas.health import HealthResponse
from rotator_app.services.health_service import HealthService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health_check(health_service: HealthService = Depends(get_health_service)):
    """Used by the central dashboard to test the connection. 503 when degraded."""
    report = health_service.check()
    return JSONResponse(
        status_code=status.HTTP_200_OK if report.healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=report.model_dump(),
    )
