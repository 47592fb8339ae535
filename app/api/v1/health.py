"""Health check endpoint reporting whether Firebase is configured."""

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.firebase import FirebaseHandles, get_firebase
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(handles: FirebaseHandles = Depends(get_firebase)) -> HealthResponse:
    """
    Return service health status and whether backend features are enabled.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        firebase="enabled" if handles.enabled else "disabled",
    )
