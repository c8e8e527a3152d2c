"""Health check endpoint. No dependencies beyond settings; used for liveness checks."""

from fastapi import APIRouter

from visita.core.config import get_settings
from visita.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(backend=get_settings().database_backend)
