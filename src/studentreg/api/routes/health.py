"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from studentreg.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe. Does not touch the store."""
    return HealthResponse(ok=True, time=datetime.now(UTC))
