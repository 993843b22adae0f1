"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.dependencies import Store
from app.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(store: Store):
    """Health check endpoint for load balancers and monitoring."""
    return HealthResponse(
        status="Server is running",
        timestamp=datetime.now(timezone.utc),
        database="Connected" if store.ping() else "Disconnected",
    )
