"""Dashboard statistics endpoint."""

from fastapi import APIRouter

from app.core.dependencies import Students
from app.schemas.student import StudentStats

router = APIRouter()


@router.get("/stats", response_model=StudentStats)
def get_stats(service: Students):
    """Student count, average percentage, pass rate and top performer."""
    return service.get_stats()
