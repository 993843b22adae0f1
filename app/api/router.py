"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from app.api.endpoints import health, stats, students, uploads

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])

# Upload and upload history
api_router.include_router(uploads.router, tags=["Uploads"])

# Student directory
api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Students"],
)

# Aggregates for the dashboard
api_router.include_router(stats.router, tags=["Stats"])
