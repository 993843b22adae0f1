"""Database models package."""

from app.models.student import Student
from app.models.upload import UploadHistory

__all__ = [
    "Student",
    "UploadHistory",
]
