"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.services.student import StudentService
from app.services.student_store import StudentStore
from app.services.upload import UploadService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_student_store(db: Annotated[Session, Depends(get_db)]) -> StudentStore:
    return StudentStore(db)


def get_upload_service(
    store: Annotated[StudentStore, Depends(get_student_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UploadService:
    return UploadService(store, settings)


def get_student_service(
    store: Annotated[StudentStore, Depends(get_student_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StudentService:
    return StudentService(store, settings)


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Store = Annotated[StudentStore, Depends(get_student_store)]
Uploads = Annotated[UploadService, Depends(get_upload_service)]
Students = Annotated[StudentService, Depends(get_student_service)]
