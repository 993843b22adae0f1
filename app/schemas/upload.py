"""Upload schemas."""

from datetime import datetime

from app.schemas.common import BaseSchema, CamelSchema


class UploadSummary(CamelSchema):
    """Result of a successful upload."""

    message: str
    students_count: int
    filename: str


class UploadHistoryResponse(BaseSchema):
    """Upload history entry."""

    id: int
    filename: str
    students_count: int
    uploaded_at: datetime
