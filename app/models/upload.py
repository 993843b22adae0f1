"""Upload tracking models."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.base import IDMixin, utcnow

FILENAME_MAX_LENGTH = 255


class UploadHistory(Base, IDMixin):
    """Append-only log of successful uploads."""

    __tablename__ = "upload_history"

    filename: Mapped[str] = mapped_column(String(FILENAME_MAX_LENGTH), nullable=False)
    students_count: Mapped[int] = mapped_column(Integer, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UploadHistory(id={self.id}, filename={self.filename}, count={self.students_count})>"
