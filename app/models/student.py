"""Student grade record model."""

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin

STUDENT_ID_MAX_LENGTH = 100
STUDENT_NAME_MAX_LENGTH = 255


class Student(Base, IDMixin, TimestampMixin):
    """One student's marks, replaced wholesale by each upload."""

    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(STUDENT_ID_MAX_LENGTH), unique=True, nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(STUDENT_NAME_MAX_LENGTH), nullable=False)
    total_marks: Mapped[float] = mapped_column(Float, nullable=False)
    marks_obtained: Mapped[float] = mapped_column(Float, nullable=False)
    # Always derived from total_marks / marks_obtained at write time
    percentage: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, student_id={self.student_id}, percentage={self.percentage})>"
