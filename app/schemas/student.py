"""Student schemas."""

from datetime import datetime

from pydantic import Field, computed_field

from app.models.student import STUDENT_NAME_MAX_LENGTH
from app.schemas.common import BaseSchema, CamelSchema
from app.services.rows import grade_for


class StudentUpdate(BaseSchema):
    """Student update schema. Percentage is never accepted from the client."""

    student_name: str = Field(..., min_length=1, max_length=STUDENT_NAME_MAX_LENGTH)
    total_marks: float = Field(..., gt=0, allow_inf_nan=False)
    marks_obtained: float = Field(..., ge=0, allow_inf_nan=False)


class StudentUpdateById(StudentUpdate):
    """Update payload carrying the record id in the body."""

    id: int


class StudentDeleteRequest(BaseSchema):
    """Delete payload carrying the record id in the body."""

    id: int


class StudentResponse(BaseSchema):
    """Student response schema."""

    id: int
    student_id: str
    student_name: str
    total_marks: float
    marks_obtained: float
    percentage: float
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def grade(self) -> str:
        return grade_for(self.percentage)


class StudentStats(CamelSchema):
    """Aggregate statistics over all current students."""

    total_students: int = 0
    average_percentage: float = 0.0
    pass_count: int = 0
    fail_count: int = 0
    pass_percentage: float = Field(
        default=0.0,
        description="Percentage of students who passed (0-100)",
    )
    top_performer: StudentResponse | None = None
