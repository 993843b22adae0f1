"""Student directory service."""

import logging
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from app.core.config import Settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.student import Student
from app.schemas.student import StudentResponse, StudentStats, StudentUpdate
from app.schemas.upload import UploadHistoryResponse
from app.services.rows import COLUMN_ALIASES, compute_percentage
from app.services.student_store import StudentStore

logger = logging.getLogger(__name__)


# First alias of each canonical field is the preferred header spelling
TEMPLATE_HEADERS = [aliases[0] for aliases in COLUMN_ALIASES.values()]
TEMPLATE_SAMPLE_ROWS = [
    ["S501", "Quinn Flores", 100, 100],
    ["S502", "Morgan Nguyen", 100, 52],
]


class StudentService:
    """List, edit and summarize stored student records."""

    def __init__(self, store: StudentStore, settings: Settings):
        self.store = store
        self.settings = settings

    def list_students(self) -> list[StudentResponse]:
        """All students, newest first."""
        return [StudentResponse.model_validate(s) for s in self.store.list_students()]

    def get_student(self, record_id: int) -> Student:
        """Get student by ID."""
        student = self.store.get_student(record_id)
        if not student:
            raise NotFoundError("Student", str(record_id))
        return student

    def update_student(self, record_id: int, request: StudentUpdate) -> StudentResponse:
        """Update name and marks; percentage is recomputed from the new marks."""
        student = self.get_student(record_id)

        if self.settings.ENFORCE_OBTAINED_LE_TOTAL and request.marks_obtained > request.total_marks:
            raise ValidationError(
                "Marks obtained cannot exceed total marks",
                details={
                    "marks_obtained": request.marks_obtained,
                    "total_marks": request.total_marks,
                },
            )

        student.student_name = request.student_name
        student.total_marks = request.total_marks
        student.marks_obtained = request.marks_obtained
        student.percentage = compute_percentage(request.total_marks, request.marks_obtained)
        self.store.save_student(student)

        logger.info(f"[STUDENTS] Updated {student.student_id}: {student.percentage}%")
        return StudentResponse.model_validate(student)

    def delete_student(self, record_id: int) -> None:
        """Delete a student."""
        student = self.get_student(record_id)
        self.store.delete_student(student)
        logger.info(f"[STUDENTS] Deleted {student.student_id}")

    def list_upload_history(self) -> list[UploadHistoryResponse]:
        """Most recent uploads, newest first."""
        entries = self.store.recent_uploads(self.settings.UPLOAD_HISTORY_LIMIT)
        return [UploadHistoryResponse.model_validate(e) for e in entries]

    def get_stats(self) -> StudentStats:
        """Class-wide count, average and pass rate."""
        students = self.store.list_students()
        if not students:
            return StudentStats()

        total = len(students)
        pass_count = sum(1 for s in students if s.percentage >= self.settings.PASS_PERCENTAGE)
        average = sum(s.percentage for s in students) / total
        # max() keeps the first of equal scores; list is newest first
        top = max(students, key=lambda s: s.percentage)

        return StudentStats(
            total_students=total,
            average_percentage=round(average, 2),
            pass_count=pass_count,
            fail_count=total - pass_count,
            pass_percentage=round(pass_count / total * 100, 2),
            top_performer=StudentResponse.model_validate(top),
        )

    def generate_template(self) -> bytes:
        """Generate Excel template for grade upload."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Students"

        ws.append(TEMPLATE_HEADERS)
        for cell in ws[1]:
            cell.font = Font(bold=True)

        for row in TEMPLATE_SAMPLE_ROWS:
            ws.append(row)

        for column, width in zip("ABCD", [15, 30, 15, 18]):
            ws.column_dimensions[column].width = width

        output = BytesIO()
        wb.save(output)
        return output.getvalue()
