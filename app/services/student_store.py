"""Storage client for student records and upload history."""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.models.student import Student
from app.models.upload import FILENAME_MAX_LENGTH, UploadHistory

logger = logging.getLogger(__name__)


class StudentStore:
    """Thin data-access layer over one database session.

    The session's transaction is owned by the caller (the request dependency
    commits or rolls back), so a failed replace never leaves a half-written
    batch behind.
    """

    def __init__(self, db: Session):
        self.db = db

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            self.db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("[STORE] Database ping failed", exc_info=True)
            return False

    def clear_students(self) -> int:
        result = self.db.execute(delete(Student))
        return result.rowcount or 0

    def insert_students(self, records: Sequence[Student]) -> None:
        self.db.add_all(records)
        self.db.flush()

    def replace_students(self, records: Sequence[Student]) -> None:
        """Remove every student, then insert the new batch in order."""
        try:
            removed = self.clear_students()
            self.insert_students(records)
        except IntegrityError as e:
            logger.error(f"[STORE] Replace failed after clearing students: {e.orig}")
            raise PersistenceError(
                "Failed to save students. Please upload the file again.",
                details={"reason": str(e.orig)},
            )
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Replace failed: {e}")
            raise PersistenceError("Failed to save students. Please upload the file again.")
        logger.info(f"[STORE] Replaced {removed} students with {len(records)} new records")

    def add_upload_history(self, filename: str, students_count: int) -> UploadHistory:
        entry = UploadHistory(
            filename=filename[:FILENAME_MAX_LENGTH],
            students_count=students_count,
        )
        self.db.add(entry)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Failed to record upload history: {e}")
            raise PersistenceError("Failed to record upload history")
        self.db.refresh(entry)
        return entry

    def list_students(self) -> list[Student]:
        result = self.db.execute(
            select(Student).order_by(Student.created_at.desc(), Student.id.desc())
        )
        return list(result.scalars().all())

    def get_student(self, record_id: int) -> Student | None:
        return self.db.get(Student, record_id)

    def save_student(self, student: Student) -> Student:
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Failed to save student {student.id}: {e}")
            raise PersistenceError("Failed to update student")
        self.db.refresh(student)
        return student

    def delete_student(self, student: Student) -> None:
        self.db.delete(student)
        self.db.flush()

    def recent_uploads(self, limit: int) -> list[UploadHistory]:
        result = self.db.execute(
            select(UploadHistory)
            .order_by(UploadHistory.uploaded_at.desc(), UploadHistory.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
