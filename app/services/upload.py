"""Upload processing service for grade spreadsheets."""

import logging
from collections.abc import Sequence
from typing import Any, Mapping

from app.core.config import Settings
from app.core.exceptions import DuplicateStudentIdError, EmptyFileError
from app.models.student import Student
from app.schemas.upload import UploadSummary
from app.services.rows import compute_percentage, normalize_row, validate_row
from app.services.student_store import StudentStore
from app.services.tabular import decode_upload

logger = logging.getLogger(__name__)


class UploadService:
    """Excel/CSV upload processing service.

    Uploads are all-or-nothing: every row is validated in memory before the
    store is touched, and a successful upload replaces all current students.
    """

    def __init__(self, store: StudentStore, settings: Settings):
        self.store = store
        self.settings = settings

    def build_batch(self, rows: Sequence[Mapping[str, Any]]) -> list[Student]:
        """Validate every row and build the records, failing on the first bad row."""
        if not rows:
            raise EmptyFileError()

        batch: list[Student] = []
        seen_ids: set[str] = set()
        for position, raw in enumerate(rows, start=1):
            normalized = normalize_row(raw, position)
            row = validate_row(
                normalized,
                position,
                enforce_obtained_le_total=self.settings.ENFORCE_OBTAINED_LE_TOTAL,
            )
            if row.student_id in seen_ids:
                raise DuplicateStudentIdError(position, row.student_id)
            seen_ids.add(row.student_id)

            batch.append(
                Student(
                    student_id=row.student_id,
                    student_name=row.student_name,
                    total_marks=row.total,
                    marks_obtained=row.obtained,
                    percentage=compute_percentage(row.total, row.obtained),
                )
            )
        return batch

    def process_upload(
        self,
        file_content: bytes,
        file_name: str,
        content_type: str | None = None,
    ) -> UploadSummary:
        """Decode, validate and persist an upload, replacing all students."""
        logger.info(f"[UPLOAD] Starting upload for file: {file_name} ({len(file_content)} bytes)")

        rows = decode_upload(
            file_content,
            file_name,
            content_type,
            allowed_extensions=self.settings.ALLOWED_EXTENSIONS,
        )
        logger.info(f"[UPLOAD] Parsed {len(rows)} data rows")

        try:
            batch = self.build_batch(rows)
        except Exception as e:
            logger.warning(f"[UPLOAD] Rejected {file_name}: {getattr(e, 'message', e)}")
            raise

        self.store.replace_students(batch)
        self.store.add_upload_history(file_name, len(batch))
        logger.info(f"[UPLOAD] Upload complete - {len(batch)} students stored from {file_name}")

        return UploadSummary(
            message="File uploaded and processed successfully",
            students_count=len(batch),
            filename=file_name,
        )
