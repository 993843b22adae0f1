"""Upload endpoints for grade spreadsheets."""

from fastapi import APIRouter, File, UploadFile

from app.core.dependencies import AppSettings, Students, Uploads
from app.core.exceptions import FileTooLargeError, NoFileProvidedError
from app.schemas.upload import UploadHistoryResponse, UploadSummary

router = APIRouter()


@router.post("/upload", response_model=UploadSummary)
def upload_grades(
    service: Uploads,
    settings: AppSettings,
    file: UploadFile | None = File(None),
):
    """
    Upload student grades from an Excel or CSV file.

    - Replaces ALL current students on success
    - Any invalid row rejects the whole file; nothing is saved
    - Duplicate student IDs within the file are rejected

    Expected columns (any one spelling each):
    Student_ID | student_id | StudentID | ID,
    Student_Name | student_name | StudentName | Name,
    Total_Marks | total_marks | TotalMarks | MaxMarks,
    Marks_Obtained | marks_obtained | MarksObtained | ObtainedMarks
    """
    if file is None or not file.filename:
        raise NoFileProvidedError()

    content = file.file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(settings.MAX_UPLOAD_SIZE_MB)

    return service.process_upload(
        file_content=content,
        file_name=file.filename,
        content_type=file.content_type,
    )


@router.get("/upload-history", response_model=list[UploadHistoryResponse])
def list_upload_history(service: Students):
    """Most recent uploads, newest first."""
    return service.list_upload_history()
