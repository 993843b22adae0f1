"""Custom exception classes and error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": code,
                    "message": message,
                    "details": details or {},
                },
            },
        )


class UploadError(AppException):
    """File upload failed."""

    def __init__(
        self,
        message: str = "Upload failed",
        code: str = "UPLOAD_FAILED",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            message=message,
            details=details,
        )


class NoFileProvidedError(UploadError):
    """Request carried no file."""

    def __init__(self):
        super().__init__("No file uploaded", code="NO_FILE_PROVIDED")


class UnsupportedMediaTypeError(UploadError):
    """File is neither a spreadsheet nor delimited text."""

    def __init__(self, filename: str | None = None, content_type: str | None = None):
        super().__init__(
            "Only .xlsx and .csv files are allowed",
            code="UNSUPPORTED_MEDIA_TYPE",
            details={"filename": filename, "content_type": content_type},
        )


class FileTooLargeError(UploadError):
    """File exceeds the configured upload size."""

    def __init__(self, limit_mb: int):
        super().__init__(
            f"File too large. Maximum size is {limit_mb}MB.",
            code="FILE_TOO_LARGE",
            details={"limit_mb": limit_mb},
        )


class DecodeError(UploadError):
    """File bytes could not be read as a table."""

    def __init__(self, message: str = "Invalid file format. Please upload a valid Excel or CSV file."):
        super().__init__(message, code="DECODE_FAILED")


class EmptyFileError(UploadError):
    """File decoded to zero data rows."""

    def __init__(self):
        super().__init__("File is empty or contains no valid data", code="EMPTY_FILE")


class MissingFieldError(UploadError):
    """A required column has no value in a row."""

    def __init__(self, row: int, field: str):
        self.row = row
        self.field = field
        super().__init__(
            f"Missing required data in row {row}. "
            "Required columns: Student_ID, Student_Name, Total_Marks, Marks_Obtained",
            code="MISSING_FIELD",
            details={"row": row, "column": field},
        )


class InvalidRowError(UploadError):
    """A row failed a validation rule."""

    def __init__(self, row: int, reason: str, value: Any = None):
        self.row = row
        self.reason = reason
        details: dict[str, Any] = {"row": row, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid marks data in row {row}: {reason}",
            code="INVALID_ROW",
            details=details,
        )


class DuplicateStudentIdError(UploadError):
    """A student ID appears more than once in one upload."""

    def __init__(self, row: int, student_id: str):
        self.row = row
        self.student_id = student_id
        super().__init__(
            f"Duplicate student ID '{student_id}' in row {row}",
            code="DUPLICATE_STUDENT_ID",
            details={"row": row, "student_id": student_id},
        )


class ValidationError(AppException):
    """Data validation failed."""

    def __init__(
        self,
        message: str = "Validation error",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str = "Resource",
        identifier: str | None = None,
    ):
        details = {}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="NOT_FOUND",
            message=f"{resource} not found",
            details=details,
        )


class PersistenceError(AppException):
    """The database rejected a write."""

    def __init__(
        self,
        message: str = "Failed to save data",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="PERSISTENCE_FAILED",
            message=message,
            details=details,
        )
