"""Student directory endpoints."""

from io import BytesIO

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from app.core.dependencies import Students
from app.schemas.common import MessageResponse
from app.schemas.student import (
    StudentDeleteRequest,
    StudentResponse,
    StudentUpdate,
    StudentUpdateById,
)

router = APIRouter()


@router.get("", response_model=list[StudentResponse])
def list_students(service: Students):
    """List all students, newest first."""
    return service.list_students()


@router.get("/template")
def download_template(service: Students):
    """Download an Excel template with the expected columns."""
    content = service.generate_template()

    return StreamingResponse(
        BytesIO(content),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=student_grades_template.xlsx"},
    )


@router.put("/{record_id}", response_model=StudentResponse)
def update_student(record_id: int, request: StudentUpdate, service: Students):
    """Update a student's name and marks."""
    return service.update_student(record_id, request)


@router.post("/update", response_model=StudentResponse)
def update_student_by_body(request: StudentUpdateById, service: Students):
    """Update a student, id given in the body."""
    return service.update_student(request.id, request)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_student(record_id: int, service: Students):
    """Delete a student."""
    service.delete_student(record_id)
    return MessageResponse(message="Student deleted successfully")


@router.post("/delete", response_model=MessageResponse)
def delete_student_by_body(request: StudentDeleteRequest, service: Students):
    """Delete a student, id given in the body."""
    service.delete_student(request.id)
    return MessageResponse(message="Student deleted successfully")
