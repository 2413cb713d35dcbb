"""
Student Routes (all require an admin bearer token)

GET /students - Paginated list with optional search and level filter
GET /students/export - Download all students as CSV
POST /students/import - Bulk create from an uploaded CSV
GET /students/{student_id} - Get one student
POST /students - Create student
PUT /students/{student_id} - Update student
DELETE /students/{student_id} - Delete student
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response

from app.core.auth import get_current_admin
from app.core.container import get_student_service
from app.core.exceptions import InternalError, RosterError, ValidationError
from app.core.tokens import Principal
from app.models import Level
from app.schemas.schemas import (
    ApiResponse,
    ImportSummary,
    SortDirection,
    StudentPage,
    StudentRequest,
    StudentResponse,
)
from app.services.student_service import StudentService
from app.utils.file_upload import read_text_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])

# page and size are 32-bit signed so page * size always fits a 64-bit OFFSET
MAX_QUERY_INT = 2**31 - 1

UNAUTHORIZED = {401: {"description": "Unauthorized - Invalid or missing JWT token"}}


@router.get("", response_model=ApiResponse[StudentPage], responses=UNAUTHORIZED)
def list_students(
    page: int = Query(0, ge=0, le=MAX_QUERY_INT),
    size: int = Query(10, ge=1, le=MAX_QUERY_INT),
    sort_by: str = Query("id", alias="sortBy"),
    direction: str = Query("ASC", description="ASC or DESC"),
    search: Optional[str] = Query(None, description="Substring of username or id"),
    level: Optional[Level] = None,
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Get paginated list of all students with optional search and filter."""
    try:
        sort_direction = SortDirection.parse(direction)
    except ValueError:
        raise ValidationError(f"Invalid sort direction: {direction}") from None

    try:
        result = service.list_students(
            page=page,
            size=size,
            sort_by=sort_by,
            direction=sort_direction,
            search=search,
            level=level,
        )
    except RosterError:
        raise
    except Exception as e:
        logger.exception("Listing students failed for %s", admin.subject)
        raise InternalError("Error retrieving students") from e

    return ApiResponse.ok(StudentPage(
        content=[StudentResponse.model_validate(s) for s in result.content],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    ))


@router.get(
    "/export",
    response_class=PlainTextResponse,
    responses={200: {"content": {"text/csv": {}}}, **UNAUTHORIZED},
)
def export_students(
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Export all students to CSV, ordered by id."""
    try:
        csv_text = service.export_csv()
    except Exception:
        logger.exception("Export failed for %s", admin.subject)
        return PlainTextResponse("Error exporting students", status_code=500)

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=students.csv"},
    )


@router.post(
    "/import",
    response_model=ApiResponse[ImportSummary],
    responses={400: {"description": "Invalid CSV file format"}, **UNAUTHORIZED},
)
async def import_students(
    file: UploadFile = File(..., description="CSV with a header line, then username,level rows"),
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """
    Import students from a CSV file.

    Existing usernames and invalid rows are skipped, never fatal.
    """
    content = await read_text_upload(file)
    summary = await run_in_threadpool(service.import_csv, content)
    logger.info("%s imported %d students", admin.subject, summary.imported)
    return ApiResponse.ok(
        summary,
        message=f"Import completed: {summary.imported} imported, {summary.skipped} skipped",
    )


@router.get("/{student_id}", response_model=ApiResponse[StudentResponse], responses=UNAUTHORIZED)
def get_student(
    student_id: int,
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Get a specific student by their ID."""
    student = service.get_student(student_id)
    return ApiResponse.ok(StudentResponse.model_validate(student))


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=201,
    responses={409: {"description": "Username already exists"}, **UNAUTHORIZED},
)
def create_student(
    data: StudentRequest,
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Create a new student."""
    student = service.create_student(data.username, data.level)
    return ApiResponse.ok(StudentResponse.model_validate(student), message="Student created successfully")


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    responses={409: {"description": "Username already exists"}, **UNAUTHORIZED},
)
def update_student(
    student_id: int,
    data: StudentRequest,
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Update an existing student. Keeping the same username is not a conflict."""
    student = service.update_student(student_id, data.username, data.level)
    return ApiResponse.ok(StudentResponse.model_validate(student), message="Student updated successfully")


@router.delete("/{student_id}", response_model=ApiResponse[None], responses=UNAUTHORIZED)
def delete_student(
    student_id: int,
    admin: Principal = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    """Delete a student by ID."""
    service.delete_student(student_id)
    return ApiResponse.ok(message="Student deleted successfully")
