"""
Students Router

School-admin endpoints for student profiles.

Endpoints:
- GET /school-admin/students - List students
- POST /school-admin/students - Create a profile for an existing user
- GET /school-admin/students/{student_id} - Student detail with all enrollments
- PATCH /school-admin/students/{student_id} - Partial update
- DELETE /school-admin/students/{student_id}?hard=true - Soft (default) or hard delete
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext, get_school_admin_context
from schoolbase.core.database import get_db
from schoolbase.core.responses import (
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.shared.errors import ServiceError
from schoolbase.modules.shared.helpers import blank_to_none, clamp_limit, clamp_page
from schoolbase.modules.students import service
from schoolbase.modules.students.models import StudentStatus
from schoolbase.modules.students.schemas import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", summary="List Students")
async def list_students(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    search: str | None = Query(None),
    student_status: StudentStatus | None = Query(None, alias="status"),
    class_id: int | None = Query(None, alias="classId"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        students, pagination = await service.list_students(
            db,
            tenant.school_id,
            page=clamp_page(page),
            limit=clamp_limit(limit),
            search=blank_to_none(search),
            status=student_status,
            class_id=class_id,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return success_response(
            {"students": students, "pagination": pagination},
            "Students retrieved successfully",
        )
    except Exception as e:
        logger.exception(f"Error fetching students for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to fetch students", e)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create Student")
async def create_student(
    data: StudentCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        student = await service.create_student(db, tenant.school_id, data)
        return success_response(
            {"student": student},
            "Student created successfully",
            status.HTTP_201_CREATED,
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error creating student in school {tenant.school_id}: {e}")
        return internal_error_response("Failed to create student", e)


@router.get("/{student_id}", summary="Get Student")
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        student = await service.get_student(db, tenant.school_id, student_id)
        return success_response({"student": student}, "Student retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching student {student_id}: {e}")
        return internal_error_response("Failed to fetch student", e)


@router.patch("/{student_id}", summary="Update Student")
async def update_student(
    student_id: int,
    data: StudentUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        student = await service.update_student(db, tenant.school_id, student_id, data)
        return success_response({"student": student}, "Student updated successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error updating student {student_id}: {e}")
        return internal_error_response("Failed to update student", e)


@router.delete("/{student_id}", summary="Delete Student")
async def delete_student(
    student_id: int,
    hard: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        await service.delete_student(db, tenant.school_id, student_id, hard=hard)
        message = (
            "Student permanently deleted"
            if hard
            else "Student deactivated and unenrolled from all classes"
        )
        return success_response({"deleted": True, "hard": hard}, message)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting student {student_id}: {e}")
        return internal_error_response("Failed to delete student", e)
