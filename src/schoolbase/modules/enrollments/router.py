"""
Enrollments Router

School-admin endpoints for enrolling students into classes.

Endpoints:
- GET /school-admin/enrollments - List enrollments
- POST /school-admin/enrollments - Enroll a student (or reactivate)
- GET /school-admin/enrollments/{enrollment_id} - Enrollment detail
- PATCH /school-admin/enrollments/{enrollment_id} - Toggle or transfer
- DELETE /school-admin/enrollments/{enrollment_id} - Hard delete
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
from schoolbase.modules.enrollments import service
from schoolbase.modules.enrollments.schemas import EnrollmentCreate, EnrollmentUpdate
from schoolbase.modules.shared.errors import ServiceError
from schoolbase.modules.shared.helpers import blank_to_none, clamp_limit, clamp_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", summary="List Enrollments")
async def list_enrollments(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    student_id: int | None = Query(None, alias="studentId"),
    class_id: int | None = Query(None, alias="classId"),
    is_active: bool | None = Query(None, alias="isActive"),
    session: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        enrollments, pagination = await service.list_enrollments(
            db,
            tenant.school_id,
            page=clamp_page(page),
            limit=clamp_limit(limit),
            student_id=student_id,
            class_id=class_id,
            is_active=is_active,
            session=blank_to_none(session),
        )
        return success_response(
            {"enrollments": enrollments, "pagination": pagination},
            "Enrollments retrieved successfully",
        )
    except Exception as e:
        logger.exception(f"Error fetching enrollments for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to fetch enrollments", e)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Enroll Student",
    description="Creates an enrollment (201) or reactivates an inactive one (200, same id).",
)
async def create_enrollment(
    data: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        enrollment, reactivated = await service.create_enrollment(db, tenant.school_id, data)
        if reactivated:
            return success_response({"enrollment": enrollment}, "Enrollment reactivated successfully")
        return success_response(
            {"enrollment": enrollment},
            "Student enrolled successfully",
            status.HTTP_201_CREATED,
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error creating enrollment in school {tenant.school_id}: {e}")
        return internal_error_response("Failed to create enrollment", e)


@router.get("/{enrollment_id}", summary="Get Enrollment")
async def get_enrollment(
    enrollment_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        enrollment = await service.get_enrollment(db, tenant.school_id, enrollment_id)
        return success_response({"enrollment": enrollment}, "Enrollment retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching enrollment {enrollment_id}: {e}")
        return internal_error_response("Failed to fetch enrollment", e)


@router.patch("/{enrollment_id}", summary="Update or Transfer Enrollment")
async def update_enrollment(
    enrollment_id: int,
    data: EnrollmentUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        enrollment = await service.update_enrollment(db, tenant.school_id, enrollment_id, data)
        message = (
            "Student unenrolled successfully"
            if data.is_active is False
            else "Enrollment updated successfully"
        )
        return success_response({"enrollment": enrollment}, message)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error updating enrollment {enrollment_id}: {e}")
        return internal_error_response("Failed to update enrollment", e)


@router.delete("/{enrollment_id}", summary="Delete Enrollment")
async def delete_enrollment(
    enrollment_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        await service.delete_enrollment(db, tenant.school_id, enrollment_id)
        return success_response({"deleted": True}, "Enrollment deleted successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting enrollment {enrollment_id}: {e}")
        return internal_error_response("Failed to delete enrollment", e)
