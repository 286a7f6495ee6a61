"""
Admin Schools Router

Platform-admin endpoints for managing school tenants. All endpoints
require a super-admin token (bearer header or ``admin_token`` cookie).

Endpoints:
- GET /admin/schools - List schools
- POST /admin/schools - Create a school
- GET /admin/schools/check-code - Code availability
- GET /admin/schools/stats - Platform statistics
- GET /admin/schools/{school_id} - School detail
- PUT /admin/schools/{school_id} - Update a school
- DELETE /admin/schools/{school_id} - Delete a school without data
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import PlatformAdminPrincipal, get_platform_admin
from schoolbase.core.database import get_db
from schoolbase.core.responses import (
    error_response,
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.schools import service
from schoolbase.modules.schools.schemas import SchoolCreate, SchoolUpdate
from schoolbase.modules.shared.errors import ServiceError
from schoolbase.modules.shared.helpers import blank_to_none, clamp_limit, clamp_page

logger = logging.getLogger(__name__)

router = APIRouter()

SCHOOL_PAGE_SIZE = 10


@router.get("", summary="List Schools")
async def list_schools(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    search: str | None = Query(None),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        schools, pagination = await service.list_schools(
            db,
            page=clamp_page(page),
            limit=clamp_limit(limit, default=SCHOOL_PAGE_SIZE),
            search=blank_to_none(search),
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return success_response(
            {"schools": schools, "pagination": pagination},
            "Schools retrieved successfully",
        )
    except Exception as e:
        logger.exception(f"Error fetching schools: {e}")
        return internal_error_response("Failed to fetch schools", e)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create School")
async def create_school(
    data: SchoolCreate,
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        school = await service.create_school(db, data)
        logger.info(f"Platform admin {admin.username} created school {school.id} ({school.code})")
        return success_response({"school": school}, "School created successfully", status.HTTP_201_CREATED)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error creating school: {e}")
        return internal_error_response("Failed to create school", e)


@router.get("/check-code", summary="Check School Code Availability")
async def check_code(
    code: str | None = Query(None),
    exclude_id: int | None = Query(None, alias="excludeId"),
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    if not blank_to_none(code):
        return error_response("Code parameter is required", status.HTTP_400_BAD_REQUEST)

    try:
        result = await service.check_code(db, code, exclude_id)
        if result.available:
            message = "Code is available"
        elif result.reason and result.reason.startswith("Code must"):
            message = "Code validation failed"
        else:
            message = "Code is not available"
        return success_response(result, message)
    except Exception as e:
        logger.exception(f"Error checking school code: {e}")
        return internal_error_response("Failed to check school code", e)


@router.get("/stats", summary="School Statistics")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        stats = await service.get_stats(db)
        return success_response(stats, "School statistics retrieved successfully")
    except Exception as e:
        logger.exception(f"Error fetching school statistics: {e}")
        return internal_error_response("Failed to fetch school statistics", e)


@router.get("/{school_id}", summary="Get School")
async def get_school(
    school_id: int,
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        school = await service.get_school(db, school_id)
        return success_response({"school": school}, "School retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching school {school_id}: {e}")
        return internal_error_response("Failed to fetch school", e)


@router.put("/{school_id}", summary="Update School")
async def update_school(
    school_id: int,
    data: SchoolUpdate,
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        school = await service.update_school(db, school_id, data)
        logger.info(f"Platform admin {admin.username} updated school {school_id}")
        return success_response({"school": school}, "School updated successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error updating school {school_id}: {e}")
        return internal_error_response("Failed to update school", e)


@router.delete("/{school_id}", summary="Delete School")
async def delete_school(
    school_id: int,
    db: AsyncSession = Depends(get_db),
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    try:
        school = await service.delete_school(db, school_id)
        logger.info(f"Platform admin {admin.username} deleted school {school_id}")
        return success_response({"deleted": school}, "School deleted successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting school {school_id}: {e}")
        return internal_error_response("Failed to delete school", e)
