"""
Classes Router

School-admin endpoints for managing classes.

Endpoints:
- GET /school-admin/classes - List classes with active student counts
- POST /school-admin/classes - Create a class from a grade template
- GET /school-admin/classes/{class_id} - Class detail with enrolled students
- PATCH /school-admin/classes/{class_id} - Change session or section
- DELETE /school-admin/classes/{class_id} - Delete a class without active enrollments
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
from schoolbase.modules.classes import service
from schoolbase.modules.classes.schemas import ClassCreate, ClassUpdate
from schoolbase.modules.shared.errors import ServiceError
from schoolbase.modules.shared.helpers import blank_to_none, clamp_limit, clamp_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", summary="List Classes")
async def list_classes(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    session: str | None = Query(None),
    class_number: int | None = Query(None, alias="classNumber"),
    sort_by: str = Query("className", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        classes, pagination = await service.list_classes(
            db,
            tenant.school_id,
            page=clamp_page(page),
            limit=clamp_limit(limit),
            session=blank_to_none(session),
            class_number=class_number,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return success_response(
            {"classes": classes, "pagination": pagination},
            "Classes retrieved successfully",
        )
    except Exception as e:
        logger.exception(f"Error fetching classes for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to fetch classes", e)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create Class")
async def create_class(
    data: ClassCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        school_class = await service.create_class(db, tenant.school_id, data)
        return success_response(
            {"class": school_class},
            "Class created successfully",
            status.HTTP_201_CREATED,
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error creating class for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to create class", e)


@router.get("/{class_id}", summary="Get Class")
async def get_class(
    class_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        school_class = await service.get_class(db, tenant.school_id, class_id)
        return success_response({"class": school_class}, "Class retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching class {class_id}: {e}")
        return internal_error_response("Failed to fetch class", e)


@router.patch("/{class_id}", summary="Update Class")
async def update_class(
    class_id: int,
    data: ClassUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        school_class = await service.update_class(db, tenant.school_id, class_id, data)
        return success_response({"class": school_class}, "Class updated successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error updating class {class_id}: {e}")
        return internal_error_response("Failed to update class", e)


@router.delete("/{class_id}", summary="Delete Class")
async def delete_class(
    class_id: int,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        await service.delete_class(db, tenant.school_id, class_id)
        return success_response({"deleted": True}, "Class deleted successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting class {class_id}: {e}")
        return internal_error_response("Failed to delete class", e)
