"""
Curriculum Router

Public lookups over the grade templates, subjects and chapters, plus the
school-admin template list used when provisioning classes.

Endpoints:
- GET /classlist
- GET /classlist/{class_id}/subjects
- GET /classlist/{class_id}/subjects/{subject_id}/chapters
- GET /school-admin/classlist
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext, get_school_admin_context
from schoolbase.core.database import get_db
from schoolbase.core.responses import (
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.curriculum import service
from schoolbase.modules.shared.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()
school_admin_router = APIRouter()


@router.get(
    "",
    summary="List Class Templates",
    description="All grade templates ordered by class number then stream.",
)
async def list_class_lists(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    try:
        classes = await service.list_class_lists(db)
        return success_response({"classes": classes}, "Class lists retrieved successfully")
    except Exception as e:
        logger.exception(f"Error fetching class lists: {e}")
        return internal_error_response("Failed to fetch class lists", e)


@router.get(
    "/{class_id}/subjects",
    summary="List Subjects of a Template",
)
async def list_subjects(class_id: int, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    try:
        result = await service.get_class_subjects(db, class_id)
        return success_response(result, "Subjects retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching subjects for template {class_id}: {e}")
        return internal_error_response("Failed to fetch subjects", e)


@router.get(
    "/{class_id}/subjects/{subject_id}/chapters",
    summary="List Chapters of a Subject",
    description="Chapters ordered by chapter number then name.",
)
async def list_chapters(
    class_id: int,
    subject_id: int,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    try:
        result = await service.get_chapters(db, class_id, subject_id)
        return success_response(result, "Chapters retrieved successfully")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching chapters for template {class_id}/subject {subject_id}: {e}")
        return internal_error_response("Failed to fetch chapters", e)


@school_admin_router.get(
    "",
    summary="Templates for Class Provisioning",
    description="Flat template list plus the same list grouped by class number.",
)
async def school_admin_class_list(
    class_number: int | None = Query(None, alias="classNumber"),
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        class_list = await service.list_class_lists(db, class_number)
        return success_response(
            {
                "classList": class_list,
                "groupedByClass": service.group_by_class_number(class_list),
            },
            "Class list retrieved successfully",
        )
    except Exception as e:
        logger.exception(f"Error fetching class list for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to fetch class list", e)
