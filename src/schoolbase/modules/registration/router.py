"""
Registration Router

School-admin endpoints for the first registration steps.

Endpoints:
- POST /school-admin/students/check-phone - Which step comes next for a phone
- POST /school-admin/users - Create a login identity
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext, get_school_admin_context
from schoolbase.core.database import get_db
from schoolbase.core.responses import (
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.registration import service
from schoolbase.modules.registration.schemas import CheckPhoneRequest, UserCreate
from schoolbase.modules.shared.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/students/check-phone",
    summary="Check Phone",
    description="""
First registration step. Read-only; returns ``nextStep``:

- ``CREATE_USER`` - no user has this phone
- ``CREATE_STUDENT`` - user exists, no profile in this school
- ``ENROLL_STUDENT`` - profile exists without active enrollments
- ``ALREADY_ENROLLED`` - profile exists with active enrollments
""",
)
async def check_phone(
    data: CheckPhoneRequest,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        result = await service.check_phone(db, tenant, data.phone)
        return success_response(result, service.check_phone_title(result))
    except Exception as e:
        logger.exception(f"Error checking phone for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to check phone number", e)


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create User")
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        result = await service.create_user(db, data)
        logger.info(f"School {tenant.school_id} created user {result.user.id}")
        return success_response(result, "User created successfully", status.HTTP_201_CREATED)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Error creating user for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to create user", e)
