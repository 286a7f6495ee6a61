"""
Dashboard Router

Endpoints:
- GET /school-admin/dashboard - Summary of the calling school
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext, get_school_admin_context
from schoolbase.core.database import get_db
from schoolbase.core.responses import internal_error_response, success_response
from schoolbase.modules.dashboard import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", summary="School Dashboard")
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    try:
        dashboard = await service.get_dashboard(db, tenant)
        return success_response(dashboard, "Dashboard stats retrieved successfully")
    except Exception as e:
        logger.exception(f"Error fetching dashboard for school {tenant.school_id}: {e}")
        return internal_error_response("Failed to fetch dashboard stats", e)
