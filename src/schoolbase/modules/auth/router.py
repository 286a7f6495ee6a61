"""
Authentication Routers

Endpoints:
- POST /student/login - Student login (one entry per school profile)
- POST /school-admin/auth/login - School-admin login, sets ``school_admin_token``
- GET /school-admin/auth/verify - Check a school-admin token
- POST /school-admin/auth/logout - Clear the school-admin cookie
- POST /admin/auth/login - Platform-admin login, sets ``admin_token``
- GET /admin/auth/verify - Check a platform-admin token (header or cookie)
- POST /admin/auth/logout - Clear the platform-admin cookie

Login endpoints are rate limited per client IP.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import (
    PlatformAdminPrincipal,
    TenantContext,
    get_platform_admin,
    get_school_admin_context,
)
from schoolbase.core.config import settings
from schoolbase.core.database import get_db
from schoolbase.core.rate_limit import login_rate_limit
from schoolbase.core.responses import (
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.auth import service
from schoolbase.modules.auth.schemas import (
    AdminLoginRequest,
    SchoolAdminLoginRequest,
    StudentLoginRequest,
)
from schoolbase.modules.shared.errors import ServiceError

logger = logging.getLogger(__name__)

SCHOOL_ADMIN_COOKIE = "school_admin_token"
ADMIN_COOKIE = "admin_token"

student_router = APIRouter()
school_admin_router = APIRouter()
admin_router = APIRouter()


def _set_auth_cookie(response: JSONResponse, name: str, token: str, max_age_minutes: int) -> None:
    response.set_cookie(
        name,
        token,
        max_age=max_age_minutes * 60,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )


def _clear_auth_cookie(response: JSONResponse, name: str) -> None:
    response.set_cookie(
        name,
        "",
        max_age=0,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )


# ============================================
# Student
# ============================================


@student_router.post(
    "/login",
    summary="Student Login",
    dependencies=[Depends(login_rate_limit("student-login"))],
)
async def student_login(
    credentials: StudentLoginRequest,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    try:
        students = await service.student_login(db, credentials.phone, credentials.password)
        return success_response({"students": students}, "Login successful")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Student login error: {e}")
        return internal_error_response("Login failed", e)


# ============================================
# School admin
# ============================================


@school_admin_router.post(
    "/login",
    summary="School Admin Login",
    dependencies=[Depends(login_rate_limit("school-admin-login"))],
)
async def school_admin_login(
    credentials: SchoolAdminLoginRequest,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    try:
        result = await service.school_admin_login(db, credentials)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"School admin login error: {e}")
        return internal_error_response("Login failed", e)

    response = success_response(result, "Login successful")
    _set_auth_cookie(response, SCHOOL_ADMIN_COOKIE, result.token, settings.jwt_expires_minutes)
    return response


@school_admin_router.get("/verify", summary="Verify School Admin Token")
async def school_admin_verify(
    tenant: TenantContext = Depends(get_school_admin_context),
) -> JSONResponse:
    return success_response(
        {
            "valid": True,
            "school": {
                "id": tenant.school_id,
                "code": tenant.school_code,
                "name": tenant.school_name,
            },
        },
        "Token is valid",
    )


@school_admin_router.post("/logout", summary="School Admin Logout")
async def school_admin_logout() -> JSONResponse:
    response = success_response({"loggedOut": True}, "Logout successful")
    _clear_auth_cookie(response, SCHOOL_ADMIN_COOKIE)
    return response


# ============================================
# Platform admin
# ============================================


@admin_router.post(
    "/login",
    summary="Platform Admin Login",
    dependencies=[Depends(login_rate_limit("admin-login"))],
)
async def admin_login(credentials: AdminLoginRequest) -> JSONResponse:
    try:
        result = service.platform_admin_login(credentials.username, credentials.password)
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception(f"Admin login error: {e}")
        return internal_error_response("Login failed", e)

    response = success_response(result, "Login successful")
    _set_auth_cookie(response, ADMIN_COOKIE, result.token, settings.admin_token_expires_minutes)
    return response


@admin_router.get("/verify", summary="Verify Platform Admin Token")
async def admin_verify(
    admin: PlatformAdminPrincipal = Depends(get_platform_admin),
) -> JSONResponse:
    return success_response(
        {
            "authenticated": True,
            "user": {"username": admin.username, "role": admin.role},
        },
        "Token is valid",
    )


@admin_router.post("/logout", status_code=status.HTTP_200_OK, summary="Platform Admin Logout")
async def admin_logout() -> JSONResponse:
    response = success_response({"loggedOut": True}, "Logout successful")
    _clear_auth_cookie(response, ADMIN_COOKIE)
    return response
