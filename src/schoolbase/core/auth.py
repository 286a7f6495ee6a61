"""
Authentication and Authorization Module

Provides the auth gateway used by FastAPI endpoints.

A bearer token is decoded exactly once, here, into a typed principal.
School-admin requests are then resolved to a ``TenantContext`` after
checking that the school named in the token still exists. Every failure
is an ``AuthError`` (HTTP 401), checked in this order:

1. Token present and well-formed (``Bearer <token>``) - UnauthenticatedError
2. Signature and expiry valid - InvalidTokenError / ExpiredTokenError
3. Role matches the endpoint - ForbiddenError
4. schoolId present for school roles - MalformedTokenError
5. School still exists - TenantRevokedError

Tokens are stateless; there is no revocation list.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.database import get_db
from schoolbase.core.security import TokenExpiredError, TokenInvalidError, decode_token
from schoolbase.modules.schools.repository import SchoolRepository
from schoolbase.modules.shared.errors import ServiceError

logger = logging.getLogger(__name__)

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_SCHOOL_ADMIN = "admin"
ROLE_PLATFORM_ADMIN = "super_admin"

# Security scheme for OpenAPI documentation; failures are reported by the gateway
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


# ============================================
# Errors
# ============================================


class AuthError(ServiceError):
    """Base class for gateway rejections. Always HTTP 401."""

    def __init__(self, message: str, error_code: str):
        super().__init__("Unauthorized", message, error_code=error_code, status_code=401)


class UnauthenticatedError(AuthError):
    def __init__(self, message: str = "Authorization token is required"):
        super().__init__(message, "UNAUTHENTICATED")


class InvalidTokenError(AuthError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, "INVALID_TOKEN")


class ExpiredTokenError(AuthError):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message, "TOKEN_EXPIRED")


class ForbiddenError(AuthError):
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, "FORBIDDEN")


class MalformedTokenError(AuthError):
    def __init__(self, message: str = "Invalid token: school ID missing"):
        super().__init__(message, "MALFORMED_TOKEN")


class TenantRevokedError(AuthError):
    def __init__(self, message: str = "School not found or access revoked"):
        super().__init__(message, "TENANT_REVOKED")


# ============================================
# Principals
# ============================================


@dataclass(frozen=True)
class StudentPrincipal:
    """A student logged in to one of their school profiles."""

    role: ClassVar[str] = ROLE_STUDENT

    school_id: int
    student_id: int
    user_id: int
    enrollment_id: int | None = None

    def to_claims(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "schoolId": self.school_id,
            "studentId": self.student_id,
            "enrollmentId": self.enrollment_id,
            "userId": self.user_id,
        }


@dataclass(frozen=True)
class TeacherPrincipal:
    role: ClassVar[str] = ROLE_TEACHER

    school_id: int
    teacher_id: int

    def to_claims(self) -> dict[str, Any]:
        return {"role": self.role, "schoolId": self.school_id, "teacherId": self.teacher_id}


@dataclass(frozen=True)
class SchoolAdminPrincipal:
    role: ClassVar[str] = ROLE_SCHOOL_ADMIN

    school_id: int

    def to_claims(self) -> dict[str, Any]:
        return {"role": self.role, "schoolId": self.school_id}


@dataclass(frozen=True)
class PlatformAdminPrincipal:
    """Platform operator. Not bound to any school."""

    role: ClassVar[str] = ROLE_PLATFORM_ADMIN

    username: str

    def to_claims(self) -> dict[str, Any]:
        return {"role": self.role, "username": self.username}


Principal = StudentPrincipal | TeacherPrincipal | SchoolAdminPrincipal | PlatformAdminPrincipal


@dataclass(frozen=True)
class TenantContext:
    """The school a school-admin request acts on."""

    school_id: int
    school_code: str
    school_name: str


# ============================================
# Decoding
# ============================================


def _int_claim(claims: dict[str, Any], name: str, *, required: bool = True) -> int | None:
    value = claims.get(name)
    if value is None:
        if required:
            raise InvalidTokenError(f"Invalid token: {name} missing")
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError(f"Invalid token: {name} is not a number") from e


def _school_id_claim(claims: dict[str, Any]) -> int:
    value = claims.get("schoolId")
    if value in (None, "", 0):
        raise MalformedTokenError()
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MalformedTokenError() from e


def _decode(token: str) -> dict[str, Any]:
    try:
        return decode_token(token)
    except TokenExpiredError as e:
        raise ExpiredTokenError() from e
    except TokenInvalidError as e:
        raise InvalidTokenError() from e


def decode_principal(token: str, required_role: str) -> Principal:
    """
    Verify ``token`` and build the principal for ``required_role``.

    Args:
        token: Raw JWT string
        required_role: Role the endpoint demands

    Returns:
        The typed principal

    Raises:
        InvalidTokenError, ExpiredTokenError: Bad signature, format or expiry
        ForbiddenError: Token role differs from ``required_role``
        MalformedTokenError: School role without a usable schoolId
    """
    claims = _decode(token)

    role = claims.get("role")
    if role != required_role:
        logger.warning(f"Token role '{role}' rejected, '{required_role}' required")
        if required_role == ROLE_SCHOOL_ADMIN:
            raise ForbiddenError("Access denied. School admin role required.")
        raise ForbiddenError(f"Access denied. Role '{required_role}' required.")

    if role == ROLE_PLATFORM_ADMIN:
        username = claims.get("username")
        if not username:
            raise InvalidTokenError("Invalid token: username missing")
        return PlatformAdminPrincipal(username=str(username))

    school_id = _school_id_claim(claims)

    if role == ROLE_SCHOOL_ADMIN:
        return SchoolAdminPrincipal(school_id=school_id)
    if role == ROLE_TEACHER:
        return TeacherPrincipal(school_id=school_id, teacher_id=_int_claim(claims, "teacherId"))
    if role == ROLE_STUDENT:
        return StudentPrincipal(
            school_id=school_id,
            student_id=_int_claim(claims, "studentId"),
            user_id=_int_claim(claims, "userId"),
            enrollment_id=_int_claim(claims, "enrollmentId", required=False),
        )

    raise InvalidTokenError(f"Invalid token: unknown role '{role}'")


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    return credentials.credentials


async def resolve_tenant(db: AsyncSession, token: str) -> TenantContext:
    """
    Resolve a school-admin token to the tenant it acts on.

    Raises:
        AuthError: Any gateway rejection (see module docstring)
    """
    principal = decode_principal(token, ROLE_SCHOOL_ADMIN)

    school = await SchoolRepository.get_by_id(db, principal.school_id)
    if school is None:
        logger.warning(f"Token for missing school {principal.school_id} rejected")
        raise TenantRevokedError()

    return TenantContext(school_id=school.id, school_code=school.code, school_name=school.name)


def validate_school_code(requested_code: str | None, authenticated_code: str) -> bool:
    """
    Check a client-supplied school code against the authenticated tenant.

    Comparison ignores case; an absent code always matches.
    """
    if not requested_code:
        return True
    return requested_code.upper() == authenticated_code.upper()


# ============================================
# FastAPI dependencies
# ============================================


async def get_school_admin_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    """
    FastAPI dependency for school-admin endpoints.

    Usage:
        @router.get("/school-admin/classes")
        async def list_classes(
            tenant: TenantContext = Depends(get_school_admin_context),
        ):
            # tenant.school_id scopes every query
    """
    return await resolve_tenant(db, _bearer_token(credentials))


async def get_platform_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    admin_token: str | None = Cookie(None),
) -> PlatformAdminPrincipal:
    """
    FastAPI dependency for platform-admin endpoints.

    Accepts the bearer header or, failing that, the ``admin_token`` cookie.
    """
    token = credentials.credentials if credentials and credentials.credentials else admin_token
    if not token:
        raise UnauthenticatedError("Not authenticated")

    principal = decode_principal(token, ROLE_PLATFORM_ADMIN)
    logger.debug(f"Authenticated platform admin: {principal.username}")
    return principal


__all__ = [
    "AuthError",
    "UnauthenticatedError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "ForbiddenError",
    "MalformedTokenError",
    "TenantRevokedError",
    "StudentPrincipal",
    "TeacherPrincipal",
    "SchoolAdminPrincipal",
    "PlatformAdminPrincipal",
    "Principal",
    "TenantContext",
    "decode_principal",
    "resolve_tenant",
    "validate_school_code",
    "get_school_admin_context",
    "get_platform_admin",
]
