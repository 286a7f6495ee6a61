"""
Unit tests for the auth gateway.

These tests cover the ordered rejection checks and tenant resolution.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from schoolbase.core.auth import (
    ExpiredTokenError,
    ForbiddenError,
    InvalidTokenError,
    MalformedTokenError,
    PlatformAdminPrincipal,
    SchoolAdminPrincipal,
    StudentPrincipal,
    TenantRevokedError,
    UnauthenticatedError,
    decode_principal,
    get_platform_admin,
    get_school_admin_context,
    resolve_tenant,
    validate_school_code,
)
from schoolbase.core.security import create_access_token
from schoolbase.modules.schools.models import School

SCHOOL_REPO = "schoolbase.core.auth.SchoolRepository"


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def school():
    school = MagicMock(spec=School)
    school.id = 1
    school.code = "GREEN"
    school.name = "Green Valley School"
    return school


class TestDecodePrincipal:
    def test_school_admin(self):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims())
        assert decode_principal(token, "admin") == SchoolAdminPrincipal(school_id=1)

    def test_student(self):
        claims = StudentPrincipal(school_id=1, student_id=21, user_id=7, enrollment_id=41).to_claims()
        principal = decode_principal(create_access_token(claims), "student")
        assert principal.student_id == 21
        assert principal.enrollment_id == 41

    def test_platform_admin(self):
        token = create_access_token(PlatformAdminPrincipal(username="root").to_claims())
        assert decode_principal(token, "super_admin").username == "root"

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError):
            decode_principal("not-a-jwt", "admin")

    def test_expired_token(self):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims(), expires_minutes=-1)
        with pytest.raises(ExpiredTokenError):
            decode_principal(token, "admin")

    def test_wrong_role(self):
        claims = StudentPrincipal(school_id=1, student_id=21, user_id=7).to_claims()
        with pytest.raises(ForbiddenError) as exc_info:
            decode_principal(create_access_token(claims), "admin")
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Access denied. School admin role required."

    @pytest.mark.parametrize("school_id", [None, 0, "", "abc"])
    def test_missing_school_id(self, school_id):
        token = create_access_token({"role": "admin", "schoolId": school_id})
        with pytest.raises(MalformedTokenError):
            decode_principal(token, "admin")


class TestResolveTenant:
    @pytest.mark.asyncio
    async def test_resolves_existing_school(self, mock_db, school):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims())
        with patch(SCHOOL_REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=school)

            tenant = await resolve_tenant(mock_db, token)

            assert tenant.school_id == 1
            assert tenant.school_code == "GREEN"

    @pytest.mark.asyncio
    async def test_deleted_school_revokes_access(self, mock_db):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims())
        with patch(SCHOOL_REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(TenantRevokedError):
                await resolve_tenant(mock_db, token)

    @pytest.mark.asyncio
    async def test_dependency_requires_header(self, mock_db):
        with pytest.raises(UnauthenticatedError):
            await get_school_admin_context(credentials=None, db=mock_db)

    @pytest.mark.asyncio
    async def test_dependency_with_header(self, mock_db, school):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims())
        with patch(SCHOOL_REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=school)

            tenant = await get_school_admin_context(credentials=_bearer(token), db=mock_db)

            assert tenant.school_name == "Green Valley School"


class TestPlatformAdminDependency:
    @pytest.mark.asyncio
    async def test_cookie_fallback(self):
        token = create_access_token(PlatformAdminPrincipal(username="root").to_claims())
        principal = await get_platform_admin(credentials=None, admin_token=token)
        assert principal.username == "root"

    @pytest.mark.asyncio
    async def test_no_token(self):
        with pytest.raises(UnauthenticatedError):
            await get_platform_admin(credentials=None, admin_token=None)

    @pytest.mark.asyncio
    async def test_school_admin_token_rejected(self):
        token = create_access_token(SchoolAdminPrincipal(school_id=1).to_claims())
        with pytest.raises(ForbiddenError):
            await get_platform_admin(credentials=_bearer(token), admin_token=None)


class TestValidateSchoolCode:
    def test_case_insensitive(self):
        assert validate_school_code("green", "GREEN") is True

    def test_absent_code_matches(self):
        assert validate_school_code(None, "GREEN") is True

    def test_mismatch(self):
        assert validate_school_code("BLUE", "GREEN") is False
