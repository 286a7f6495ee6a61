"""
Unit tests for the enrollments service layer.

These tests cover:
- Enrolling active students, rejecting inactive ones
- Reactivating an inactive enrollment in place
- Transfers between classes
- Tenant scoping of lookups
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from schoolbase.modules.enrollments.models import Enrollment
from schoolbase.modules.enrollments.schemas import EnrollmentCreate, EnrollmentUpdate
from schoolbase.modules.enrollments.service import (
    create_enrollment,
    delete_enrollment,
    list_enrollments,
    update_enrollment,
)
from schoolbase.modules.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from schoolbase.modules.students.models import StudentStatus

REPO = "schoolbase.modules.enrollments.service.repository"
CLASS_REPO = "schoolbase.modules.enrollments.service.class_repository"
STUDENT_REPO = "schoolbase.modules.enrollments.service.student_repository"


def _enrollment(*, id=41, student_id=21, class_id=31, is_active=True):
    enrollment = MagicMock(spec=Enrollment)
    enrollment.id = id
    enrollment.student_id = student_id
    enrollment.class_id = class_id
    enrollment.is_active = is_active
    return enrollment


class TestCreateEnrollment:
    @pytest.mark.asyncio
    async def test_enroll_new(self, mock_db, tenant, sample_student, class_row, enrollment_row):
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
            patch(STUDENT_REPO) as mock_students,
        ):
            mock_students.get_for_school = AsyncMock(return_value=sample_student)
            mock_classes.get_detail = AsyncMock(return_value=class_row)
            mock_repo.get_by_student_and_class = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=_enrollment())
            mock_repo.get_detail = AsyncMock(return_value=enrollment_row)

            result, reactivated = await create_enrollment(
                mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31)
            )

            assert reactivated is False
            assert result.id == 41
            assert result.class_name == "Class 10"
            mock_repo.create.assert_called_once_with(mock_db, student_id=21, class_id=31)
            mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_reactivates_inactive_row(self, mock_db, tenant, sample_student, class_row, enrollment_row):
        existing = _enrollment(is_active=False)
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
            patch(STUDENT_REPO) as mock_students,
        ):
            mock_students.get_for_school = AsyncMock(return_value=sample_student)
            mock_classes.get_detail = AsyncMock(return_value=class_row)
            mock_repo.get_by_student_and_class = AsyncMock(return_value=existing)
            mock_repo.update_enrollment = AsyncMock(return_value=existing)
            mock_repo.create = AsyncMock()
            mock_repo.get_detail = AsyncMock(return_value=enrollment_row)

            result, reactivated = await create_enrollment(
                mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31)
            )

            assert reactivated is True
            assert result.id == existing.id
            mock_repo.update_enrollment.assert_called_once_with(mock_db, existing, {"is_active": True})
            mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_enrolled(self, mock_db, tenant, sample_student, class_row):
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
            patch(STUDENT_REPO) as mock_students,
        ):
            mock_students.get_for_school = AsyncMock(return_value=sample_student)
            mock_classes.get_detail = AsyncMock(return_value=class_row)
            mock_repo.get_by_student_and_class = AsyncMock(return_value=_enrollment(is_active=True))

            with pytest.raises(ConflictError) as exc_info:
                await create_enrollment(mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31))

            assert exc_info.value.error == "Already enrolled"
            assert "Class 10 Section A" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_inactive_student_cannot_enroll(self, mock_db, tenant, student_factory):
        with (
            patch(CLASS_REPO) as mock_classes,
            patch(STUDENT_REPO) as mock_students,
        ):
            mock_students.get_for_school = AsyncMock(
                return_value=student_factory(status=StudentStatus.GRADUATED)
            )
            mock_classes.get_detail = AsyncMock()

            with pytest.raises(InvalidStateError) as exc_info:
                await create_enrollment(mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31))

            assert "graduated" in exc_info.value.message
            mock_classes.get_detail.assert_not_called()

    @pytest.mark.asyncio
    async def test_student_from_other_school(self, mock_db, tenant):
        with patch(STUDENT_REPO) as mock_students:
            mock_students.get_for_school = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await create_enrollment(mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31))

            assert exc_info.value.message == "Student not found in this school"
            mock_students.get_for_school.assert_called_once_with(mock_db, 21, tenant.school_id)

    @pytest.mark.asyncio
    async def test_class_from_other_school(self, mock_db, tenant, sample_student):
        with (
            patch(CLASS_REPO) as mock_classes,
            patch(STUDENT_REPO) as mock_students,
        ):
            mock_students.get_for_school = AsyncMock(return_value=sample_student)
            mock_classes.get_detail = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await create_enrollment(mock_db, tenant.school_id, EnrollmentCreate(student_id=21, class_id=31))

            assert exc_info.value.message == "Class not found in this school"


class TestListEnrollments:
    @pytest.mark.asyncio
    async def test_list_passes_filters(self, mock_db, tenant, enrollment_row):
        with patch(REPO) as mock_repo:
            mock_repo.list_for_school = AsyncMock(return_value=([enrollment_row], 21))

            items, pagination = await list_enrollments(
                mock_db, tenant.school_id, page=3, limit=10, class_id=31, is_active=True
            )

            kwargs = mock_repo.list_for_school.call_args.kwargs
            assert kwargs["offset"] == 20
            assert kwargs["class_id"] == 31
            assert kwargs["is_active"] is True
            assert len(items) == 1
            assert pagination.total_pages == 3
            assert pagination.has_prev_page is True
            assert pagination.has_next_page is False


class TestUpdateEnrollment:
    @pytest.mark.asyncio
    async def test_requires_a_field(self, mock_db, tenant):
        with pytest.raises(ValidationFailedError):
            await update_enrollment(mock_db, tenant.school_id, 41, EnrollmentUpdate())

    @pytest.mark.asyncio
    async def test_deactivate(self, mock_db, tenant, enrollment_row):
        enrollment = _enrollment()
        with patch(REPO) as mock_repo:
            mock_repo.get_for_school = AsyncMock(return_value=enrollment)
            mock_repo.update_enrollment = AsyncMock(return_value=enrollment)
            mock_repo.get_detail = AsyncMock(return_value=dict(enrollment_row, is_active=False))

            result = await update_enrollment(mock_db, tenant.school_id, 41, EnrollmentUpdate(is_active=False))

            mock_repo.update_enrollment.assert_called_once_with(mock_db, enrollment, {"is_active": False})
            assert result.is_active is False

    @pytest.mark.asyncio
    async def test_transfer(self, mock_db, tenant, enrollment_row):
        enrollment = _enrollment()
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
        ):
            mock_repo.get_for_school = AsyncMock(return_value=enrollment)
            mock_classes.get_for_school = AsyncMock(return_value=MagicMock(id=32))
            mock_repo.get_by_student_and_class = AsyncMock(return_value=None)
            mock_repo.update_enrollment = AsyncMock(return_value=enrollment)
            mock_repo.get_detail = AsyncMock(return_value=dict(enrollment_row, class_id=32))

            result = await update_enrollment(mock_db, tenant.school_id, 41, EnrollmentUpdate(class_id=32))

            mock_classes.get_for_school.assert_called_once_with(mock_db, 32, tenant.school_id)
            mock_repo.update_enrollment.assert_called_once_with(mock_db, enrollment, {"class_id": 32})
            assert result.class_id == 32

    @pytest.mark.asyncio
    async def test_transfer_to_unknown_class(self, mock_db, tenant):
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
        ):
            mock_repo.get_for_school = AsyncMock(return_value=_enrollment())
            mock_classes.get_for_school = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await update_enrollment(mock_db, tenant.school_id, 41, EnrollmentUpdate(class_id=32))

            assert exc_info.value.message == "New class not found in this school"

    @pytest.mark.asyncio
    async def test_transfer_into_existing_row(self, mock_db, tenant):
        with (
            patch(REPO) as mock_repo,
            patch(CLASS_REPO) as mock_classes,
        ):
            mock_repo.get_for_school = AsyncMock(return_value=_enrollment())
            mock_classes.get_for_school = AsyncMock(return_value=MagicMock(id=32))
            mock_repo.get_by_student_and_class = AsyncMock(return_value=_enrollment(id=42, class_id=32))
            mock_repo.update_enrollment = AsyncMock()

            with pytest.raises(ConflictError) as exc_info:
                await update_enrollment(mock_db, tenant.school_id, 41, EnrollmentUpdate(class_id=32))

            assert exc_info.value.error == "Duplicate enrollment"
            mock_repo.update_enrollment.assert_not_called()


class TestDeleteEnrollment:
    @pytest.mark.asyncio
    async def test_delete(self, mock_db, tenant):
        with patch(REPO) as mock_repo:
            mock_repo.get_for_school = AsyncMock(return_value=_enrollment())
            mock_repo.delete_enrollment = AsyncMock()

            await delete_enrollment(mock_db, tenant.school_id, 41)

            mock_repo.delete_enrollment.assert_called_once_with(mock_db, 41)
            mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db, tenant):
        with patch(REPO) as mock_repo:
            mock_repo.get_for_school = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await delete_enrollment(mock_db, tenant.school_id, 41)
