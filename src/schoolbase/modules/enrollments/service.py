"""
Enrollment Service Layer

Business logic for placing students into classes.

There is at most one enrollment row per (student, class). Enrolling a
student whose row is inactive flips it back on and keeps its id; an active
row is a conflict. Both the student and the class must belong to the
caller's school.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes import repository as class_repository
from schoolbase.modules.enrollments import repository
from schoolbase.modules.enrollments.schemas import (
    EnrollmentCreate,
    EnrollmentResponse,
    EnrollmentUpdate,
)
from schoolbase.modules.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from schoolbase.modules.shared.helpers import Pagination, is_unique_violation
from schoolbase.modules.students import repository as student_repository
from schoolbase.modules.students.models import StudentStatus

logger = logging.getLogger(__name__)


async def _detail(db: AsyncSession, enrollment_id: int, school_id: int) -> EnrollmentResponse:
    row = await repository.get_detail(db, enrollment_id, school_id)
    if row is None:
        raise NotFoundError("Enrollment not found")
    return EnrollmentResponse(**row)


async def create_enrollment(
    db: AsyncSession,
    school_id: int,
    data: EnrollmentCreate,
) -> tuple[EnrollmentResponse, bool]:
    """
    Enroll a student in a class.

    Args:
        db: Database session
        school_id: Tenant scope
        data: Student and class ids

    Returns:
        Tuple of (enrollment, reactivated). ``reactivated`` is True when an
        inactive row was switched back on instead of inserting a new one.

    Raises:
        NotFoundError: If the student or class is not in this school
        InvalidStateError: If the student is not active
        ConflictError: If the student is already actively enrolled
    """
    student = await student_repository.get_for_school(db, data.student_id, school_id)
    if student is None:
        raise NotFoundError("Student not found in this school")

    if student.status != StudentStatus.ACTIVE:
        raise InvalidStateError(
            "Cannot enroll student",
            f"Student status is '{student.status.value}'. Only active students can be enrolled.",
        )

    class_row = await class_repository.get_detail(db, data.class_id, school_id)
    if class_row is None:
        raise NotFoundError("Class not found in this school")

    already_enrolled = ConflictError(
        "Already enrolled",
        f"Student is already enrolled in Class {class_row['class_name']} Section {class_row['section']}",
    )

    student_id = student.id
    existing = await repository.get_by_student_and_class(db, student_id, data.class_id)
    if existing is not None:
        if existing.is_active:
            raise already_enrolled

        await repository.update_enrollment(db, existing, {"is_active": True})
        await db.commit()
        logger.info(f"Reactivated enrollment {existing.id} in school {school_id}")
        return await _detail(db, existing.id, school_id), True

    try:
        enrollment = await repository.create(db, student_id=student_id, class_id=data.class_id)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Concurrent enrollment rejected: student={student_id}, class={data.class_id}")
            raise already_enrolled from e
        raise

    logger.info(f"Enrolled student {student_id} in class {data.class_id} (enrollment {enrollment.id})")
    return await _detail(db, enrollment.id, school_id), False


async def list_enrollments(
    db: AsyncSession,
    school_id: int,
    *,
    page: int,
    limit: int,
    student_id: int | None = None,
    class_id: int | None = None,
    is_active: bool | None = None,
    session: str | None = None,
) -> tuple[list[EnrollmentResponse], Pagination]:
    rows, total = await repository.list_for_school(
        db,
        school_id,
        student_id=student_id,
        class_id=class_id,
        is_active=is_active,
        session=session,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return [EnrollmentResponse(**row) for row in rows], Pagination.build(page, limit, total)


async def get_enrollment(db: AsyncSession, school_id: int, enrollment_id: int) -> EnrollmentResponse:
    return await _detail(db, enrollment_id, school_id)


async def update_enrollment(
    db: AsyncSession,
    school_id: int,
    enrollment_id: int,
    data: EnrollmentUpdate,
) -> EnrollmentResponse:
    """
    Toggle an enrollment and/or move it to another class.

    A transfer rewrites this row's class; rows the student holds in other
    classes are left alone.

    Raises:
        ValidationFailedError: If neither isActive nor classId is given
        NotFoundError: If the enrollment or the target class is not in this school
        ConflictError: If the student already has a row in the target class
    """
    if data.is_active is None and data.class_id is None:
        raise ValidationFailedError("No fields to update provided")

    enrollment = await repository.get_for_school(db, enrollment_id, school_id)
    if enrollment is None:
        raise NotFoundError("Enrollment not found")

    values: dict = {}
    if data.is_active is not None:
        values["is_active"] = data.is_active

    if data.class_id is not None and data.class_id != enrollment.class_id:
        target = await class_repository.get_for_school(db, data.class_id, school_id)
        if target is None:
            raise NotFoundError("New class not found in this school")

        clash = await repository.get_by_student_and_class(db, enrollment.student_id, data.class_id)
        if clash is not None:
            raise ConflictError(
                "Duplicate enrollment",
                "Student already has an enrollment in the target class",
            )
        values["class_id"] = data.class_id

    if values:
        try:
            await repository.update_enrollment(db, enrollment, values)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if is_unique_violation(e):
                raise ConflictError(
                    "Duplicate enrollment",
                    "Student already has an enrollment in the target class",
                ) from e
            raise

    return await _detail(db, enrollment_id, school_id)


async def delete_enrollment(db: AsyncSession, school_id: int, enrollment_id: int) -> None:
    """Hard delete an enrollment of this school."""
    enrollment = await repository.get_for_school(db, enrollment_id, school_id)
    if enrollment is None:
        raise NotFoundError("Enrollment not found")

    await repository.delete_enrollment(db, enrollment.id)
    await db.commit()
