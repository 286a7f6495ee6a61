"""
Student Service Layer

Business logic for student profiles within a school.

A profile links a User (login identity) to one school; a user holds at
most one profile per school. Deleting a profile is soft by default:
the status becomes ``inactive`` and every enrollment is switched off in
the same transaction. ``hard=True`` removes the row and its enrollments.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.enrollments import repository as enrollment_repository
from schoolbase.modules.enrollments.schemas import StudentEnrollment
from schoolbase.modules.shared.errors import ConflictError, NotFoundError, ValidationFailedError
from schoolbase.modules.shared.helpers import Pagination, blank_to_none, is_unique_violation
from schoolbase.modules.students import repository
from schoolbase.modules.students.models import Student, StudentStatus
from schoolbase.modules.students.schemas import (
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from schoolbase.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

SORT_FIELDS = {"name", "enrollmentDate", "createdAt"}

TEXT_FIELDS = {"address", "father_name", "mother_name", "category", "aadhar_number"}


def _student_exists_error() -> ConflictError:
    return ConflictError(
        "Student already exists",
        "A student profile already exists for this user in your school",
    )


def _to_response(
    student: Student,
    phone: str | None,
    enrollments: list[dict] | None = None,
) -> StudentResponse:
    response = StudentResponse.model_validate(student)
    response.phone = phone
    if enrollments is not None:
        response.enrollments = [StudentEnrollment(**e) for e in enrollments]
    return response


async def create_student(db: AsyncSession, school_id: int, data: StudentCreate) -> StudentResponse:
    """
    Create a student profile for an existing user.

    Args:
        db: Database session
        school_id: Tenant scope, taken from the auth context
        data: Validated profile fields

    Returns:
        The created profile with the user's phone

    Raises:
        NotFoundError: If the user does not exist
        ConflictError: If the user already has a profile in this school
    """
    user = await UserRepository.get_by_id(db, data.user_id)
    if user is None:
        raise NotFoundError("User not found. Please create the user first.")

    user_id, phone = user.id, user.phone
    if await repository.get_by_user_and_school(db, user_id, school_id) is not None:
        raise _student_exists_error()

    try:
        student = await repository.create(
            db,
            school_id=school_id,
            user_id=user_id,
            name=data.name.strip(),
            gender=data.gender,
            email=str(data.email).strip().lower(),
            status=data.status or StudentStatus.ACTIVE,
            address=blank_to_none(data.address),
            date_of_birth=data.date_of_birth,
            father_name=blank_to_none(data.father_name),
            mother_name=blank_to_none(data.mother_name),
            category=blank_to_none(data.category),
            aadhar_number=blank_to_none(data.aadhar_number),
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Concurrent student creation rejected: user={user_id}, school={school_id}")
            raise _student_exists_error() from e
        raise

    logger.info(f"Created student {student.id} for user {user_id} in school {school_id}")
    return _to_response(student, phone)


async def list_students(
    db: AsyncSession,
    school_id: int,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    status: StudentStatus | None = None,
    class_id: int | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[StudentResponse], Pagination]:
    """
    List a school's students, each with its phone and active enrollments.

    Returns:
        Tuple of (students, pagination)
    """
    if sort_by not in SORT_FIELDS:
        sort_by = "createdAt"

    rows, total = await repository.list_for_school(
        db,
        school_id,
        search=search,
        status=status,
        class_id=class_id,
        sort_by=sort_by,
        sort_order="asc" if sort_order == "asc" else "desc",
        offset=(page - 1) * limit,
        limit=limit,
    )

    enrollment_rows = await enrollment_repository.list_for_students(
        db, [student.id for student, _ in rows], active_only=True
    )
    by_student: dict[int, list[dict]] = {}
    for row in enrollment_rows:
        by_student.setdefault(row["student_id"], []).append(row)

    students = [
        _to_response(student, phone, by_student.get(student.id, [])) for student, phone in rows
    ]
    return students, Pagination.build(page, limit, total)


async def get_student(db: AsyncSession, school_id: int, student_id: int) -> StudentResponse:
    """Get a student with every enrollment, active or not."""
    found = await repository.get_with_phone(db, student_id, school_id)
    if found is None:
        raise NotFoundError("Student not found")

    student, phone = found
    enrollments = await enrollment_repository.list_for_students(db, [student.id], active_only=False)
    return _to_response(student, phone, enrollments)


def _update_values(data: StudentUpdate) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field in data.model_fields_set:
        value = getattr(data, field)
        if field == "name":
            value = value.strip()
        elif field == "email":
            value = str(value).strip().lower()
        elif field in TEXT_FIELDS:
            value = blank_to_none(value)
        values[field] = value
    return values


async def update_student(
    db: AsyncSession,
    school_id: int,
    student_id: int,
    data: StudentUpdate,
) -> StudentResponse:
    """
    Partially update a profile. Any status may move to any other status.

    Raises:
        ValidationFailedError: If no field is given
        NotFoundError: If the student is not in this school
    """
    values = _update_values(data)
    if not values:
        raise ValidationFailedError("No fields to update provided")

    student = await repository.get_for_school(db, student_id, school_id)
    if student is None:
        raise NotFoundError("Student not found")

    await repository.update_student(db, student, values)
    await db.commit()

    phone = await repository.get_user_phone(db, student.user_id)
    return _to_response(student, phone)


async def delete_student(db: AsyncSession, school_id: int, student_id: int, *, hard: bool = False) -> None:
    """
    Delete a student.

    Soft deletion marks the student inactive and deactivates all of its
    enrollments in one commit. Hard deletion removes the row; enrollments
    cascade.

    Raises:
        NotFoundError: If the student is not in this school
    """
    student = await repository.get_for_school(db, student_id, school_id)
    if student is None:
        raise NotFoundError("Student not found")

    if hard:
        await repository.delete_student(db, student.id)
        await db.commit()
        logger.info(f"School {school_id} permanently deleted student {student_id}")
        return

    try:
        await repository.update_student(db, student, {"status": StudentStatus.INACTIVE})
        deactivated = await enrollment_repository.deactivate_for_student(db, student.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"School {school_id} deactivated student {student_id} ({deactivated} enrollments switched off)"
    )
