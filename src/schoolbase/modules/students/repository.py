"""
Student Repository

Database operations for student profiles. Tenant-facing lookups always
filter on ``school_id``.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy import asc, delete, desc, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.enrollments.models import Enrollment
from schoolbase.modules.schools.models import School
from schoolbase.modules.students.models import Gender, Student, StudentStatus
from schoolbase.modules.users.models import User

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "name": Student.name,
    "enrollmentDate": Student.enrollment_date,
    "createdAt": Student.created_at,
}


async def create(
    db: AsyncSession,
    *,
    school_id: int,
    user_id: int,
    name: str,
    gender: Gender,
    email: str,
    status: StudentStatus = StudentStatus.ACTIVE,
    address: str | None = None,
    date_of_birth: date | None = None,
    father_name: str | None = None,
    mother_name: str | None = None,
    category: str | None = None,
    aadhar_number: str | None = None,
) -> Student:
    """
    Create a student profile.

    Args:
        db: Database session
        school_id: Owning school
        user_id: Login identity of the student
        name: Trimmed display name
        gender: Gender
        email: Lower-cased email
        status: Initial status, defaults to active
        address, date_of_birth, father_name, mother_name, category,
        aadhar_number: Optional profile fields, blanks already turned into None

    Returns:
        Created Student instance
    """
    student = Student(
        school_id=school_id,
        user_id=user_id,
        name=name,
        gender=gender,
        email=email,
        status=status,
        address=address,
        date_of_birth=date_of_birth,
        father_name=father_name,
        mother_name=mother_name,
        category=category,
        aadhar_number=aadhar_number,
    )

    db.add(student)
    await db.flush()
    await db.refresh(student)

    logger.info(f"Created student {student.id} in school {school_id}")
    return student


async def get_by_user_and_school(db: AsyncSession, user_id: int, school_id: int) -> Student | None:
    result = await db.execute(
        select(Student).where(Student.user_id == user_id, Student.school_id == school_id)
    )
    return result.scalar_one_or_none()


async def get_for_school(db: AsyncSession, student_id: int, school_id: int) -> Student | None:
    result = await db.execute(
        select(Student).where(Student.id == student_id, Student.school_id == school_id)
    )
    return result.scalar_one_or_none()


async def get_with_phone(db: AsyncSession, student_id: int, school_id: int) -> tuple[Student, str] | None:
    """Student plus the phone of its user, or None."""
    result = await db.execute(
        select(Student, User.phone)
        .join(User, Student.user_id == User.id)
        .where(Student.id == student_id, Student.school_id == school_id)
    )
    row = result.first()
    return (row[0], row[1]) if row else None


async def get_user_phone(db: AsyncSession, user_id: int) -> str | None:
    result = await db.execute(select(User.phone).where(User.id == user_id))
    return result.scalar_one_or_none()


async def list_for_school(
    db: AsyncSession,
    school_id: int,
    *,
    search: str | None = None,
    status: StudentStatus | None = None,
    class_id: int | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[tuple[Student, str]], int]:
    """
    Get a page of a school's students with their user phone.

    Search matches name, email, aadhar number and parent names
    case-insensitively. ``class_id`` keeps students holding an enrollment
    row in that class.

    Returns:
        Tuple of ([(student, phone)], total_count)
    """
    conditions = [Student.school_id == school_id]
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Student.name.ilike(pattern),
                Student.email.ilike(pattern),
                Student.aadhar_number.ilike(pattern),
                Student.father_name.ilike(pattern),
                Student.mother_name.ilike(pattern),
            )
        )
    if status is not None:
        conditions.append(Student.status == status)
    if class_id is not None:
        conditions.append(
            exists().where(Enrollment.student_id == Student.id, Enrollment.class_id == class_id)
        )

    sort_column = SORTABLE_COLUMNS.get(sort_by, Student.created_at)
    order = asc(sort_column) if sort_order == "asc" else desc(sort_column)

    count_result = await db.execute(select(func.count(Student.id)).where(*conditions))
    total = count_result.scalar_one()

    result = await db.execute(
        select(Student, User.phone)
        .join(User, Student.user_id == User.id)
        .where(*conditions)
        .order_by(order, Student.id)
        .offset(offset)
        .limit(limit)
    )
    return [(student, phone) for student, phone in result.all()], total


async def list_for_user(db: AsyncSession, user_id: int) -> list[tuple[Student, str]]:
    """All of a user's student profiles across schools, with the school name."""
    result = await db.execute(
        select(Student, School.name)
        .join(School, Student.school_id == School.id)
        .where(Student.user_id == user_id)
        .order_by(Student.id)
    )
    return [(student, school_name) for student, school_name in result.all()]


async def update_student(db: AsyncSession, student: Student, values: dict[str, Any]) -> Student:
    for field, value in values.items():
        setattr(student, field, value)

    await db.flush()
    await db.refresh(student)

    logger.info(f"Updated student {student.id}: fields={sorted(values)}")
    return student


async def delete_student(db: AsyncSession, student_id: int) -> None:
    """Hard delete; enrollments cascade."""
    await db.execute(delete(Student).where(Student.id == student_id))
    await db.flush()
    logger.info(f"Deleted student {student_id}")


async def count_for_school(db: AsyncSession, school_id: int, status: StudentStatus | None = None) -> int:
    query = select(func.count(Student.id)).where(Student.school_id == school_id)
    if status is not None:
        query = query.where(Student.status == status)
    return (await db.execute(query)).scalar_one()
