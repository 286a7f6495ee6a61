"""
Enrollment Repository

Database operations for enrollments. Tenant scoping always goes through
the joined class: an enrollment belongs to the school that owns its class.
"""

import logging
from typing import Any

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes.models import SchoolClass
from schoolbase.modules.curriculum.models import ClassList
from schoolbase.modules.enrollments.models import Enrollment
from schoolbase.modules.students.models import Student

logger = logging.getLogger(__name__)

ENROLLMENT_COLUMNS = (
    Enrollment.id,
    Enrollment.student_id,
    Student.name.label("student_name"),
    Student.email.label("student_email"),
    Student.status.label("student_status"),
    Enrollment.class_id,
    ClassList.class_name,
    ClassList.class_number,
    SchoolClass.section,
    SchoolClass.session,
    ClassList.stream,
    Enrollment.enrollment_date,
    Enrollment.is_active,
    Enrollment.created_at,
)

# Compact form embedded in student and phone-check responses
STUDENT_ENROLLMENT_COLUMNS = (
    Enrollment.id.label("enrollment_id"),
    Enrollment.student_id,
    Enrollment.class_id,
    ClassList.class_name,
    ClassList.class_number,
    ClassList.stream,
    SchoolClass.section,
    SchoolClass.session,
    Enrollment.enrollment_date,
    Enrollment.is_active,
)


def _joined(*columns):
    return (
        select(*columns)
        .select_from(Enrollment)
        .join(Student, Enrollment.student_id == Student.id)
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .join(ClassList, SchoolClass.class_list_id == ClassList.id)
    )


async def create(db: AsyncSession, *, student_id: int, class_id: int) -> Enrollment:
    """Insert an active enrollment."""
    enrollment = Enrollment(student_id=student_id, class_id=class_id, is_active=True)

    db.add(enrollment)
    await db.flush()
    await db.refresh(enrollment)

    logger.info(f"Created enrollment {enrollment.id}: student={student_id}, class={class_id}")
    return enrollment


async def get_by_student_and_class(
    db: AsyncSession,
    student_id: int,
    class_id: int,
) -> Enrollment | None:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.class_id == class_id,
        )
    )
    return result.scalar_one_or_none()


async def get_for_school(db: AsyncSession, enrollment_id: int, school_id: int) -> Enrollment | None:
    """Get an enrollment whose class belongs to ``school_id``."""
    result = await db.execute(
        select(Enrollment)
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .where(Enrollment.id == enrollment_id, SchoolClass.school_id == school_id)
    )
    return result.scalar_one_or_none()


async def get_detail(db: AsyncSession, enrollment_id: int, school_id: int) -> dict | None:
    """Enrollment joined with student and class fields, or None."""
    result = await db.execute(
        _joined(*ENROLLMENT_COLUMNS).where(
            Enrollment.id == enrollment_id,
            SchoolClass.school_id == school_id,
        )
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def list_for_school(
    db: AsyncSession,
    school_id: int,
    *,
    student_id: int | None = None,
    class_id: int | None = None,
    is_active: bool | None = None,
    session: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[dict], int]:
    """
    Get a page of a school's enrollments, newest first.

    Returns:
        Tuple of (enrollment rows, total_count)
    """
    conditions = [SchoolClass.school_id == school_id]
    if student_id is not None:
        conditions.append(Enrollment.student_id == student_id)
    if class_id is not None:
        conditions.append(Enrollment.class_id == class_id)
    if is_active is not None:
        conditions.append(Enrollment.is_active.is_(is_active))
    if session:
        conditions.append(SchoolClass.session == session)

    count_result = await db.execute(_joined(func.count(Enrollment.id)).where(*conditions))
    total = count_result.scalar_one()

    result = await db.execute(
        _joined(*ENROLLMENT_COLUMNS)
        .where(*conditions)
        .order_by(desc(Enrollment.enrollment_date), desc(Enrollment.id))
        .offset(offset)
        .limit(limit)
    )
    return [dict(row) for row in result.mappings().all()], total


async def list_for_students(
    db: AsyncSession,
    student_ids: list[int],
    *,
    active_only: bool = True,
) -> list[dict]:
    """Compact enrollment rows for the given students, newest first."""
    if not student_ids:
        return []

    query = _joined(*STUDENT_ENROLLMENT_COLUMNS).where(Enrollment.student_id.in_(student_ids))
    if active_only:
        query = query.where(Enrollment.is_active.is_(True))

    result = await db.execute(query.order_by(desc(Enrollment.enrollment_date), desc(Enrollment.id)))
    return [dict(row) for row in result.mappings().all()]


async def update_enrollment(db: AsyncSession, enrollment: Enrollment, values: dict[str, Any]) -> Enrollment:
    for field, value in values.items():
        setattr(enrollment, field, value)

    await db.flush()
    await db.refresh(enrollment)

    logger.info(f"Updated enrollment {enrollment.id}: {values}")
    return enrollment


async def deactivate_for_student(db: AsyncSession, student_id: int) -> int:
    """Set every enrollment of a student inactive. Returns the row count."""
    result = await db.execute(
        update(Enrollment)
        .where(Enrollment.student_id == student_id)
        .values(is_active=False)
        .execution_options(synchronize_session="fetch")
    )
    await db.flush()
    return result.rowcount or 0


async def delete_enrollment(db: AsyncSession, enrollment_id: int) -> None:
    await db.execute(delete(Enrollment).where(Enrollment.id == enrollment_id))
    await db.flush()
    logger.info(f"Deleted enrollment {enrollment_id}")
