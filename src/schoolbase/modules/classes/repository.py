"""
Class Repository

Database operations for school classes. Every query that takes a
``school_id`` filters on it; callers never see another tenant's classes.
"""

import logging

from sqlalchemy import asc, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes.models import SchoolClass
from schoolbase.modules.curriculum.models import ClassList
from schoolbase.modules.enrollments.models import Enrollment
from schoolbase.modules.students.models import Student

logger = logging.getLogger(__name__)

CLASS_COLUMNS = (
    SchoolClass.id,
    SchoolClass.class_list_id,
    ClassList.class_name,
    ClassList.class_number,
    ClassList.stream,
    ClassList.code.label("class_code"),
    SchoolClass.session,
    SchoolClass.section,
    SchoolClass.created_at,
    SchoolClass.updated_at,
)

SORTABLE_COLUMNS = {
    "className": ClassList.class_name,
    "session": SchoolClass.session,
    "section": SchoolClass.section,
    "createdAt": SchoolClass.created_at,
}


def _with_template(*columns):
    return (
        select(*columns)
        .select_from(SchoolClass)
        .join(ClassList, SchoolClass.class_list_id == ClassList.id)
    )


async def create(
    db: AsyncSession,
    *,
    school_id: int,
    class_list_id: int,
    session: str,
    section: str,
) -> SchoolClass:
    """Create a class. ``session`` and ``section`` must already be normalized."""
    school_class = SchoolClass(
        school_id=school_id,
        class_list_id=class_list_id,
        session=session,
        section=section,
    )

    db.add(school_class)
    await db.flush()
    await db.refresh(school_class)

    logger.info(f"Created class {school_class.id} for school {school_id}")
    return school_class


async def get_for_school(db: AsyncSession, class_id: int, school_id: int) -> SchoolClass | None:
    result = await db.execute(
        select(SchoolClass).where(SchoolClass.id == class_id, SchoolClass.school_id == school_id)
    )
    return result.scalar_one_or_none()


async def get_detail(db: AsyncSession, class_id: int, school_id: int) -> dict | None:
    """Class row joined with its template fields, or None."""
    result = await db.execute(
        _with_template(*CLASS_COLUMNS).where(
            SchoolClass.id == class_id,
            SchoolClass.school_id == school_id,
        )
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def exists_duplicate(
    db: AsyncSession,
    *,
    school_id: int,
    session: str,
    class_list_id: int,
    section: str,
    exclude_id: int | None = None,
) -> bool:
    """Check the (school, session, template, section) uniqueness rule."""
    query = select(SchoolClass.id).where(
        SchoolClass.school_id == school_id,
        SchoolClass.session == session,
        SchoolClass.class_list_id == class_list_id,
        SchoolClass.section == section,
    )
    if exclude_id is not None:
        query = query.where(SchoolClass.id != exclude_id)

    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def list_for_school(
    db: AsyncSession,
    school_id: int,
    *,
    session: str | None = None,
    class_number: int | None = None,
    sort_by: str = "className",
    sort_order: str = "asc",
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[dict], int]:
    """
    Get a page of a school's classes with template fields.

    Returns:
        Tuple of (class rows, total_count)
    """
    conditions = [SchoolClass.school_id == school_id]
    if session:
        conditions.append(SchoolClass.session == session)
    if class_number is not None:
        conditions.append(ClassList.class_number == class_number)

    sort_column = SORTABLE_COLUMNS.get(sort_by, ClassList.class_name)
    order = asc(sort_column) if sort_order == "asc" else desc(sort_column)

    count_result = await db.execute(_with_template(func.count(SchoolClass.id)).where(*conditions))
    total = count_result.scalar_one()

    result = await db.execute(
        _with_template(*CLASS_COLUMNS)
        .where(*conditions)
        .order_by(order, SchoolClass.id)
        .offset(offset)
        .limit(limit)
    )
    return [dict(row) for row in result.mappings().all()], total


async def count_active_by_class(db: AsyncSession, class_ids: list[int]) -> dict[int, int]:
    """Active enrollment counts keyed by class id (classes with none are absent)."""
    if not class_ids:
        return {}

    result = await db.execute(
        select(Enrollment.class_id, func.count(Enrollment.id))
        .where(Enrollment.class_id.in_(class_ids), Enrollment.is_active.is_(True))
        .group_by(Enrollment.class_id)
    )
    return {class_id: count for class_id, count in result.all()}


async def count_active_enrollments(db: AsyncSession, class_id: int) -> int:
    counts = await count_active_by_class(db, [class_id])
    return counts.get(class_id, 0)


async def list_active_students(db: AsyncSession, class_id: int) -> list[dict]:
    """Students actively enrolled in a class."""
    result = await db.execute(
        select(
            Student.id,
            Student.name,
            Student.email,
            Student.gender,
            Student.status,
            Enrollment.id.label("enrollment_id"),
            Enrollment.enrollment_date,
            Enrollment.is_active,
        )
        .select_from(Enrollment)
        .join(Student, Enrollment.student_id == Student.id)
        .where(Enrollment.class_id == class_id, Enrollment.is_active.is_(True))
        .order_by(Student.name, Student.id)
    )
    return [dict(row) for row in result.mappings().all()]


async def update(
    db: AsyncSession,
    school_class: SchoolClass,
    *,
    session: str,
    section: str,
) -> SchoolClass:
    school_class.session = session
    school_class.section = section

    await db.flush()
    await db.refresh(school_class)

    logger.info(f"Updated class {school_class.id}")
    return school_class


async def delete_class(db: AsyncSession, class_id: int) -> None:
    """Delete a class; its (inactive) enrollments cascade."""
    await db.execute(delete(SchoolClass).where(SchoolClass.id == class_id))
    await db.flush()
    logger.info(f"Deleted class {class_id}")
