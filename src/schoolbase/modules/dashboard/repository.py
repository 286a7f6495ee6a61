"""
Dashboard Repository

Aggregate queries over one school's students, classes and enrollments.
"""

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes.models import SchoolClass
from schoolbase.modules.curriculum.models import ClassList
from schoolbase.modules.enrollments.models import Enrollment
from schoolbase.modules.students.models import Student


async def count_classes(db: AsyncSession, school_id: int) -> int:
    result = await db.execute(
        select(func.count(SchoolClass.id)).where(SchoolClass.school_id == school_id)
    )
    return result.scalar_one()


async def count_active_enrollments(db: AsyncSession, school_id: int) -> int:
    result = await db.execute(
        select(func.count(Enrollment.id))
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .where(SchoolClass.school_id == school_id, Enrollment.is_active.is_(True))
    )
    return result.scalar_one()


async def students_by_status(db: AsyncSession, school_id: int) -> dict[str, int]:
    result = await db.execute(
        select(Student.status, func.count(Student.id))
        .where(Student.school_id == school_id)
        .group_by(Student.status)
    )
    return {status.value: count for status, count in result.all()}


async def recent_students(db: AsyncSession, school_id: int, limit: int = 5) -> list[dict]:
    result = await db.execute(
        select(Student.id, Student.name, Student.email, Student.status, Student.created_at)
        .where(Student.school_id == school_id)
        .order_by(desc(Student.created_at), desc(Student.id))
        .limit(limit)
    )
    return [dict(row) for row in result.mappings().all()]


async def classes_overview(db: AsyncSession, school_id: int) -> list[dict]:
    """Every class of the school with its active student count."""
    result = await db.execute(
        select(
            SchoolClass.id,
            ClassList.class_name,
            ClassList.class_number,
            SchoolClass.section,
            SchoolClass.session,
            func.count(Enrollment.id).label("student_count"),
        )
        .select_from(SchoolClass)
        .join(ClassList, SchoolClass.class_list_id == ClassList.id)
        .outerjoin(
            Enrollment,
            and_(Enrollment.class_id == SchoolClass.id, Enrollment.is_active.is_(True)),
        )
        .where(SchoolClass.school_id == school_id)
        .group_by(
            SchoolClass.id,
            ClassList.class_name,
            ClassList.class_number,
            SchoolClass.section,
            SchoolClass.session,
        )
        .order_by(ClassList.class_number, SchoolClass.section, SchoolClass.id)
    )
    return [dict(row) for row in result.mappings().all()]
