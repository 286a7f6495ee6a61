"""
Curriculum Repository

Read queries over the grade templates, subjects and chapters.
"""

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.curriculum.models import Chapter, ClassList, Subject, SubjectClass


async def list_class_lists(db: AsyncSession, class_number: int | None = None) -> list[ClassList]:
    """All templates ordered by class number then stream."""
    query = select(ClassList)
    if class_number is not None:
        query = query.where(ClassList.class_number == class_number)
    query = query.order_by(asc(ClassList.class_number), asc(ClassList.stream), ClassList.id)

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_class_list(db: AsyncSession, class_list_id: int) -> ClassList | None:
    return await db.get(ClassList, class_list_id)


async def get_subject(db: AsyncSession, subject_id: int) -> Subject | None:
    return await db.get(Subject, subject_id)


async def list_subjects(db: AsyncSession, class_list_id: int) -> list[dict]:
    """Subjects linked to a template, ordered by name."""
    result = await db.execute(
        select(
            Subject.id,
            Subject.name,
            SubjectClass.id.label("subject_class_id"),
        )
        .select_from(SubjectClass)
        .join(Subject, SubjectClass.subject_id == Subject.id)
        .where(SubjectClass.class_list_id == class_list_id)
        .order_by(Subject.name)
    )
    return [dict(row) for row in result.mappings().all()]


async def get_subject_class(
    db: AsyncSession,
    class_list_id: int,
    subject_id: int,
) -> SubjectClass | None:
    result = await db.execute(
        select(SubjectClass).where(
            SubjectClass.class_list_id == class_list_id,
            SubjectClass.subject_id == subject_id,
        )
    )
    return result.scalar_one_or_none()


async def list_chapters(db: AsyncSession, subject_class_id: int) -> list[Chapter]:
    """Chapters ordered by number then name."""
    result = await db.execute(
        select(Chapter)
        .where(Chapter.subject_class_id == subject_class_id)
        .order_by(asc(Chapter.chapter_number), asc(Chapter.chapter_name))
    )
    return list(result.scalars().all())
