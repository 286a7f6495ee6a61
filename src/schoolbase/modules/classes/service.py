"""
Class Service Layer

Business rules for provisioning a school's classes from the shared grade
templates. Every operation is scoped to the caller's school; a class owned
by another school is reported as not found.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes import repository
from schoolbase.modules.classes.schemas import ClassCreate, ClassResponse, ClassStudent, ClassUpdate
from schoolbase.modules.curriculum import repository as curriculum_repository
from schoolbase.modules.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from schoolbase.modules.shared.helpers import Pagination, is_unique_violation

logger = logging.getLogger(__name__)

SORT_FIELDS = {"className", "session", "section", "createdAt"}


def _duplicate_error(class_name: str, section: str, session: str) -> ConflictError:
    return ConflictError(
        "Class already exists",
        f"Class {class_name} Section {section} for session {session} already exists",
    )


async def list_classes(
    db: AsyncSession,
    school_id: int,
    *,
    page: int,
    limit: int,
    session: str | None = None,
    class_number: int | None = None,
    sort_by: str = "className",
    sort_order: str = "asc",
) -> tuple[list[ClassResponse], Pagination]:
    """
    List a school's classes with their active student counts.

    Args:
        db: Database session
        school_id: Tenant scope
        page, limit: Already clamped pagination values
        session: Exact session filter
        class_number: Template class number filter
        sort_by: className, session, section or createdAt
        sort_order: asc or desc

    Returns:
        Tuple of (classes, pagination)
    """
    if sort_by not in SORT_FIELDS:
        sort_by = "className"

    rows, total = await repository.list_for_school(
        db,
        school_id,
        session=session,
        class_number=class_number,
        sort_by=sort_by,
        sort_order="desc" if sort_order == "desc" else "asc",
        offset=(page - 1) * limit,
        limit=limit,
    )

    counts = await repository.count_active_by_class(db, [row["id"] for row in rows])
    classes = [ClassResponse(**row, student_count=counts.get(row["id"], 0)) for row in rows]

    return classes, Pagination.build(page, limit, total)


async def create_class(db: AsyncSession, school_id: int, data: ClassCreate) -> ClassResponse:
    """
    Create a class for the school.

    The section is stored upper-cased and the session trimmed, so
    "a" and "A" name the same section.

    Raises:
        NotFoundError: If the template does not exist
        ConflictError: If the (session, template, section) class already exists
    """
    template = await curriculum_repository.get_class_list(db, data.class_list_id)
    if template is None:
        raise NotFoundError("Invalid class ID. Please select a valid class from the classlist.")

    session = data.session.strip()
    section = data.section.strip().upper()
    class_name = template.class_name
    if await repository.exists_duplicate(
        db,
        school_id=school_id,
        session=session,
        class_list_id=template.id,
        section=section,
    ):
        raise _duplicate_error(template.class_name, section, session)

    try:
        school_class = await repository.create(
            db,
            school_id=school_id,
            class_list_id=template.id,
            session=session,
            section=section,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Concurrent duplicate class rejected for school {school_id}")
            raise _duplicate_error(class_name, section, session) from e
        raise

    logger.info(f"School {school_id} created class {school_class.id} ({template.code} {section} {session})")

    return ClassResponse(
        id=school_class.id,
        class_list_id=template.id,
        class_name=template.class_name,
        class_number=template.class_number,
        stream=template.stream,
        class_code=template.code,
        session=school_class.session,
        section=school_class.section,
        created_at=school_class.created_at,
        updated_at=school_class.updated_at,
        student_count=0,
    )


async def get_class(db: AsyncSession, school_id: int, class_id: int) -> ClassResponse:
    """Get a class with its actively enrolled students."""
    row = await repository.get_detail(db, class_id, school_id)
    if row is None:
        raise NotFoundError("Class not found")

    students = await repository.list_active_students(db, class_id)

    return ClassResponse(
        **row,
        student_count=len(students),
        students=[ClassStudent(**s) for s in students],
    )


async def update_class(
    db: AsyncSession,
    school_id: int,
    class_id: int,
    data: ClassUpdate,
) -> ClassResponse:
    """
    Change a class's session and/or section.

    Raises:
        ValidationFailedError: If neither field is given
        NotFoundError: If the class is missing or belongs to another school
        ConflictError: If the change collides with an existing class
    """
    if data.session is None and data.section is None:
        raise ValidationFailedError("No fields to update provided")

    school_class = await repository.get_for_school(db, class_id, school_id)
    if school_class is None:
        raise NotFoundError("Class not found")

    session = data.session.strip() if data.session is not None else school_class.session
    section = data.section.strip().upper() if data.section is not None else school_class.section

    detail = await repository.get_detail(db, class_id, school_id)
    class_name = detail["class_name"] if detail else ""

    if await repository.exists_duplicate(
        db,
        school_id=school_id,
        session=session,
        class_list_id=school_class.class_list_id,
        section=section,
        exclude_id=class_id,
    ):
        raise _duplicate_error(class_name, section, session)

    try:
        await repository.update(db, school_class, session=session, section=section)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            raise _duplicate_error(class_name, section, session) from e
        raise

    row = await repository.get_detail(db, class_id, school_id)
    student_count = await repository.count_active_enrollments(db, class_id)
    return ClassResponse(**row, student_count=student_count)


async def delete_class(db: AsyncSession, school_id: int, class_id: int) -> None:
    """
    Delete a class that has no active enrollments.

    Raises:
        NotFoundError: If the class is missing or belongs to another school
        InvalidStateError: If students are still actively enrolled
    """
    school_class = await repository.get_for_school(db, class_id, school_id)
    if school_class is None:
        raise NotFoundError("Class not found")

    active = await repository.count_active_enrollments(db, class_id)
    if active > 0:
        raise InvalidStateError(
            "Cannot delete class",
            "This class has active enrollments. Please unenroll all students before deleting.",
        )

    await repository.delete_class(db, class_id)
    await db.commit()
    logger.info(f"School {school_id} deleted class {class_id}")
