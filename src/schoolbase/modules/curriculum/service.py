"""
Curriculum Service Layer

Lookups over the shared grade templates, subjects and chapters.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.curriculum import repository
from schoolbase.modules.curriculum.schemas import (
    ChapterItem,
    ChaptersResponse,
    ClassListGroup,
    ClassListItem,
    ClassSubjectsResponse,
    SubjectItem,
)
from schoolbase.modules.shared.errors import NotFoundError

logger = logging.getLogger(__name__)


async def list_class_lists(db: AsyncSession, class_number: int | None = None) -> list[ClassListItem]:
    templates = await repository.list_class_lists(db, class_number)
    return [ClassListItem.model_validate(t) for t in templates]


def group_by_class_number(items: list[ClassListItem]) -> list[ClassListGroup]:
    """Group templates by class number, keeping their order."""
    groups: dict[int, ClassListGroup] = {}
    for item in items:
        group = groups.setdefault(
            item.class_number,
            ClassListGroup(class_number=item.class_number, classes=[]),
        )
        group.classes.append(item)
    return list(groups.values())


async def get_class_subjects(db: AsyncSession, class_list_id: int) -> ClassSubjectsResponse:
    """
    Get a template and the subjects taught in it.

    Raises:
        NotFoundError: If the template does not exist
    """
    template = await repository.get_class_list(db, class_list_id)
    if template is None:
        raise NotFoundError(f"Class with ID {class_list_id} not found")

    subjects = await repository.list_subjects(db, class_list_id)

    return ClassSubjectsResponse(
        class_id=template.id,
        class_name=template.class_name,
        class_number=template.class_number,
        stream=template.stream,
        code=template.code,
        subjects=[SubjectItem.model_validate(s) for s in subjects],
    )


async def get_chapters(db: AsyncSession, class_list_id: int, subject_id: int) -> ChaptersResponse:
    """
    Get the chapters of a subject within a template.

    Raises:
        NotFoundError: If the template, the subject or their link is missing
    """
    template = await repository.get_class_list(db, class_list_id)
    if template is None:
        raise NotFoundError(f"Class with ID {class_list_id} not found")

    subject = await repository.get_subject(db, subject_id)
    if subject is None:
        raise NotFoundError(f"Subject with ID {subject_id} not found")

    link = await repository.get_subject_class(db, class_list_id, subject_id)
    if link is None:
        raise NotFoundError(
            f"No subject-class relationship found for class ID {class_list_id} "
            f"and subject ID {subject_id}"
        )

    chapters = await repository.list_chapters(db, link.id)

    return ChaptersResponse(
        class_id=template.id,
        class_name=template.class_name,
        class_number=template.class_number,
        stream=template.stream,
        code=template.code,
        subject_id=subject.id,
        subject_name=subject.name,
        chapters=[ChapterItem.model_validate(c) for c in chapters],
    )
