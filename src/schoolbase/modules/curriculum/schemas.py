"""
Curriculum Schemas

Response shapes for the grade templates, subjects and chapters.
"""

from schoolbase.modules.curriculum.models import Stream
from schoolbase.modules.shared.helpers import CamelModel


class ClassListItem(CamelModel):
    id: int
    class_name: str
    class_number: int
    stream: Stream | None = None
    code: str


class ClassListGroup(CamelModel):
    """Templates sharing one class number (e.g. the three grade-11 streams)."""

    class_number: int
    classes: list[ClassListItem]


class SubjectItem(CamelModel):
    id: int
    name: str
    subject_class_id: int


class ChapterItem(CamelModel):
    id: int
    chapter_name: str
    chapter_number: int | None = None
    description: str | None = None


class ClassSubjectsResponse(CamelModel):
    class_id: int
    class_name: str
    class_number: int
    stream: Stream | None = None
    code: str
    subjects: list[SubjectItem]


class ChaptersResponse(CamelModel):
    class_id: int
    class_name: str
    class_number: int
    stream: Stream | None = None
    code: str
    subject_id: int
    subject_name: str
    chapters: list[ChapterItem]
