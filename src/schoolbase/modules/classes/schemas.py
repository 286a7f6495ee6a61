"""
Class Schemas

Request validation and response shapes for school classes.
"""

from datetime import datetime
from typing import Annotated

from pydantic import AliasChoices, Field, StringConstraints

from schoolbase.modules.curriculum.models import Stream
from schoolbase.modules.shared.helpers import CamelModel
from schoolbase.modules.students.models import Gender, StudentStatus

SessionStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
SectionStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class ClassCreate(CamelModel):
    """Provision a class from a grade template."""

    class_list_id: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("classListId", "classId", "class_list_id"),
        description="Grade template the class is built from",
    )
    session: SessionStr = Field(..., description="Academic session, e.g. 2024-25")
    section: SectionStr = Field(..., description="Section label, stored upper-cased")


class ClassUpdate(CamelModel):
    session: SessionStr | None = None
    section: SectionStr | None = None


class ClassStudent(CamelModel):
    """A student actively enrolled in a class."""

    id: int
    name: str
    email: str
    gender: Gender
    status: StudentStatus
    enrollment_id: int
    enrollment_date: datetime
    is_active: bool


class ClassResponse(CamelModel):
    id: int
    class_list_id: int
    class_name: str
    class_number: int
    stream: Stream | None = None
    class_code: str
    session: str
    section: str
    created_at: datetime
    updated_at: datetime
    student_count: int = 0
    students: list[ClassStudent] | None = None
