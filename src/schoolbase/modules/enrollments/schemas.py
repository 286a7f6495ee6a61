"""
Enrollment Schemas
"""

from datetime import datetime

from pydantic import Field

from schoolbase.modules.curriculum.models import Stream
from schoolbase.modules.shared.helpers import CamelModel
from schoolbase.modules.students.models import StudentStatus


class EnrollmentCreate(CamelModel):
    student_id: int = Field(..., gt=0, description="Student of the caller's school")
    class_id: int = Field(..., gt=0, description="Class of the caller's school")


class EnrollmentUpdate(CamelModel):
    """Toggle an enrollment or move it to another class."""

    is_active: bool | None = None
    class_id: int | None = Field(None, gt=0)


class EnrollmentResponse(CamelModel):
    id: int
    student_id: int
    student_name: str
    student_email: str
    student_status: StudentStatus
    class_id: int
    class_name: str
    class_number: int
    section: str
    session: str
    stream: Stream | None = None
    enrollment_date: datetime
    is_active: bool
    created_at: datetime


class StudentEnrollment(CamelModel):
    """Compact enrollment embedded in student payloads."""

    enrollment_id: int
    class_id: int
    class_name: str
    class_number: int
    stream: Stream | None = None
    section: str
    session: str
    enrollment_date: datetime
    is_active: bool
