"""
Student Models

A Student is a per-school profile of a User. The same person can hold
profiles in several schools, but at most one per school.
"""

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.modules.shared import BaseModel, TimestampMixin


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class StudentStatus(str, Enum):
    """Lifecycle status of a student profile."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    GRADUATED = "graduated"
    TRANSFERRED = "transferred"


def gender_type() -> SAEnum:
    return SAEnum(Gender, name="gender", values_callable=_enum_values)


def student_status_type() -> SAEnum:
    return SAEnum(StudentStatus, name="student_status", values_callable=_enum_values)


class Student(BaseModel, TimestampMixin):
    """
    Student profile scoped to one school.

    Only ``active`` students can be enrolled. Soft deletion sets the status
    to ``inactive`` and deactivates every enrollment of the student.
    """

    __tablename__ = "students"
    __table_args__ = (UniqueConstraint("user_id", "school_id", name="uq_students_user_school"),)

    school_id: Mapped[int] = mapped_column(
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    gender: Mapped[Gender] = mapped_column(gender_type(), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    aadhar_number: Mapped[str | None] = mapped_column(String(20), nullable=True)

    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    status: Mapped[StudentStatus] = mapped_column(
        student_status_type(),
        nullable=False,
        default=StudentStatus.ACTIVE,
        server_default=StudentStatus.ACTIVE.value,
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, school_id={self.school_id}, status={self.status.value})>"
