"""
Teacher Models

Teachers belong to one school. They have no API surface yet; the school
deletion guard counts them.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.modules.shared import BaseModel, TimestampMixin
from schoolbase.modules.students.models import Gender, gender_type


class Teacher(BaseModel, TimestampMixin):
    """Teacher employed by a school."""

    __tablename__ = "teachers"
    __table_args__ = (Index("ix_teachers_school_employee", "school_id", "employee_id"),)

    school_id: Mapped[int] = mapped_column(
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    employee_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    gender: Mapped[Gender] = mapped_column(gender_type(), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    joining_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id}, school_id={self.school_id})>"
