"""
Class Models

A school's concrete class (grade template + session + section).
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.modules.shared import BaseModel, TimestampMixin


class SchoolClass(BaseModel, TimestampMixin):
    """
    Class instantiated by a school from a ClassList template.

    Unique per (school, session, template, section). Section is stored
    upper-case. A class can only be deleted once it has no active
    enrollments; inactive enrollments go with it.
    """

    __tablename__ = "classes"
    __table_args__ = (
        UniqueConstraint(
            "school_id",
            "session",
            "class_list_id",
            "section",
            name="uq_classes_school_session_classlist_section",
        ),
    )

    school_id: Mapped[int] = mapped_column(
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_list_id: Mapped[int] = mapped_column(
        ForeignKey("classlist.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    session: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    section: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<SchoolClass(id={self.id}, school_id={self.school_id}, section={self.section})>"
