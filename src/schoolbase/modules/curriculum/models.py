"""
Curriculum Models

Read-mostly reference data shared by all schools: grade/stream templates
(ClassList), subjects, the subject-to-template link and chapters.
"""

from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.core.database import Base


class Stream(str, Enum):
    """Senior-secondary stream; templates for grades 1-10 have none."""

    SCIENCE = "science"
    ARTS = "arts"
    COMMERCE = "commerce"


class ClassList(Base):
    """
    Grade template such as "9" or "11-SCIENCE".

    Schools instantiate their own classes from these templates.
    """

    __tablename__ = "classlist"
    __table_args__ = (Index("ix_classlist_number_stream", "class_number", "stream"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    class_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    class_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    stream: Mapped[Stream | None] = mapped_column(
        SAEnum(Stream, name="stream", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ClassList(id={self.id}, code={self.code})>"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)


class SubjectClass(Base):
    """Link between a subject and a grade template."""

    __tablename__ = "subject_classes"
    __table_args__ = (
        UniqueConstraint("subject_id", "class_list_id", name="uq_subject_classes_subject_classlist"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[int] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_list_id: Mapped[int] = mapped_column(
        ForeignKey("classlist.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Chapter(Base):
    __tablename__ = "chapters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_class_id: Mapped[int] = mapped_column(
        ForeignKey("subject_classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chapter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    chapter_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
