"""initial schema

Revision ID: 3b7c9d1e2f40
Revises:
Create Date: 2026-02-02 12:00:00.000000

Creates the multi-tenant schema:
1. Tenant and identity tables (schools, users)
2. Shared curriculum reference data (classlist, subjects, subject_classes, chapters)
3. Per-school tables (students, teachers, classes, enrollments)

students carries a (user_id, school_id) unique constraint so a user can
hold at most one profile per school.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3b7c9d1e2f40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

GENDER_VALUES = ("male", "female", "other")
STUDENT_STATUS_VALUES = ("active", "inactive", "suspended", "graduated", "transferred")
STREAM_VALUES = ("science", "arts", "commerce")


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables."""
    bind = op.get_bind()

    gender_enum = postgresql.ENUM(*GENDER_VALUES, name="gender", create_type=False)
    student_status_enum = postgresql.ENUM(
        *STUDENT_STATUS_VALUES, name="student_status", create_type=False
    )
    stream_enum = postgresql.ENUM(*STREAM_VALUES, name="stream", create_type=False)
    for enum in (gender_enum, student_status_enum, stream_enum):
        enum.create(bind, checkfirst=True)

    # Tenants
    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("pin_code", sa.String(length=10), nullable=True),
        sa.Column("owner_name", sa.String(length=255), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=20), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)

    # Login identities
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_phone"), "users", ["phone"], unique=True)

    # Curriculum reference data
    op.create_table(
        "classlist",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("class_name", sa.String(length=100), nullable=False),
        sa.Column("class_number", sa.Integer(), nullable=False),
        sa.Column("stream", stream_enum, nullable=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_classlist_class_name"), "classlist", ["class_name"], unique=False)
    op.create_index(op.f("ix_classlist_class_number"), "classlist", ["class_number"], unique=False)
    op.create_index("ix_classlist_number_stream", "classlist", ["class_number", "stream"], unique=False)

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subjects_name"), "subjects", ["name"], unique=False)

    op.create_table(
        "subject_classes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.Column("class_list_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["class_list_id"], ["classlist.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "subject_id", "class_list_id", name="uq_subject_classes_subject_classlist"
        ),
    )
    op.create_index(op.f("ix_subject_classes_subject_id"), "subject_classes", ["subject_id"])
    op.create_index(op.f("ix_subject_classes_class_list_id"), "subject_classes", ["class_list_id"])

    op.create_table(
        "chapters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("subject_class_id", sa.Integer(), nullable=False),
        sa.Column("chapter_name", sa.String(length=255), nullable=False),
        sa.Column("chapter_number", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["subject_class_id"], ["subject_classes.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_chapters_subject_class_id"), "chapters", ["subject_class_id"])

    # Per-school tables
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        _updated_at(),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("gender", gender_enum, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("father_name", sa.String(length=200), nullable=True),
        sa.Column("mother_name", sa.String(length=200), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("aadhar_number", sa.String(length=20), nullable=True),
        sa.Column(
            "enrollment_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("status", student_status_enum, server_default="active", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "school_id", name="uq_students_user_school"),
    )
    op.create_index(op.f("ix_students_school_id"), "students", ["school_id"])
    op.create_index(op.f("ix_students_user_id"), "students", ["user_id"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        _updated_at(),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("gender", gender_enum, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column(
            "joining_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("phone"),
    )
    op.create_index(op.f("ix_teachers_school_id"), "teachers", ["school_id"])
    op.create_index(op.f("ix_teachers_employee_id"), "teachers", ["employee_id"])
    op.create_index("ix_teachers_school_employee", "teachers", ["school_id", "employee_id"])

    op.create_table(
        "classes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        _updated_at(),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("class_list_id", sa.Integer(), nullable=False),
        sa.Column("session", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["class_list_id"], ["classlist.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint(
            "school_id",
            "session",
            "class_list_id",
            "section",
            name="uq_classes_school_session_classlist_section",
        ),
    )
    op.create_index(op.f("ix_classes_school_id"), "classes", ["school_id"])
    op.create_index(op.f("ix_classes_class_list_id"), "classes", ["class_list_id"])
    op.create_index(op.f("ix_classes_session"), "classes", ["session"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _created_at(),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column(
            "enrollment_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["class_id"], ["classes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("student_id", "class_id", name="uq_enrollments_student_class"),
    )
    op.create_index(op.f("ix_enrollments_student_id"), "enrollments", ["student_id"])
    op.create_index(op.f("ix_enrollments_class_id"), "enrollments", ["class_id"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("enrollments")
    op.drop_table("classes")
    op.drop_table("teachers")
    op.drop_table("students")
    op.drop_table("chapters")
    op.drop_table("subject_classes")
    op.drop_table("subjects")
    op.drop_table("classlist")
    op.drop_table("users")
    op.drop_table("schools")

    bind = op.get_bind()
    for name in ("stream", "student_status", "gender"):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
