"""
School Models

Database model for the school (tenant) root.
Every student, teacher and class row belongs to exactly one school and is
removed with it.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.modules.shared import BaseModel


class School(BaseModel):
    """
    School tenant model.

    ``code`` is stored upper-case and compared case-insensitively.
    ``password_hash`` stays NULL until a platform admin sets a password,
    which blocks school-admin login for that school.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )

    # Location
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pin_code: Mapped[str | None] = mapped_column(String(10), nullable=True)

    # Owner / contact
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str] = mapped_column(String(20), nullable=False)

    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def __repr__(self) -> str:
        return f"<School(id={self.id}, code={self.code})>"
