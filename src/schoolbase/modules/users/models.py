"""
User Models

A User is a login identity keyed by phone number. It is independent of any
school; student profiles in one or more schools point back to it.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from schoolbase.modules.shared import BaseModel


class User(BaseModel):
    """Phone + password identity shared by all of a person's student profiles."""

    __tablename__ = "users"

    # Stored normalized (no spaces, dashes or parentheses)
    phone: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id})>"
