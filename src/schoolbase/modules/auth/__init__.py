"""Authentication module - Student, school-admin and platform-admin logins."""

from schoolbase.modules.auth.schemas import (
    AdminLoginRequest,
    SchoolAdminLoginRequest,
    StudentLoginEntry,
    StudentLoginRequest,
)

__all__ = [
    "AdminLoginRequest",
    "SchoolAdminLoginRequest",
    "StudentLoginEntry",
    "StudentLoginRequest",
]
