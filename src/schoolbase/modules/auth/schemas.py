"""Authentication schemas."""

from pydantic import Field

from schoolbase.modules.shared.helpers import CamelModel


class StudentLoginRequest(CamelModel):
    """Student login with the phone and password of the user identity."""

    phone: str = Field(..., min_length=10, max_length=20)
    password: str = Field(..., min_length=6)


class StudentLoginEntry(CamelModel):
    """
    One student profile of the logged-in user.

    Profiles that can be used carry a ``token``; the others carry an
    ``info_message`` and no class or section.
    """

    token: str | None = None
    school_name: str
    name: str
    class_name: str | None = Field(None, serialization_alias="class")
    section: str | None = None
    info_message: str | None = None


class SchoolAdminLoginRequest(CamelModel):
    school_code: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=10, max_length=20)
    password: str = Field(..., min_length=6)


class SchoolSummary(CamelModel):
    id: int
    name: str
    code: str
    city: str | None = None
    state: str | None = None
    owner_name: str | None = None


class SchoolAdminLoginResponse(CamelModel):
    token: str
    school: SchoolSummary
    expires_in: str


class AdminLoginRequest(CamelModel):
    username: str | None = None
    password: str | None = None


class AdminUser(CamelModel):
    username: str
    role: str


class AdminLoginResponse(CamelModel):
    user: AdminUser
    token: str
    expires_in: str
