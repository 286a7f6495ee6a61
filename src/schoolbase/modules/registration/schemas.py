"""
Registration Schemas

Payloads for the first two registration steps: phone lookup and user
creation. Steps three and four live in the students and enrollments
modules.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from schoolbase.modules.enrollments.schemas import StudentEnrollment
from schoolbase.modules.shared.helpers import CamelModel, normalize_phone
from schoolbase.modules.students.models import StudentStatus


class NextStep(str, Enum):
    """What the operator should do after a registration step."""

    CREATE_USER = "CREATE_USER"
    CREATE_STUDENT = "CREATE_STUDENT"
    ENROLL_STUDENT = "ENROLL_STUDENT"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"


class CheckPhoneRequest(CamelModel):
    phone: str = Field(..., min_length=10, max_length=20)


class RegisteredStudent(CamelModel):
    id: int
    name: str
    email: str
    status: StudentStatus
    enrollments: list[StudentEnrollment]


class CheckPhoneResponse(CamelModel):
    user_exists: bool
    student_exists_in_school: bool
    user_id: int | None = None
    student: RegisteredStudent | None = None
    next_step: NextStep
    message: str


class UserCreate(CamelModel):
    phone: str = Field(..., min_length=10, max_length=20)
    password: str = Field(..., min_length=6)

    @field_validator("phone")
    @classmethod
    def normalized_phone_length(cls, value: str) -> str:
        if len(normalize_phone(value)) < 10:
            raise ValueError("Phone number must have at least 10 digits")
        return value


class UserResponse(CamelModel):
    id: int
    phone: str
    created_at: datetime


class UserCreatedResponse(CamelModel):
    user: UserResponse
    next_step: NextStep = NextStep.CREATE_STUDENT
    message: str = "User created successfully. Now create the student profile."
