"""
Student Schemas

Request validation and response shapes for student profiles.
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints, model_validator

from schoolbase.modules.enrollments.schemas import StudentEnrollment
from schoolbase.modules.shared.helpers import CamelModel
from schoolbase.modules.students.models import Gender, StudentStatus

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]

# Fields that may be cleared with an explicit null on update
NULLABLE_FIELDS = {
    "address",
    "date_of_birth",
    "father_name",
    "mother_name",
    "category",
    "aadhar_number",
}


class StudentCreate(CamelModel):
    """Registration step 3: a profile for an existing user in the caller's school."""

    user_id: int = Field(..., gt=0)
    name: NameStr
    gender: Gender
    email: EmailStr
    address: str | None = None
    date_of_birth: date | None = None
    father_name: str | None = Field(None, max_length=200)
    mother_name: str | None = Field(None, max_length=200)
    category: str | None = Field(None, max_length=100)
    aadhar_number: str | None = Field(None, max_length=20)
    status: StudentStatus | None = None


class StudentUpdate(CamelModel):
    name: NameStr | None = None
    gender: Gender | None = None
    email: EmailStr | None = None
    address: str | None = None
    date_of_birth: date | None = None
    father_name: str | None = Field(None, max_length=200)
    mother_name: str | None = Field(None, max_length=200)
    category: str | None = Field(None, max_length=100)
    aadhar_number: str | None = Field(None, max_length=20)
    status: StudentStatus | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "StudentUpdate":
        for field in self.model_fields_set - NULLABLE_FIELDS:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class StudentResponse(CamelModel):
    id: int
    school_id: int
    user_id: int
    name: str
    gender: Gender
    email: str
    address: str | None = None
    date_of_birth: date | None = None
    father_name: str | None = None
    mother_name: str | None = None
    category: str | None = None
    aadhar_number: str | None = None
    enrollment_date: datetime
    status: StudentStatus
    created_at: datetime
    updated_at: datetime
    phone: str | None = None
    enrollments: list[StudentEnrollment] | None = None
