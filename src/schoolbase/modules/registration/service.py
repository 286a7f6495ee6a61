"""
Registration Service Layer

The first two steps of registering a student:

1. ``check_phone`` - read-only lookup telling the operator which step comes
   next. Calling it twice gives the same answer.
2. ``create_user`` - create the phone/password login identity.

Each step commits on its own. Steps that race are caught by the unique
constraints and reported as conflicts.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext
from schoolbase.core.security import hash_password
from schoolbase.modules.enrollments import repository as enrollment_repository
from schoolbase.modules.enrollments.schemas import StudentEnrollment
from schoolbase.modules.registration.schemas import (
    CheckPhoneResponse,
    NextStep,
    RegisteredStudent,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
)
from schoolbase.modules.shared.errors import ConflictError
from schoolbase.modules.shared.helpers import is_unique_violation, normalize_phone
from schoolbase.modules.students import repository as student_repository
from schoolbase.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


async def check_phone(db: AsyncSession, tenant: TenantContext, phone: str) -> CheckPhoneResponse:
    """
    Work out the next registration step for a phone number.

    Args:
        db: Database session
        tenant: Calling school
        phone: Raw phone as typed by the operator

    Returns:
        CheckPhoneResponse with the next step and, when the student already
        exists in this school, the student and its active enrollments
    """
    user = await UserRepository.get_by_phone(db, normalize_phone(phone))
    if user is None:
        return CheckPhoneResponse(
            user_exists=False,
            student_exists_in_school=False,
            next_step=NextStep.CREATE_USER,
            message="Phone number is not registered. Create a new user account.",
        )

    student = await student_repository.get_by_user_and_school(db, user.id, tenant.school_id)
    if student is None:
        return CheckPhoneResponse(
            user_exists=True,
            student_exists_in_school=False,
            user_id=user.id,
            next_step=NextStep.CREATE_STUDENT,
            message="User account found. You can create a student profile for this school.",
        )

    enrollments = await enrollment_repository.list_for_students(db, [student.id], active_only=True)

    if enrollments:
        next_step = NextStep.ALREADY_ENROLLED
        message = f"Student is already registered and enrolled in {tenant.school_name}"
    else:
        next_step = NextStep.ENROLL_STUDENT
        message = "Student is registered but not enrolled in any class. You can enroll them now."

    return CheckPhoneResponse(
        user_exists=True,
        student_exists_in_school=True,
        user_id=user.id,
        student=RegisteredStudent(
            id=student.id,
            name=student.name,
            email=student.email,
            status=student.status,
            enrollments=[StudentEnrollment(**e) for e in enrollments],
        ),
        next_step=next_step,
        message=message,
    )


def check_phone_title(result: CheckPhoneResponse) -> str:
    """Envelope message matching the lookup outcome."""
    if not result.user_exists:
        return "Phone number available"
    if not result.student_exists_in_school:
        return "User found, student profile needed"
    return "Student already registered"


async def create_user(db: AsyncSession, data: UserCreate) -> UserCreatedResponse:
    """
    Create a login identity.

    Raises:
        ConflictError: If the normalized phone is already registered
    """
    phone = normalize_phone(data.phone)

    if await UserRepository.phone_exists(db, phone):
        raise ConflictError(
            "User already exists",
            "A user with this phone number already exists. "
            "Use the existing user ID to create a student profile.",
        )

    try:
        user = await UserRepository.create(db, phone=phone, password_hash=hash_password(data.password))
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            logger.warning("Concurrent user creation rejected for an existing phone")
            raise ConflictError(
                "Phone number already registered",
                "A user with this phone number already exists",
            ) from e
        raise

    return UserCreatedResponse(user=UserResponse.model_validate(user))
