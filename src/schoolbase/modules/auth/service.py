"""
Authentication Service Layer

Login flows for the three kinds of caller:

- Students log in with their user phone and password and get one entry
  per school profile. Only active profiles with an active enrollment
  receive a token.
- School admins log in with the school code, the school's contact phone
  and the password a platform admin set for the school.
- The platform admin logs in with the credentials from configuration.

Verification of issued tokens lives in ``schoolbase.core.auth``.
"""

import hmac
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import PlatformAdminPrincipal, SchoolAdminPrincipal, StudentPrincipal
from schoolbase.core.config import settings
from schoolbase.core.security import create_access_token, verify_password
from schoolbase.modules.auth.schemas import (
    AdminLoginResponse,
    AdminUser,
    SchoolAdminLoginRequest,
    SchoolAdminLoginResponse,
    SchoolSummary,
    StudentLoginEntry,
)
from schoolbase.modules.enrollments import repository as enrollment_repository
from schoolbase.modules.schools.repository import SchoolRepository
from schoolbase.modules.shared.errors import NotFoundError, ServiceError, ValidationFailedError
from schoolbase.modules.shared.helpers import normalize_phone
from schoolbase.modules.students import repository as student_repository
from schoolbase.modules.students.models import StudentStatus
from schoolbase.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

NO_ENROLLMENT_MESSAGE = "No active enrollment found."


class InvalidCredentialsError(ServiceError):
    def __init__(self, message: str):
        super().__init__("Unauthorized", message, error_code="INVALID_CREDENTIALS", status_code=401)


class PasswordNotSetError(ServiceError):
    def __init__(self):
        super().__init__(
            "Password not set",
            "Password has not been set for this school. "
            "Please contact the administrator to set up your password.",
            error_code="PASSWORD_NOT_SET",
            status_code=403,
        )


class AdminNotConfiguredError(ServiceError):
    def __init__(self):
        super().__init__(
            "Admin authentication is not configured",
            error_code="ADMIN_NOT_CONFIGURED",
            status_code=500,
        )


def format_lifetime(minutes: int) -> str:
    """Render a token lifetime the way clients expect it ("7d", "24h", "30m")."""
    if minutes % (24 * 60) == 0 and minutes >= 7 * 24 * 60:
        return f"{minutes // (24 * 60)}d"
    if minutes % 60 == 0:
        return f"{minutes // 60}h"
    return f"{minutes}m"


async def student_login(db: AsyncSession, phone: str, password: str) -> list[StudentLoginEntry]:
    """
    Authenticate a user and list their student profiles across schools.

    Args:
        db: Database session
        phone: Raw phone; normalized before lookup
        password: Plaintext password

    Returns:
        One entry per profile, in profile id order

    Raises:
        InvalidCredentialsError: Unknown phone, wrong password, or no usable profile
        NotFoundError: The user has no student profile at all
    """
    user = await UserRepository.get_by_phone(db, normalize_phone(phone))
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Student login rejected: invalid credentials")
        raise InvalidCredentialsError("Invalid phone number or password")

    profiles = await student_repository.list_for_user(db, user.id)
    if not profiles:
        raise NotFoundError("No student profile found for this user")

    enrollments = await enrollment_repository.list_for_students(
        db, [student.id for student, _ in profiles], active_only=True
    )
    # Rows come newest first, so the first one seen per student wins
    latest: dict[int, dict] = {}
    for row in enrollments:
        latest.setdefault(row["student_id"], row)

    entries: list[StudentLoginEntry] = []
    for student, school_name in profiles:
        if student.status != StudentStatus.ACTIVE:
            entries.append(
                StudentLoginEntry(
                    school_name=school_name,
                    name=student.name,
                    info_message=f"Student status is {student.status.value}.",
                )
            )
            continue

        enrollment = latest.get(student.id)
        if enrollment is None:
            entries.append(
                StudentLoginEntry(
                    school_name=school_name,
                    name=student.name,
                    info_message=NO_ENROLLMENT_MESSAGE,
                )
            )
            continue

        principal = StudentPrincipal(
            school_id=student.school_id,
            student_id=student.id,
            user_id=user.id,
            enrollment_id=enrollment["enrollment_id"],
        )
        entries.append(
            StudentLoginEntry(
                token=create_access_token(principal.to_claims()),
                school_name=school_name,
                name=student.name,
                class_name=enrollment["class_name"],
                section=enrollment["section"],
            )
        )

    if not any(entry.token for entry in entries):
        logger.warning(f"Student login for user {user.id} rejected: no active enrollment")
        raise InvalidCredentialsError("No active enrollment found for any student profile")

    logger.info(f"User {user.id} logged in with {len(entries)} student profile(s)")
    return entries


async def school_admin_login(db: AsyncSession, data: SchoolAdminLoginRequest) -> SchoolAdminLoginResponse:
    """
    Authenticate a school admin.

    The phone must match the school's contact phone once both are
    normalized.

    Raises:
        InvalidCredentialsError: Unknown code, wrong phone or wrong password
        PasswordNotSetError: The school has no password yet
    """
    invalid = InvalidCredentialsError("Invalid school code, phone number, or password")

    school = await SchoolRepository.get_by_code(db, data.school_code)
    if school is None:
        logger.warning("School-admin login rejected: unknown school code")
        raise invalid

    if normalize_phone(school.contact_phone) != normalize_phone(data.phone):
        logger.warning(f"School-admin login rejected for school {school.id}: phone mismatch")
        raise invalid

    if not school.has_password:
        raise PasswordNotSetError()

    if not verify_password(data.password, school.password_hash):
        logger.warning(f"School-admin login rejected for school {school.id}: wrong password")
        raise invalid

    token = create_access_token(SchoolAdminPrincipal(school_id=school.id).to_claims())
    logger.info(f"School admin logged in: school {school.id}")

    return SchoolAdminLoginResponse(
        token=token,
        school=SchoolSummary.model_validate(school),
        expires_in=format_lifetime(settings.jwt_expires_minutes),
    )


def platform_admin_login(username: str | None, password: str | None) -> AdminLoginResponse:
    """
    Authenticate the platform admin against the configured credentials.

    Raises:
        ValidationFailedError: Username or password missing
        AdminNotConfiguredError: No credentials configured
        InvalidCredentialsError: Credentials do not match
    """
    if not username or not password:
        raise ValidationFailedError("Username and password are required")

    if not settings.admin_username or not settings.admin_password:
        logger.error("Admin credentials are not configured")
        raise AdminNotConfiguredError()

    username_ok = hmac.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.admin_password.encode())
    if not (username_ok and password_ok):
        logger.warning("Platform admin login rejected")
        raise InvalidCredentialsError("Invalid username or password")

    principal = PlatformAdminPrincipal(username=settings.admin_username)
    token = create_access_token(
        principal.to_claims(),
        expires_minutes=settings.admin_token_expires_minutes,
    )
    logger.info("Platform admin logged in")

    return AdminLoginResponse(
        user=AdminUser(username=principal.username, role=principal.role),
        token=token,
        expires_in=format_lifetime(settings.admin_token_expires_minutes),
    )
