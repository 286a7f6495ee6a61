"""
School Service Layer

Platform-admin management of school tenants.

Codes are unique ignoring case and stored upper-case. Two schools may not
share a name within the same city. A school can only be deleted once it
owns no students, teachers or classes.
"""

import logging
import re
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.security import hash_password
from schoolbase.modules.schools.models import School
from schoolbase.modules.schools.repository import SchoolRepository
from schoolbase.modules.schools.schemas import (
    CityCount,
    CodeCheckResponse,
    RecentSchools,
    SchoolCreate,
    SchoolResponse,
    SchoolStats,
    SchoolUpdate,
    StateCount,
)
from schoolbase.modules.shared.errors import ConflictError, NotFoundError, ValidationFailedError
from schoolbase.modules.shared.helpers import Pagination, blank_to_none, is_unique_violation

logger = logging.getLogger(__name__)

CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9+\-\s()]+$")
PIN_CODE_RE = re.compile(r"^[0-9]{5,10}$")

MAX_CODE_LENGTH = 50
MIN_PASSWORD_LENGTH = 6

SORT_FIELDS = {"name", "code", "city", "createdAt"}

CODE_FORMAT_MESSAGE = "School code must contain only alphanumeric characters, hyphens, and underscores"
CODE_LENGTH_MESSAGE = "School code must be 50 characters or less"


def _invalid(message: str) -> ValidationFailedError:
    return ValidationFailedError(message, message)


def _code_taken() -> ConflictError:
    return ConflictError(
        "School code already exists",
        "School code already exists. Please use a unique code.",
    )


def _name_city_taken() -> ConflictError:
    return ConflictError(
        "Duplicate school",
        "A school with this name already exists in this city",
    )


def _check_code_format(code: str) -> None:
    if not CODE_RE.match(code):
        raise _invalid(CODE_FORMAT_MESSAGE)
    if len(code) > MAX_CODE_LENGTH:
        raise _invalid(CODE_LENGTH_MESSAGE)


def _check_optional_formats(data: SchoolCreate) -> None:
    email = blank_to_none(data.contact_email)
    if email is not None and not EMAIL_RE.match(email):
        raise _invalid("Invalid email format")

    pin_code = blank_to_none(data.pin_code)
    if pin_code is not None and not PIN_CODE_RE.match(pin_code):
        raise _invalid("Invalid pin code format (should be 5-10 digits)")

    if data.password and len(data.password) < MIN_PASSWORD_LENGTH:
        raise _invalid("Password must be at least 6 characters")


def _lower_or_none(value: str | None) -> str | None:
    value = blank_to_none(value)
    return value.lower() if value else None


def to_response(school: School) -> SchoolResponse:
    return SchoolResponse.model_validate(school)


async def create_school(db: AsyncSession, data: SchoolCreate) -> SchoolResponse:
    """
    Create a school.

    Args:
        db: Database session
        data: Raw fields from the platform admin

    Returns:
        The created school (``hasPassword`` instead of the hash)

    Raises:
        ValidationFailedError: Missing or malformed field
        ConflictError: Code taken, or same name already in the city
    """
    name = blank_to_none(data.name)
    code = blank_to_none(data.code)
    contact_phone = blank_to_none(data.contact_phone)

    if name is None:
        raise _invalid("School name is required")
    if code is None:
        raise _invalid("School code is required")
    if contact_phone is None:
        raise _invalid("Contact phone number is required")

    _check_code_format(code)
    if not PHONE_RE.match(contact_phone):
        raise _invalid("Invalid phone format")
    _check_optional_formats(data)

    if await SchoolRepository.code_exists(db, code):
        raise _code_taken()

    city = blank_to_none(data.city)
    if city is not None and await SchoolRepository.name_city_exists(db, name, city):
        raise _name_city_taken()

    password_hash = hash_password(data.password) if data.password else None

    try:
        school = await SchoolRepository.create(
            db,
            name=name,
            code=code.upper(),
            contact_phone=contact_phone,
            address=blank_to_none(data.address),
            city=city,
            state=blank_to_none(data.state),
            pin_code=blank_to_none(data.pin_code),
            owner_name=blank_to_none(data.owner_name),
            contact_email=_lower_or_none(data.contact_email),
            password_hash=password_hash,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            raise _code_taken() from e
        raise

    return to_response(school)


async def list_schools(
    db: AsyncSession,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[SchoolResponse], Pagination]:
    if sort_by not in SORT_FIELDS:
        sort_by = "createdAt"

    schools, total = await SchoolRepository.list_schools(
        db,
        search=search,
        sort_by=sort_by,
        sort_order="asc" if sort_order == "asc" else "desc",
        offset=(page - 1) * limit,
        limit=limit,
    )
    return [to_response(s) for s in schools], Pagination.build(page, limit, total)


async def get_school(db: AsyncSession, school_id: int) -> SchoolResponse:
    school = await SchoolRepository.get_by_id(db, school_id)
    if school is None:
        raise NotFoundError("School not found")
    return to_response(school)


def _update_values(data: SchoolUpdate) -> dict[str, Any]:
    """Validate the fields that were sent and turn them into column values."""
    sent = data.model_fields_set
    values: dict[str, Any] = {}

    if "name" in sent:
        name = blank_to_none(data.name)
        if name is None:
            raise _invalid("School name cannot be empty")
        values["name"] = name

    if "code" in sent:
        code = blank_to_none(data.code)
        if code is None:
            raise _invalid("School code cannot be empty")
        _check_code_format(code)
        values["code"] = code.upper()

    if "contact_phone" in sent:
        contact_phone = blank_to_none(data.contact_phone)
        if contact_phone is None:
            raise _invalid("Contact phone number cannot be empty")
        if not PHONE_RE.match(contact_phone):
            raise _invalid("Invalid phone format")
        values["contact_phone"] = contact_phone

    _check_optional_formats(data)

    for field in ("address", "city", "state", "pin_code", "owner_name"):
        if field in sent:
            values[field] = blank_to_none(getattr(data, field))

    if "contact_email" in sent:
        values["contact_email"] = _lower_or_none(data.contact_email)

    if data.password:
        values["password_hash"] = hash_password(data.password)

    return values


async def update_school(db: AsyncSession, school_id: int, data: SchoolUpdate) -> SchoolResponse:
    """
    Update the fields that were sent. An empty password leaves the current one.

    Raises:
        NotFoundError: If the school does not exist
        ValidationFailedError: Malformed field, or nothing to update
        ConflictError: Code taken, or same name already in the city
    """
    school = await SchoolRepository.get_by_id(db, school_id)
    if school is None:
        raise NotFoundError("School not found")

    values = _update_values(data)
    if not values:
        raise _invalid("No fields to update")

    if "code" in values and await SchoolRepository.code_exists(db, values["code"], exclude_id=school_id):
        raise _code_taken()

    name = values.get("name")
    city = values.get("city")
    if name and city and await SchoolRepository.name_city_exists(db, name, city, exclude_id=school_id):
        raise _name_city_taken()

    try:
        school = await SchoolRepository.update(db, school, values)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            raise _code_taken() from e
        raise

    return to_response(school)


async def delete_school(db: AsyncSession, school_id: int) -> SchoolResponse:
    """
    Delete a school that owns no data.

    Returns:
        The deleted school

    Raises:
        NotFoundError: If the school does not exist
        ConflictError: If students, teachers or classes still reference it
    """
    school = await SchoolRepository.get_by_id(db, school_id)
    if school is None:
        raise NotFoundError("School not found")

    counts = await SchoolRepository.count_dependents(db, school_id)
    if sum(counts.values()) > 0:
        raise ConflictError(
            "Cannot delete school",
            f"Cannot delete school. It has {counts['students']} students, "
            f"{counts['teachers']} teachers, and {counts['classes']} classes associated with it. "
            "Please remove all associated data first.",
        )

    deleted = to_response(school)
    await SchoolRepository.delete(db, school_id)
    await db.commit()
    return deleted


async def check_code(db: AsyncSession, code: str, exclude_id: int | None = None) -> CodeCheckResponse:
    """
    Report whether a code could be used for a new (or the excluded) school.

    Format problems are reported as unavailable with a reason rather than
    as errors.
    """
    code = code.strip()

    if not CODE_RE.match(code):
        return CodeCheckResponse(
            available=False,
            reason="Code must contain only alphanumeric characters, hyphens, and underscores",
        )
    if len(code) > MAX_CODE_LENGTH:
        return CodeCheckResponse(available=False, reason="Code must be 50 characters or less")

    if exclude_id is not None and exclude_id <= 0:
        exclude_id = None

    if await SchoolRepository.code_exists(db, code, exclude_id=exclude_id):
        return CodeCheckResponse(available=False, reason="This code is already in use by another school")

    return CodeCheckResponse(available=True, suggested_code=code.upper())


async def get_stats(db: AsyncSession) -> SchoolStats:
    now = datetime.now(UTC)
    stats = await SchoolRepository.get_stats(
        db,
        since_30_days=now - timedelta(days=30),
        since_7_days=now - timedelta(days=7),
    )
    return SchoolStats(
        total_schools=stats["total_schools"],
        recent_schools=RecentSchools(
            last_30_days=stats["last_30_days"],
            last_7_days=stats["last_7_days"],
        ),
        by_state=[StateCount(state=row["value"], count=row["count"]) for row in stats["by_state"]],
        by_city=[CityCount(city=row["value"], count=row["count"]) for row in stats["by_city"]],
    )
