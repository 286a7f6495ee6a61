"""
Shared Helpers

Small utilities used across modules: phone normalization, unique-violation
classification and pagination.
"""

import math
import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError

_PHONE_STRIP_RE = re.compile(r"[\s\-()]")

# PostgreSQL SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"

# SQLite extended result codes
SQLITE_CONSTRAINT_PRIMARYKEY = 1555
SQLITE_CONSTRAINT_UNIQUE = 2067

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_phone(phone: str) -> str:
    """Strip spaces, dashes and parentheses from a phone number."""
    return _PHONE_STRIP_RE.sub("", phone.strip())


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    Return True if ``exc`` was raised by a unique constraint.

    Uses the driver's structured error code, never the message text:
    asyncpg/psycopg expose the SQLSTATE, sqlite3 the extended error code.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == PG_UNIQUE_VIOLATION

    sqlite_code = getattr(orig, "sqlite_errorcode", None)
    return sqlite_code in (SQLITE_CONSTRAINT_UNIQUE, SQLITE_CONSTRAINT_PRIMARYKEY)


def clamp_page(page: int | None) -> int:
    return max(1, page or 1)


def clamp_limit(limit: int | None, default: int = DEFAULT_PAGE_SIZE) -> int:
    return min(MAX_PAGE_SIZE, max(1, limit or default))


def blank_to_none(value: str | None) -> str | None:
    """Trim a string and turn an empty result into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class CamelModel(BaseModel):
    """Pydantic base that speaks camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Pagination block returned by every list endpoint."""

    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "Pagination":
        total_pages = math.ceil(total_count / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
