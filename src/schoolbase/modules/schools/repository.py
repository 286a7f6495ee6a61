"""
School Repository

Database operations for school (tenant) management.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import and_, asc, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.classes.models import SchoolClass
from schoolbase.modules.schools.models import School
from schoolbase.modules.students.models import Student
from schoolbase.modules.teachers.models import Teacher

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "name": School.name,
    "code": School.code,
    "city": School.city,
    "createdAt": School.created_at,
}


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        code: str,
        contact_phone: str,
        address: str | None = None,
        city: str | None = None,
        state: str | None = None,
        pin_code: str | None = None,
        owner_name: str | None = None,
        contact_email: str | None = None,
        password_hash: str | None = None,
    ) -> School:
        """
        Create a new school record.

        Args:
            db: Database session
            name: School name
            code: Unique school code, already upper-cased
            contact_phone: Contact phone number (required)
            address: Street address (optional)
            city: City name (optional)
            state: State name (optional)
            pin_code: Postal code (optional)
            owner_name: Owner's name (optional)
            contact_email: Contact email, already lower-cased (optional)
            password_hash: Bcrypt hash of the school-admin password (optional)

        Returns:
            Created School instance
        """
        school = School(
            name=name,
            code=code,
            contact_phone=contact_phone,
            address=address,
            city=city,
            state=state,
            pin_code=pin_code,
            owner_name=owner_name,
            contact_email=contact_email,
            password_hash=password_hash,
        )

        db.add(school)
        await db.flush()
        await db.refresh(school)

        logger.info(f"Created school: {school.id} - {school.code}")
        return school

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: int) -> School | None:
        """
        Get a school by ID.

        Args:
            db: Database session
            school_id: School ID

        Returns:
            School instance or None if not found
        """
        result = await db.execute(select(School).where(School.id == school_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_code(db: AsyncSession, code: str) -> School | None:
        """Get a school by code, ignoring case."""
        result = await db.execute(
            select(School).where(func.lower(School.code) == code.strip().lower()).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def code_exists(db: AsyncSession, code: str, exclude_id: int | None = None) -> bool:
        """
        Check if a school code is taken (case-insensitive).

        Args:
            db: Database session
            code: Code to check
            exclude_id: School ID to ignore (the school being updated)

        Returns:
            True if another school already uses the code
        """
        query = select(School.id).where(func.lower(School.code) == code.strip().lower())
        if exclude_id is not None:
            query = query.where(School.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def name_city_exists(
        db: AsyncSession,
        name: str,
        city: str,
        exclude_id: int | None = None,
    ) -> bool:
        """Check for a school with the same name in the same city (case-insensitive)."""
        query = select(School.id).where(
            and_(
                func.lower(School.name) == name.strip().lower(),
                func.lower(School.city) == city.strip().lower(),
            )
        )
        if exclude_id is not None:
            query = query.where(School.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_schools(
        db: AsyncSession,
        *,
        search: str | None = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[School], int]:
        """
        Get a page of schools.

        Search matches name, code, city and state case-insensitively.

        Returns:
            Tuple of (schools, total_count)
        """
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    School.name.ilike(pattern),
                    School.code.ilike(pattern),
                    School.city.ilike(pattern),
                    School.state.ilike(pattern),
                )
            )

        sort_column = SORTABLE_COLUMNS.get(sort_by, School.created_at)
        order = asc(sort_column) if sort_order == "asc" else desc(sort_column)

        count_result = await db.execute(select(func.count(School.id)).where(*conditions))
        total = count_result.scalar_one()

        result = await db.execute(
            select(School).where(*conditions).order_by(order, School.id).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def update(db: AsyncSession, school: School, values: dict[str, Any]) -> School:
        """Apply ``values`` to ``school`` and flush."""
        for field, value in values.items():
            setattr(school, field, value)

        await db.flush()
        await db.refresh(school)

        logger.info(f"Updated school {school.id}: fields={sorted(values)}")
        return school

    @staticmethod
    async def delete(db: AsyncSession, school_id: int) -> None:
        await db.execute(delete(School).where(School.id == school_id))
        await db.flush()
        logger.info(f"Deleted school {school_id}")

    @staticmethod
    async def count_dependents(db: AsyncSession, school_id: int) -> dict[str, int]:
        """
        Count the students, teachers and classes owned by a school.

        Returns:
            Dict with ``students``, ``teachers`` and ``classes`` counts
        """
        counts = {}
        for key, model in (("students", Student), ("teachers", Teacher), ("classes", SchoolClass)):
            result = await db.execute(
                select(func.count(model.id)).where(model.school_id == school_id)
            )
            counts[key] = result.scalar_one()
        return counts

    @staticmethod
    async def get_stats(db: AsyncSession, *, since_30_days: datetime, since_7_days: datetime) -> dict:
        """
        Aggregate platform statistics.

        Returns:
            Dict with total, recent counts and the top-10 states and cities
        """
        total = (await db.execute(select(func.count(School.id)))).scalar_one()
        last_30 = (
            await db.execute(select(func.count(School.id)).where(School.created_at >= since_30_days))
        ).scalar_one()
        last_7 = (
            await db.execute(select(func.count(School.id)).where(School.created_at >= since_7_days))
        ).scalar_one()

        async def _top(column) -> list[dict]:
            count = func.count(School.id).label("count")
            result = await db.execute(
                select(column, count)
                .where(column.is_not(None), column != "")
                .group_by(column)
                .order_by(desc(count), column)
                .limit(10)
            )
            return [{"value": value, "count": n} for value, n in result.all()]

        return {
            "total_schools": total,
            "last_30_days": last_30,
            "last_7_days": last_7,
            "by_state": await _top(School.state),
            "by_city": await _top(School.city),
        }
