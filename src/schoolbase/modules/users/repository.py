"""
User Repository

Database operations for user identities.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.modules.users.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        phone: str,
        password_hash: str,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            phone: Normalized phone number (unique)
            password_hash: Bcrypt hash of the password

        Returns:
            Created User instance
        """
        user = User(phone=phone, password_hash=password_hash)

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id}")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_phone(db: AsyncSession, phone: str) -> User | None:
        """
        Get a user by normalized phone number.

        Args:
            db: Database session
            phone: Normalized phone number

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.phone == phone))
        return result.scalar_one_or_none()

    @staticmethod
    async def phone_exists(db: AsyncSession, phone: str) -> bool:
        """
        Check if a phone number is already registered.

        Args:
            db: Database session
            phone: Normalized phone number

        Returns:
            True if phone exists, False otherwise
        """
        user = await UserRepository.get_by_phone(db, phone)
        return user is not None
