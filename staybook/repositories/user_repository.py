# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for User database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.user import User


class UserRepository:
    """Repository for User CRUD operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID.

        Args:
            user_id: User primary key.

        Returns:
            User if found, None otherwise.
        """
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address.

        Args:
            email: Email address (case-insensitive).

        Returns:
            User if found, None otherwise.
        """
        result = await self._session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User entity to create.

        Returns:
            Created user with ID.
        """
        user.email = user.email.lower()
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user
