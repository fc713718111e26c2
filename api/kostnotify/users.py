"""Read-only access to host application accounts."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kostnotify.exceptions import StorageError
from kostnotify.models.user import User


class UserRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            async with self._session_factory() as session:
                return await session.get(User, user_id)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load user {user_id}") from exc

    async def find_by_phone(self, phone: str) -> Optional[User]:
        """Exact match on the stored phone number."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(User).where(User.phone == phone))
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to look up user by phone") from exc
