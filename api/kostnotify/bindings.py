"""
Telegram identity bindings.

A binding links one user account to one Telegram chat. The table carries
unique constraints on ``user_id``, ``phone`` and ``chat_id``; rebinding a user
updates the existing row, so a user never has more than one binding.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kostnotify.exceptions import StorageError
from kostnotify.models.telegram import UserTelegram
from kostnotify.models.user import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("username", "first_name", "last_name")


class BindingStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_active_by_phone(self, phone: str) -> Optional[UserTelegram]:
        return await self._find_active(UserTelegram.phone == phone)

    async def find_active_by_chat_id(self, chat_id: str) -> Optional[UserTelegram]:
        return await self._find_active(UserTelegram.chat_id == str(chat_id))

    async def find_active_for_user(self, user_id: uuid.UUID) -> Optional[UserTelegram]:
        return await self._find_active(UserTelegram.user_id == user_id)

    async def _find_active(self, condition) -> Optional[UserTelegram]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UserTelegram).where(condition, UserTelegram.is_active.is_(True))
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to query telegram bindings") from exc

    async def upsert_for_user(
        self,
        user: User,
        chat_id: str,
        profile: Optional[dict] = None,
    ) -> UserTelegram:
        """
        Bind ``user`` to ``chat_id``, reusing the user's existing row if any.

        The row is (re)activated, the phone is copied from the current user
        record and ``registered_at`` is refreshed. If a concurrent call inserts
        a row for the same user first, the unique constraint on ``user_id``
        rejects our insert and the write is retried once as an update.
        """
        profile = profile or {}
        try:
            async with self._session_factory() as session:
                binding = await self._apply(session, user, str(chat_id), profile)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    binding = await self._apply(session, user, str(chat_id), profile)
                    await session.commit()
                await session.refresh(binding)
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to bind telegram chat %s to user %s: %s", chat_id, user.id, exc
            )
            raise StorageError(f"Failed to bind telegram chat for user {user.id}") from exc

        logger.info("Telegram chat %s bound to user %s", binding.chat_id, user.id)
        return binding

    async def _apply(
        self,
        session: AsyncSession,
        user: User,
        chat_id: str,
        profile: dict,
    ) -> UserTelegram:
        result = await session.execute(
            select(UserTelegram).where(UserTelegram.user_id == user.id)
        )
        binding = result.scalar_one_or_none()
        if binding is None:
            binding = UserTelegram(user_id=user.id)
            session.add(binding)

        binding.chat_id = chat_id
        binding.phone = user.phone
        for field in PROFILE_FIELDS:
            setattr(binding, field, profile.get(field))
        binding.is_active = True
        binding.registered_at = datetime.now(timezone.utc)
        return binding

    async def deactivate(self, user: User) -> bool:
        """Soft-deactivate the user's binding. Returns False when none exists."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UserTelegram).where(UserTelegram.user_id == user.id)
                )
                binding = result.scalar_one_or_none()
                if binding is None:
                    return False
                binding.is_active = False
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to deactivate telegram binding for user {user.id}") from exc

        logger.info("Telegram binding deactivated for user %s", user.id)
        return True

    async def list_bindings(
        self,
        active: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[UserTelegram], int]:
        conditions = []
        if active is not None:
            conditions.append(UserTelegram.is_active.is_(active))
        try:
            async with self._session_factory() as session:
                total = (
                    await session.execute(
                        select(func.count()).select_from(UserTelegram).where(*conditions)
                    )
                ).scalar() or 0
                result = await session.execute(
                    select(UserTelegram)
                    .where(*conditions)
                    .order_by(UserTelegram.registered_at.desc())
                    .limit(limit)
                    .offset(offset)
                )
                return list(result.scalars().all()), total
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list telegram bindings") from exc
