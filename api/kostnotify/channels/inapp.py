"""In-app channel adapter and notification-centre queries."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kostnotify.channels import IN_APP, ChannelAdapter, DeliveryResult, InAppMessage
from kostnotify.models.notification import Notification

logger = logging.getLogger(__name__)


class InAppAdapter(ChannelAdapter):
    """Persists one ``Notification`` row per delivery. The row is the audit trail."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return IN_APP

    async def deliver(self, payload: InAppMessage, target: Any) -> DeliveryResult:
        try:
            user_id = target if isinstance(target, uuid.UUID) else uuid.UUID(str(target))
        except ValueError:
            logger.error("Invalid in-app notification target %r", target)
            return DeliveryResult.failed(IN_APP, "invalid user id", target=target)

        try:
            async with self._session_factory() as session:
                record = Notification(
                    user_id=user_id,
                    type=payload.type,
                    title=payload.title,
                    message=payload.message,
                    data=payload.data,
                    action_url=payload.action_url,
                    priority=payload.priority,
                )
                session.add(record)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to store in-app notification for user %s: %s", user_id, exc)
            return DeliveryResult.failed(IN_APP, f"storage error: {exc.__class__.__name__}", target=user_id)

        logger.debug("Stored in-app notification %s for user %s", payload.type, user_id)
        return DeliveryResult.ok(IN_APP, target=user_id)


def _filters(
    user_id: uuid.UUID,
    unread: Optional[bool] = None,
    priority: Optional[str] = None,
    type: Optional[str] = None,
) -> list:
    conditions = [Notification.user_id == user_id]
    if unread is not None:
        conditions.append(Notification.is_read.is_(not unread))
    if priority:
        conditions.append(Notification.priority == priority)
    if type:
        conditions.append(Notification.type == type)
    return conditions


async def list_notifications(
    db: AsyncSession,
    user_id: uuid.UUID,
    unread: Optional[bool] = None,
    priority: Optional[str] = None,
    type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Notification], int]:
    conditions = _filters(user_id, unread, priority, type)
    total = (
        await db.execute(select(func.count()).select_from(Notification).where(*conditions))
    ).scalar() or 0
    result = await db.execute(
        select(Notification)
        .where(*conditions)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


async def count_unread(db: AsyncSession, user_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(Notification).where(*_filters(user_id, unread=True))
    )
    return result.scalar() or 0


async def get_notification(
    db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID
) -> Optional[Notification]:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def mark_read(db: AsyncSession, notification: Notification) -> Notification:
    notification.is_read = True
    notification.read_at = datetime.now(timezone.utc)
    await db.commit()
    return notification


async def mark_unread(db: AsyncSession, notification: Notification) -> Notification:
    notification.is_read = False
    notification.read_at = None
    await db.commit()
    return notification


async def mark_all_read(db: AsyncSession, user_id: uuid.UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(*_filters(user_id, unread=True))
        .values(is_read=True, read_at=datetime.now(timezone.utc))
    )
    await db.commit()
    return result.rowcount or 0
