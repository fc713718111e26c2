"""Telegram identity binding (one chat per user)."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kostnotify.models.base import Base, UUIDMixin, TimestampMixin


class UserTelegram(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "user_telegrams"
    __table_args__ = (
        Index("ix_user_telegrams_phone_active", "phone", "is_active"),
        Index("ix_user_telegrams_chat_id_active", "chat_id", "is_active"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, unique=True)
    chat_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    registered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user: Mapped["User"] = relationship(back_populates="telegram")


from kostnotify.models.user import User  # noqa: E402
