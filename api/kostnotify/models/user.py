from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kostnotify.models.base import Base, UUIDMixin, TimestampMixin


class User(Base, UUIDMixin, TimestampMixin):
    """Account owned by the host application; read-only from this service."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, unique=True, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="tenant")
    locale: Mapped[str] = mapped_column(String(10), nullable=False, default="id")

    telegram: Mapped[Optional["UserTelegram"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


from kostnotify.models.telegram import UserTelegram  # noqa: E402
