import os
from typing import Optional

os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from kostnotify.channels import DeliveryResult  # noqa: E402
from kostnotify.models import Base, User  # noqa: E402


@pytest.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def make_user(session_factory):
    async def _make_user(
        name: str = "Budi Santoso",
        email: Optional[str] = "budi@example.com",
        phone: Optional[str] = "081234567890",
        locale: str = "id",
    ) -> User:
        async with session_factory() as session:
            user = User(name=name, email=email, phone=phone, locale=locale)
            session.add(user)
            await session.commit()
            return user

    return _make_user


class SpyTelegram:
    """Records outgoing chat messages instead of calling the Bot API."""

    name = "telegram"

    def __init__(self, succeed: bool = True):
        self.sent: list[tuple[str, str]] = []
        self.succeed = succeed

    async def send_message(self, chat_id: str, text: str) -> DeliveryResult:
        self.sent.append((chat_id, text))
        if self.succeed:
            return DeliveryResult.ok("telegram", target=chat_id)
        return DeliveryResult.failed("telegram", "boom", target=chat_id)

    async def deliver(self, payload, target) -> DeliveryResult:
        return await self.send_message(str(target), payload.text)


@pytest.fixture
def spy_telegram():
    return SpyTelegram()


@pytest.fixture
def failing_telegram():
    return SpyTelegram(succeed=False)
