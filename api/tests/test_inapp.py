import uuid

import pytest

from kostnotify.channels import InAppMessage
from kostnotify.channels import inapp
from kostnotify.channels.inapp import InAppAdapter
from kostnotify.models import Notification


def message(type="payment_received", priority="normal"):
    return InAppMessage(
        type=type,
        title="Pembayaran Diterima",
        message="Pembayaran sewa bulan Oktober 2026 telah diterima.",
        data={"payment_id": 42, "amount": 1500000.0},
        action_url="https://kost.example.com/payments/42",
        priority=priority,
    )


@pytest.fixture
def adapter(session_factory):
    return InAppAdapter(session_factory)


async def test_deliver_stores_a_notification_record(adapter, session_factory, make_user):
    user = await make_user()

    result = await adapter.deliver(message(), user.id)

    assert result.success is True
    assert result.target == str(user.id)
    async with session_factory() as db:
        rows, total = await inapp.list_notifications(db, user.id)
    assert total == 1
    assert rows[0].type == "payment_received"
    assert rows[0].data == {"payment_id": 42, "amount": 1500000.0}
    assert rows[0].is_read is False


async def test_invalid_target_is_a_failed_result(adapter):
    result = await adapter.deliver(message(), "not-a-uuid")

    assert result.success is False
    assert result.error == "invalid user id"


async def test_filters_and_read_state(adapter, session_factory, make_user):
    user = await make_user()
    await adapter.deliver(message(), user.id)
    await adapter.deliver(message(type="payment_reminder", priority="high"), user.id)
    await adapter.deliver(message(type="rental_approved"), str(user.id))

    async with session_factory() as db:
        high, _ = await inapp.list_notifications(db, user.id, priority="high")
        assert [n.type for n in high] == ["payment_reminder"]

        approvals, _ = await inapp.list_notifications(db, user.id, type="rental_approved")
        assert len(approvals) == 1

        assert await inapp.count_unread(db, user.id) == 3
        await inapp.mark_read(db, high[0])
        assert high[0].read_at is not None
        assert await inapp.count_unread(db, user.id) == 2

        read, total = await inapp.list_notifications(db, user.id, unread=False)
        assert total == 1 and read[0].id == high[0].id

        await inapp.mark_unread(db, high[0])
        assert high[0].read_at is None
        assert await inapp.mark_all_read(db, user.id) == 3
        assert await inapp.count_unread(db, user.id) == 0


async def test_notifications_are_scoped_to_their_user(adapter, session_factory, make_user):
    owner = await make_user(phone="0811")
    other = await make_user(name="Ani", phone="0822")
    await adapter.deliver(message(), owner.id)

    async with session_factory() as db:
        rows, _ = await inapp.list_notifications(db, owner.id)
        assert await inapp.get_notification(db, other.id, rows[0].id) is None
        assert await inapp.get_notification(db, owner.id, rows[0].id) is not None
        assert await inapp.get_notification(db, owner.id, uuid.uuid4()) is None


def test_unread_lookup_index_is_declared_on_the_model():
    indexes = {ix.name: [c.name for c in ix.columns] for ix in Notification.__table__.indexes}

    assert indexes["ix_notifications_user_id_is_read"] == ["user_id", "is_read"]
    assert "ix_notifications_user_id" in indexes
    assert "ix_notifications_type" in indexes
