import uuid
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from kostnotify.bindings import BindingStore
from kostnotify.channels import ChannelAdapter, DeliveryResult
from kostnotify.channels.dispatcher import Dispatcher, build_adapters
from kostnotify.channels.inapp import InAppAdapter
from kostnotify.exceptions import StorageError, UnknownEventType

REMINDER = {
    "due_date": "2026-11-01",
    "amount": 1500000,
    "kostan_name": "Kost Melati",
    "room_number": "A-12",
}


class FakeAdapter(ChannelAdapter):
    def __init__(self, name, succeed=True, raises=None):
        self._name = name
        self.succeed = succeed
        self.raises = raises
        self.calls = []

    @property
    def name(self):
        return self._name

    async def deliver(self, payload, target):
        self.calls.append((payload, target))
        if self.raises:
            raise self.raises
        if self.succeed:
            return DeliveryResult.ok(self._name, target=target)
        return DeliveryResult.failed(self._name, "provider down", target=target)


class FakeBindings:
    def __init__(self, chat_ids=None, error=None):
        self.chat_ids = chat_ids or {}
        self.error = error

    async def find_active_for_user(self, user_id):
        if self.error:
            raise self.error
        chat_id = self.chat_ids.get(user_id)
        return SimpleNamespace(chat_id=chat_id) if chat_id else None


def tenant(email="budi@example.com", locale="id"):
    return SimpleNamespace(id=uuid.uuid4(), name="Budi", email=email, phone="0811", locale=locale)


def by_channel(results):
    return {r.channel: r for r in results}


async def test_failing_channel_does_not_block_the_others():
    user = tenant()
    mail = FakeAdapter("mail", succeed=False)
    in_app = FakeAdapter("in_app")
    telegram = FakeAdapter("telegram")
    dispatcher = Dispatcher(
        build_adapters(mail, in_app, telegram), FakeBindings({user.id: "555"})
    )

    results = by_channel(await dispatcher.dispatch(user, "payment_reminder", REMINDER))

    assert results["mail"].success is False
    assert results["mail"].error == "provider down"
    assert results["in_app"].success is True
    assert results["telegram"].success is True
    assert telegram.calls[0][1] == "555"
    assert in_app.calls[0][1] == user.id
    assert mail.calls[0][1] == "budi@example.com"


async def test_adapter_exception_becomes_failed_result():
    user = tenant()
    telegram = FakeAdapter("telegram", raises=RuntimeError("socket closed"))
    dispatcher = Dispatcher(
        build_adapters(FakeAdapter("mail"), FakeAdapter("in_app"), telegram),
        FakeBindings({user.id: "555"}),
    )

    results = by_channel(await dispatcher.dispatch(user, "payment_reminder", REMINDER))

    assert results["telegram"].success is False
    assert "socket closed" in results["telegram"].error
    assert results["mail"].success is True
    assert results["in_app"].success is True


async def test_user_without_binding_gets_no_telegram_result():
    user = tenant()
    telegram = FakeAdapter("telegram")
    dispatcher = Dispatcher(
        build_adapters(FakeAdapter("mail"), FakeAdapter("in_app"), telegram), FakeBindings()
    )

    results = await dispatcher.dispatch(user, "rental_approved", {
        "rental_id": 7,
        "kostan_name": "Kost Melati",
        "room_name": "A-12",
        "start_date": "2026-11-01",
        "monthly_price": 1500000,
    })

    assert {r.channel for r in results} == {"mail", "in_app"}
    assert telegram.calls == []


async def test_user_without_email_skips_mail():
    user = tenant(email=None)
    mail = FakeAdapter("mail")
    dispatcher = Dispatcher(
        build_adapters(mail, FakeAdapter("in_app"), FakeAdapter("telegram")), FakeBindings()
    )

    results = await dispatcher.dispatch(user, "payment_reminder", REMINDER)

    assert [r.channel for r in results] == ["in_app"]
    assert mail.calls == []


async def test_binding_lookup_error_fails_only_telegram():
    user = tenant()
    dispatcher = Dispatcher(
        build_adapters(FakeAdapter("mail"), FakeAdapter("in_app"), FakeAdapter("telegram")),
        FakeBindings(error=StorageError("db down")),
    )

    results = by_channel(await dispatcher.dispatch(user, "payment_reminder", REMINDER))

    assert results["telegram"].success is False
    assert results["mail"].success is True
    assert results["in_app"].success is True


async def test_rendering_uses_the_user_locale():
    user = tenant(locale="en")
    telegram = FakeAdapter("telegram")
    dispatcher = Dispatcher(build_adapters(telegram), FakeBindings({user.id: "555"}))

    await dispatcher.dispatch(user, "payment_reminder", REMINDER)

    text = telegram.calls[0][0].text
    assert "Payment Reminder" in text
    assert "Rp 1,500,000" in text


async def test_unknown_event_type_raises_before_any_delivery():
    mail = FakeAdapter("mail")
    dispatcher = Dispatcher(build_adapters(mail), FakeBindings())

    with pytest.raises(UnknownEventType):
        await dispatcher.dispatch(tenant(), "room_cleaned", {})
    assert mail.calls == []


async def test_invalid_payload_raises():
    dispatcher = Dispatcher(build_adapters(FakeAdapter("mail")), FakeBindings())

    with pytest.raises(ValidationError):
        await dispatcher.dispatch(tenant(), "payment_reminder", {"amount": 1})


async def test_missing_user_raises():
    dispatcher = Dispatcher(build_adapters(FakeAdapter("mail")), FakeBindings())

    with pytest.raises(ValueError):
        await dispatcher.dispatch(None, "payment_reminder", REMINDER)


async def test_deactivated_binding_is_absent_not_failed(session_factory, make_user, spy_telegram):
    user = await make_user()
    bindings = BindingStore(session_factory)
    await bindings.upsert_for_user(user, "555")
    await bindings.deactivate(user)
    dispatcher = Dispatcher(
        build_adapters(InAppAdapter(session_factory), spy_telegram),
        bindings,
        app_url="https://kost.example.com",
    )

    results = await dispatcher.dispatch(user, "payment_reminder", REMINDER)

    assert [(r.channel, r.success) for r in results] == [("in_app", True)]
    assert spy_telegram.sent == []
