from types import SimpleNamespace

import pytest

from kostnotify.exceptions import StorageError
from kostnotify.linking import CONTACT, IGNORED, START, LinkingConversation

SENDER = {"id": 555, "username": "budi", "first_name": "Budi", "last_name": "S"}


class FakeUsers:
    def __init__(self, users=(), error=None):
        self.by_phone = {u.phone: u for u in users}
        self.error = error

    async def find_by_phone(self, phone):
        if self.error:
            raise self.error
        return self.by_phone.get(phone)


class SpyBindings:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def upsert_for_user(self, user, chat_id, profile=None):
        self.calls.append((user, chat_id, profile))
        if self.error:
            raise self.error
        return SimpleNamespace(user_id=user.id, chat_id=chat_id)


def start_update(text="/start", username="budi"):
    sender = dict(SENDER, username=username)
    return {"update_id": 1, "message": {"chat": {"id": 555}, "from": sender, "text": text}}


def contact_update(phone):
    return {
        "update_id": 2,
        "message": {
            "chat": {"id": 555},
            "from": SENDER,
            "contact": {"phone_number": phone, "user_id": 555},
        },
    }


@pytest.fixture
def tenant():
    return SimpleNamespace(id="user-1", name="Budi", phone="081234567890")


def conversation(spy_telegram, users=None, bindings=None):
    return LinkingConversation(
        users or FakeUsers(),
        bindings or SpyBindings(),
        spy_telegram,
        app_name="Kost Manager",
    )


async def test_start_replies_once_with_chat_id_and_username(spy_telegram):
    bindings = SpyBindings()

    handled = await conversation(spy_telegram, bindings=bindings).handle(start_update())

    assert handled == [START]
    assert len(spy_telegram.sent) == 1
    chat_id, text = spy_telegram.sent[0]
    assert chat_id == "555"
    assert "<code>555</code>" in text
    assert "@budi" in text
    assert bindings.calls == []


async def test_start_without_username(spy_telegram):
    await conversation(spy_telegram).handle(start_update(username=None))

    assert "Tidak ada" in spy_telegram.sent[0][1]


async def test_start_with_deep_link_parameter(spy_telegram):
    handled = await conversation(spy_telegram).handle(start_update(text="/start abc"))

    assert handled == [START]


async def test_unknown_phone_never_binds(spy_telegram, tenant):
    bindings = SpyBindings()
    conv = conversation(spy_telegram, FakeUsers([tenant]), bindings)

    handled = await conv.handle(contact_update("089999999999"))

    assert handled == [CONTACT]
    assert bindings.calls == []
    assert "089999999999" in spy_telegram.sent[0][1]
    assert "Nomor Tidak Ditemukan" in spy_telegram.sent[0][1]


async def test_known_phone_binds_chat_and_confirms(spy_telegram, tenant):
    bindings = SpyBindings()
    conv = conversation(spy_telegram, FakeUsers([tenant]), bindings)

    await conv.handle(contact_update("081234567890"))

    user, chat_id, profile = bindings.calls[0]
    assert user is tenant
    assert chat_id == "555"
    assert profile == {"username": "budi", "first_name": "Budi", "last_name": "S"}
    assert len(spy_telegram.sent) == 1
    assert "Registrasi Berhasil" in spy_telegram.sent[0][1]


async def test_storage_failure_sends_failure_message(spy_telegram, tenant):
    bindings = SpyBindings(error=StorageError("unique violation"))
    conv = conversation(spy_telegram, FakeUsers([tenant]), bindings)

    await conv.handle(contact_update("081234567890"))

    assert len(bindings.calls) == 1
    assert "Registrasi Gagal" in spy_telegram.sent[0][1]


async def test_user_lookup_failure_sends_failure_message(spy_telegram):
    conv = conversation(spy_telegram, FakeUsers(error=StorageError("db down")))

    await conv.handle(contact_update("081234567890"))

    assert "Registrasi Gagal" in spy_telegram.sent[0][1]


@pytest.mark.parametrize(
    "update",
    [
        {"update_id": 3},
        {"update_id": 4, "edited_message": {"chat": {"id": 555}, "text": "/start"}},
        {"update_id": 5, "message": {"chat": {"id": 555}, "text": "halo"}},
        {"update_id": 6, "message": {"text": "/start"}},
        {"update_id": 7, "message": {"chat": "oops", "text": "/start"}},
        {"update_id": 8, "message": {"chat": {"id": 555}, "text": 123}},
        {"update_id": 9, "message": {"chat": {"id": 555}, "contact": "081234567890"}},
    ],
)
async def test_other_updates_are_ignored(spy_telegram, update):
    handled = await conversation(spy_telegram).handle(update)

    assert handled == [IGNORED]
    assert spy_telegram.sent == []


async def test_undelivered_reply_does_not_raise(failing_telegram, tenant):
    conv = conversation(failing_telegram, FakeUsers([tenant]))

    handled = await conv.handle(contact_update("081234567890"))

    assert handled == [CONTACT]
    assert len(failing_telegram.sent) == 1


async def test_start_with_malformed_sender(spy_telegram):
    update = {"update_id": 10, "message": {"chat": {"id": 555}, "from": "x", "text": "/start"}}

    handled = await conversation(spy_telegram).handle(update)

    assert handled == [START]
    assert "<code>555</code>" in spy_telegram.sent[0][1]
    assert "Tidak ada" in spy_telegram.sent[0][1]
