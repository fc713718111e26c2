"""
Telegram account linking conversation.

Handles the two inbound message shapes the bot cares about:

- ``/start``: reply with the sender's chat id and username and explain how to
  link the account (no binding needed yet).
- contact share: look the shared phone number up among registered users and,
  on a match, bind the chat to that user.

Everything else is ignored. The handler keeps no state between updates.
"""

import html
import logging
from typing import Any, Optional

from kostnotify.bindings import BindingStore
from kostnotify.channels.telegram import TelegramAdapter
from kostnotify.exceptions import StorageError
from kostnotify.notifications.messages import t
from kostnotify.users import UserRepository

logger = logging.getLogger(__name__)

START = "start"
CONTACT = "contact"
IGNORED = "ignored"


class LinkingConversation:
    def __init__(
        self,
        users: UserRepository,
        bindings: BindingStore,
        telegram: TelegramAdapter,
        app_name: str = "Kost Manager",
        locale: str = "id",
    ):
        self.users = users
        self.bindings = bindings
        self.telegram = telegram
        self.app_name = app_name
        self.locale = locale

    async def handle(self, update: dict) -> list[str]:
        """Process one update; returns the branches that ran (for logging and tests)."""
        message = update.get("message")
        if not isinstance(message, dict):
            logger.debug("Ignoring telegram update without message: %s", list(update))
            return [IGNORED]

        chat = message.get("chat")
        chat_id = chat.get("id") if isinstance(chat, dict) else None
        if chat_id is None:
            logger.debug("Ignoring telegram message without chat id")
            return [IGNORED]
        chat_id = str(chat_id)

        sender = message.get("from")
        if not isinstance(sender, dict):
            sender = {}
        text = message.get("text")
        if not isinstance(text, str):
            text = ""
        contact = message.get("contact")

        handled = []
        if text.startswith("/start"):
            await self.handle_start(chat_id, sender)
            handled.append(START)

        if isinstance(contact, dict) and contact.get("phone_number"):
            await self.handle_contact(chat_id, contact, sender)
            handled.append(CONTACT)

        return handled or [IGNORED]

    async def handle_start(self, chat_id: str, sender: dict) -> None:
        loc = self.locale
        username = sender.get("username")
        username_text = f"@{html.escape(str(username))}" if username else t(loc, "link_no_username")
        app = html.escape(self.app_name)

        text = (
            f"🏠 <b>{t(loc, 'link_welcome_title', app=app)}</b>\n\n"
            f"{t(loc, 'link_welcome_intro')}\n\n"
            f"1️⃣ {t(loc, 'link_welcome_step_phone', app=app)}\n"
            f"2️⃣ {t(loc, 'link_welcome_step_admin')}\n\n"
            f"📱 {t(loc, 'link_chat_id')}: <code>{html.escape(chat_id)}</code>\n"
            f"👤 {t(loc, 'link_username')}: {username_text}\n\n"
            f"{t(loc, 'link_welcome_outro')}"
        )
        await self._reply(chat_id, text)

    async def handle_contact(self, chat_id: str, contact: dict, sender: dict) -> None:
        phone = str(contact["phone_number"])
        loc = self.locale
        app = html.escape(self.app_name)

        try:
            user = await self.users.find_by_phone(phone)
        except StorageError:
            logger.exception("User lookup failed for telegram contact from chat %s", chat_id)
            await self._reply(chat_id, self._failure_text())
            return

        if user is None:
            logger.info("Telegram contact from chat %s did not match any user", chat_id)
            text = (
                f"⚠️ <b>{t(loc, 'link_not_found_title')}</b>\n\n"
                f"{t(loc, 'link_not_found_body', phone=html.escape(phone), app=app)}\n\n"
                f"{t(loc, 'link_not_found_hint')}"
            )
            await self._reply(chat_id, text)
            return

        try:
            await self.bindings.upsert_for_user(user, chat_id, _profile(sender))
        except StorageError:
            logger.exception("Failed to bind telegram chat %s to user %s", chat_id, user.id)
            await self._reply(chat_id, self._failure_text())
            return

        text = (
            f"✅ <b>{t(loc, 'link_success_title')}</b>\n\n"
            f"{t(loc, 'link_success_intro', app=app)}\n\n"
            f"🔔 {t(loc, 'link_success_list')}\n"
            f"• {t(loc, 'link_success_payment_received')}\n"
            f"• {t(loc, 'link_success_payment_reminder')}\n"
            f"• {t(loc, 'link_success_rental_approved')}\n\n"
            f"{t(loc, 'link_success_outro')}"
        )
        await self._reply(chat_id, text)

    def _failure_text(self) -> str:
        return f"❌ <b>{t(self.locale, 'link_failed_title')}</b>\n\n{t(self.locale, 'link_failed_body')}"

    async def _reply(self, chat_id: str, text: str) -> None:
        result = await self.telegram.send_message(chat_id, text)
        if not result.success:
            logger.warning("Reply to telegram chat %s not delivered: %s", chat_id, result.error)


def _profile(sender: dict) -> dict[str, Optional[Any]]:
    return {
        "username": sender.get("username"),
        "first_name": sender.get("first_name"),
        "last_name": sender.get("last_name"),
    }
