"""Composition root: builds adapters, stores and services from settings."""

from functools import lru_cache

from kostnotify.bindings import BindingStore
from kostnotify.channels.dispatcher import Dispatcher, build_adapters
from kostnotify.channels.inapp import InAppAdapter
from kostnotify.channels.mail import MailAdapter
from kostnotify.channels.telegram import TelegramAdapter
from kostnotify.config import settings
from kostnotify.database import async_session
from kostnotify.linking import LinkingConversation
from kostnotify.providers import resolve_email_provider
from kostnotify.users import UserRepository


@lru_cache(maxsize=1)
def get_telegram() -> TelegramAdapter:
    return TelegramAdapter(
        bot_token=settings.telegram_bot_token,
        api_base=settings.telegram_api_base,
        timeout=settings.telegram_timeout,
    )


@lru_cache(maxsize=1)
def get_bindings() -> BindingStore:
    return BindingStore(async_session)


@lru_cache(maxsize=1)
def get_users() -> UserRepository:
    return UserRepository(async_session)


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    adapters = build_adapters(
        MailAdapter(resolve_email_provider(settings), sender_name=settings.mail_sender_name),
        InAppAdapter(async_session),
        get_telegram(),
    )
    return Dispatcher(
        adapters,
        get_bindings(),
        app_url=settings.app_url,
        default_locale=settings.default_locale,
        timezone=settings.display_timezone,
    )


@lru_cache(maxsize=1)
def get_conversation() -> LinkingConversation:
    return LinkingConversation(
        get_users(),
        get_bindings(),
        get_telegram(),
        app_name=settings.app_name,
        locale=settings.default_locale,
    )
