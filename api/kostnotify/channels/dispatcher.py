"""Notification dispatcher: fans one event out to every channel it declares."""

import asyncio
import logging
from typing import Any, Union

from pydantic import BaseModel

from kostnotify.bindings import BindingStore
from kostnotify.channels import IN_APP, MAIL, TELEGRAM, ChannelAdapter, DeliveryResult
from kostnotify.exceptions import StorageError
from kostnotify.models.user import User
from kostnotify.notifications import NotificationKind, RenderContext, get_notification
from kostnotify.notifications.messages import resolve_locale

logger = logging.getLogger(__name__)

# Marker for a channel that has nothing to deliver to for this user.
_SKIP = object()


class Dispatcher:
    """
    Delivers a domain event to a user over mail, in-app and Telegram.

    Channels are independent: each one is rendered and delivered on its own,
    concurrently, and a failure on one never prevents the others from being
    attempted. Only an unknown event type, a missing user or an invalid
    payload raise; every channel-level problem is returned as a failed
    ``DeliveryResult`` or, when the user simply has no address on that
    channel, leaves that channel out of the results.
    """

    def __init__(
        self,
        adapters: dict[str, ChannelAdapter],
        bindings: BindingStore,
        app_url: str = "",
        default_locale: str = "id",
        timezone: str = "Asia/Jakarta",
    ):
        self.adapters = adapters
        self.bindings = bindings
        self.app_url = app_url
        self.default_locale = default_locale
        self.timezone = timezone

    async def dispatch(
        self,
        user: User,
        event_type: str,
        payload: Union[BaseModel, dict],
    ) -> list[DeliveryResult]:
        if user is None:
            raise ValueError("dispatch requires a user")
        kind = get_notification(event_type)
        data = kind.parse(payload)

        ctx = RenderContext(
            recipient_name=user.name,
            locale=resolve_locale(getattr(user, "locale", None), self.default_locale),
            app_url=self.app_url,
            timezone=self.timezone,
        )

        channels: list[str] = []
        tasks = []
        results: list[DeliveryResult] = []

        for channel in kind.channels:
            adapter = self.adapters.get(channel)
            if adapter is None:
                logger.warning("No adapter registered for channel %s; skipping", channel)
                continue

            target = await self._resolve_target(channel, user, results)
            if target is _SKIP:
                continue

            try:
                message = kind.render(channel, data, ctx)
            except Exception as exc:
                logger.error(
                    "Failed to render %s for channel %s (user %s): %s",
                    event_type, channel, user.id, exc, exc_info=True,
                )
                results.append(DeliveryResult.failed(channel, f"render error: {exc}", target=target))
                continue

            channels.append(channel)
            tasks.append(adapter.deliver(message, target))

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        for channel, outcome in zip(channels, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Channel %s raised while delivering %s to user %s: %s",
                    channel, event_type, user.id, outcome, exc_info=outcome,
                )
                outcome = DeliveryResult.failed(channel, str(outcome) or outcome.__class__.__name__)
            results.append(outcome)

        self._log_summary(kind, user, results)
        return results

    async def _resolve_target(
        self,
        channel: str,
        user: User,
        results: list[DeliveryResult],
    ) -> Any:
        if channel == MAIL:
            if not user.email:
                logger.warning("User %s has no email address; skipping mail", user.id)
                return _SKIP
            return user.email

        if channel == IN_APP:
            return user.id

        if channel == TELEGRAM:
            try:
                binding = await self.bindings.find_active_for_user(user.id)
            except StorageError as exc:
                logger.error("Telegram binding lookup failed for user %s: %s", user.id, exc)
                results.append(DeliveryResult.failed(TELEGRAM, str(exc)))
                return _SKIP
            if binding is None:
                logger.warning("User %s has no active telegram binding; skipping telegram", user.id)
                return _SKIP
            return binding.chat_id

        return user.id

    @staticmethod
    def _log_summary(kind: NotificationKind, user: User, results: list[DeliveryResult]) -> None:
        failed: list[str] = [r.channel for r in results if not r.success]
        sent: list[str] = [r.channel for r in results if r.success]
        log = logger.warning if failed else logger.info
        log(
            "Dispatched %s to user %s: sent=%s failed=%s",
            kind.event_type, user.id, sent or "-", failed or "-",
        )


def build_adapters(*adapters: ChannelAdapter) -> dict[str, ChannelAdapter]:
    return {adapter.name: adapter for adapter in adapters}

