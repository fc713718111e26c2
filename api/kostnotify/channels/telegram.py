"""Telegram channel adapter (Bot API over HTTPS)."""

import logging
from typing import Any, Optional

import httpx

from kostnotify.channels import TELEGRAM, ChannelAdapter, ChatMessage, DeliveryResult

logger = logging.getLogger(__name__)

PARSE_MODE = "HTML"
NOT_CONFIGURED = "telegram bot token not configured"


class TelegramError(RuntimeError):
    """The Bot API rejected a request or could not be reached."""


class TelegramAdapter(ChannelAdapter):
    """
    Sends messages through the Telegram Bot API.

    The bot token is passed in explicitly. Without one every send reports a
    "not configured" failure and no request is made.
    """

    def __init__(
        self,
        bot_token: Optional[str],
        api_base: str = "https://api.telegram.org",
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token or None
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return TELEGRAM

    @property
    def configured(self) -> bool:
        return self.bot_token is not None

    async def deliver(self, payload: ChatMessage, target: Any) -> DeliveryResult:
        return await self.send_message(str(target), payload.text)

    async def send_message(self, chat_id: str, text: str) -> DeliveryResult:
        if not self.configured:
            logger.warning("Telegram bot token not configured; message to %s not sent", chat_id)
            return DeliveryResult.failed(TELEGRAM, NOT_CONFIGURED, target=chat_id)

        try:
            await self._call(
                "sendMessage",
                {"chat_id": chat_id, "text": text, "parse_mode": PARSE_MODE},
            )
        except Exception as exc:
            logger.error("Failed to send telegram message to %s: %s", chat_id, exc)
            return DeliveryResult.failed(TELEGRAM, str(exc), target=chat_id)

        logger.info("Telegram message sent to %s", chat_id)
        return DeliveryResult.ok(TELEGRAM, target=chat_id)

    async def get_me(self) -> dict:
        return await self._call("getMe", {})

    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> dict:
        body: dict[str, Any] = {"url": url, "allowed_updates": ["message"]}
        if secret_token:
            body["secret_token"] = secret_token
        return await self._call("setWebhook", body)

    async def _call(self, method: str, body: dict) -> Any:
        if not self.configured:
            raise TelegramError(NOT_CONFIGURED)

        url = f"{self.api_base}/bot{self.bot_token}/{method}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=body)
            except httpx.HTTPError as exc:
                raise TelegramError(f"{method} request failed: {exc.__class__.__name__}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400 or not data.get("ok"):
            description = data.get("description") or response.text[:200]
            raise TelegramError(f"{method} failed: {response.status_code} {description}")

        return data.get("result")
