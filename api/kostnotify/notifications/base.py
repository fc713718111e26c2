"""Notification kinds: declared channels, payload model and per-channel renderers."""

from dataclasses import dataclass
from typing import Any, Callable, Union

from pydantic import BaseModel

from kostnotify.channels import IN_APP, MAIL, TELEGRAM, ChatMessage, InAppMessage, MailMessage


@dataclass(frozen=True)
class RenderContext:
    recipient_name: str
    locale: str = "id"
    app_url: str = ""
    timezone: str = "Asia/Jakarta"

    def url(self, path: str) -> str:
        return f"{self.app_url.rstrip('/')}{path}"


@dataclass(frozen=True)
class NotificationKind:
    event_type: str
    payload_model: type[BaseModel]
    to_mail: Callable[[Any, RenderContext], MailMessage]
    to_in_app: Callable[[Any, RenderContext], InAppMessage]
    to_telegram: Callable[[Any, RenderContext], ChatMessage]
    channels: tuple[str, ...] = (MAIL, IN_APP, TELEGRAM)

    def parse(self, payload: Union[BaseModel, dict]) -> BaseModel:
        """Validate a raw payload. Raises pydantic.ValidationError on bad input."""
        if isinstance(payload, self.payload_model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        return self.payload_model.model_validate(payload)

    def render(self, channel: str, payload: BaseModel, ctx: RenderContext):
        renderers = {
            MAIL: self.to_mail,
            IN_APP: self.to_in_app,
            TELEGRAM: self.to_telegram,
        }
        return renderers[channel](payload, ctx)
