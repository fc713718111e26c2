"""Base types for notification channel adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

MAIL = "mail"
IN_APP = "in_app"
TELEGRAM = "telegram"


@dataclass
class MailMessage:
    """A rendered email: greeting, ordered body lines and an optional action link."""
    subject: str
    greeting: str
    lines: list[str]
    action_text: Optional[str] = None
    action_url: Optional[str] = None
    outro_lines: list[str] = field(default_factory=list)


@dataclass
class InAppMessage:
    """A structured record persisted for the in-app notification centre."""
    type: str
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    action_url: Optional[str] = None
    priority: str = "normal"


@dataclass
class ChatMessage:
    """A single HTML-formatted text block for the Telegram Bot API."""
    text: str


@dataclass
class DeliveryResult:
    """Outcome of one delivery attempt on one channel."""
    channel: str
    success: bool
    target: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, channel: str, target: Any = None) -> "DeliveryResult":
        return cls(channel=channel, success=True, target=_as_target(target))

    @classmethod
    def failed(cls, channel: str, error: str, target: Any = None) -> "DeliveryResult":
        return cls(channel=channel, success=False, target=_as_target(target), error=error)


def _as_target(target: Any) -> Optional[str]:
    return None if target is None else str(target)


class ChannelAdapter(ABC):
    """
    Common interface for all delivery channels.

    ``deliver`` must not raise: transport and storage problems are reported
    as a failed ``DeliveryResult``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def deliver(self, payload: Any, target: Any) -> DeliveryResult:
        ...
