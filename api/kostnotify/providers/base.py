"""Base email provider interface."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "Kost Manager"


class EmailDeliveryError(RuntimeError):
    """The provider refused or failed to accept a message."""


class EmailProvider(ABC):
    """
    Common interface for all email providers.
    Each provider implements send_email() using its own API/protocol.
    """

    def __init__(self, from_email: str):
        self.from_email = from_email

    @property
    @abstractmethod
    def provider_type(self) -> str:
        ...

    @abstractmethod
    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        sender_name: Optional[str] = None,
    ) -> None:
        """Send an HTML email to a single recipient. Raises on failure."""
        ...

    def from_header(self, sender_name: Optional[str] = None) -> str:
        return f"{sender_name or DEFAULT_SENDER} <{self.from_email}>"


class HttpEmailProvider(EmailProvider):
    """Provider backed by a JSON-over-HTTPS send endpoint with bearer auth."""

    api_url: str

    def __init__(
        self,
        api_key: str,
        from_email: str,
        timeout: float = 15,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(from_email)
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    def build_body(self, to: str, subject: str, html_body: str, sender_name: Optional[str]) -> dict:
        ...

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        sender_name: Optional[str] = None,
    ) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=self.build_body(to, subject, html_body, sender_name),
            )

        if resp.status_code >= 400:
            raise EmailDeliveryError(
                f"{self.provider_type} send failed: {resp.status_code} {resp.text[:200]}"
            )

        logger.info("Email sent via %s to=%s subject=%s", self.provider_type, to, subject)
