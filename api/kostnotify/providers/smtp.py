"""SMTP email provider (generic, works with any SMTP server)."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from kostnotify.providers.base import EmailDeliveryError, EmailProvider

logger = logging.getLogger(__name__)


class SmtpProvider(EmailProvider):
    """Blocking smtplib session run in a worker thread, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30,
    ):
        super().__init__(from_email)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def provider_type(self) -> str:
        return "smtp"

    def build_message(
        self, to: str, subject: str, html_body: str, sender_name: Optional[str] = None
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.from_header(sender_name)
        msg["To"] = to
        msg.set_content(html_body, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        sender_name: Optional[str] = None,
    ) -> None:
        msg = self.build_message(to, subject, html_body, sender_name)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(f"smtp send failed: {exc}") from exc
        logger.info("Email sent via SMTP to=%s subject=%s", to, subject)
