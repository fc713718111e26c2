"""Resend email provider (https://resend.com)."""

from typing import Optional

from kostnotify.providers.base import HttpEmailProvider


class ResendProvider(HttpEmailProvider):
    api_url = "https://api.resend.com/emails"

    @property
    def provider_type(self) -> str:
        return "resend"

    def build_body(self, to: str, subject: str, html_body: str, sender_name: Optional[str]) -> dict:
        return {
            "from": self.from_header(sender_name),
            "to": [to],
            "subject": subject,
            "html": html_body,
        }
