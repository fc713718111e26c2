"""SendGrid email provider (https://sendgrid.com)."""

from typing import Optional

from kostnotify.providers.base import DEFAULT_SENDER, HttpEmailProvider


class SendGridProvider(HttpEmailProvider):
    """v3 Mail Send API; answers 202 Accepted on success."""

    api_url = "https://api.sendgrid.com/v3/mail/send"

    @property
    def provider_type(self) -> str:
        return "sendgrid"

    def build_body(self, to: str, subject: str, html_body: str, sender_name: Optional[str]) -> dict:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email, "name": sender_name or DEFAULT_SENDER},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }
