"""Email provider abstraction layer."""

from kostnotify.providers.base import EmailDeliveryError, EmailProvider, HttpEmailProvider
from kostnotify.providers.resend import ResendProvider
from kostnotify.providers.sendgrid import SendGridProvider
from kostnotify.providers.smtp import SmtpProvider
from kostnotify.providers.resolver import resolve_email_provider

__all__ = [
    "EmailDeliveryError",
    "EmailProvider",
    "HttpEmailProvider",
    "ResendProvider",
    "SendGridProvider",
    "SmtpProvider",
    "resolve_email_provider",
]
