"""Resolve the outbound email provider from settings."""

import logging
from typing import Optional

from kostnotify.config import Settings
from kostnotify.providers.base import EmailProvider
from kostnotify.providers.resend import ResendProvider
from kostnotify.providers.sendgrid import SendGridProvider
from kostnotify.providers.smtp import SmtpProvider

logger = logging.getLogger(__name__)


def resolve_email_provider(settings: Settings) -> Optional[EmailProvider]:
    """
    Build the provider named by ``settings.mail_provider``.

    Returns None (mail channel disabled) when no provider is selected or the
    selected one lacks required settings.
    """
    provider_type = settings.mail_provider.strip().lower()
    if not provider_type:
        return None

    if not settings.mail_from_email:
        logger.warning("MAIL_FROM_EMAIL not set; mail channel disabled")
        return None

    if provider_type == "smtp":
        if not settings.smtp_host:
            logger.warning("SMTP_HOST not set; mail channel disabled")
            return None
        return SmtpProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.mail_from_email,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    elif provider_type in ("resend", "sendgrid"):
        if not settings.mail_api_key:
            logger.warning("MAIL_API_KEY not set for %s; mail channel disabled", provider_type)
            return None
        cls = ResendProvider if provider_type == "resend" else SendGridProvider
        return cls(api_key=settings.mail_api_key, from_email=settings.mail_from_email)
    else:
        logger.warning("Unknown mail provider %r; mail channel disabled", provider_type)
        return None
