import json

import httpx
import pytest

from kostnotify.config import Settings
from kostnotify.providers import (
    EmailDeliveryError,
    ResendProvider,
    SendGridProvider,
    SmtpProvider,
    resolve_email_provider,
)


def recording_transport(status_code=200, captured=None):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status_code, json={"id": "msg_1"})

    return httpx.MockTransport(handler)


async def test_resend_posts_message_with_sender_name():
    captured = []
    provider = ResendProvider(
        "re_key", "noreply@kost.example.com", transport=recording_transport(captured=captured)
    )

    await provider.send_email("budi@example.com", "Halo", "<p>Hi</p>", "Kost Melati")

    request = captured[0]
    assert str(request.url) == ResendProvider.api_url
    assert request.headers["Authorization"] == "Bearer re_key"
    body = json.loads(request.content)
    assert body["from"] == "Kost Melati <noreply@kost.example.com>"
    assert body["to"] == ["budi@example.com"]


async def test_sendgrid_rejection_raises():
    captured = []
    provider = SendGridProvider(
        "sg_key", "noreply@kost.example.com", transport=recording_transport(403, captured)
    )

    with pytest.raises(EmailDeliveryError, match="sendgrid send failed: 403"):
        await provider.send_email("budi@example.com", "Halo", "<p>Hi</p>")

    body = json.loads(captured[0].content)
    assert body["from"] == {"email": "noreply@kost.example.com", "name": "Kost Manager"}


def test_smtp_message_is_html():
    provider = SmtpProvider("smtp.example.com", 587, "noreply@kost.example.com")

    msg = provider.build_message("budi@example.com", "Halo", "<p>Rp 1.500.000</p>")

    assert msg["From"] == "Kost Manager <noreply@kost.example.com>"
    assert msg.get_content_subtype() == "html"
    assert "Rp 1.500.000" in msg.get_content()


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({}, None),
        ({"mail_provider": "resend"}, None),
        ({"mail_provider": "resend", "mail_api_key": "k"}, ResendProvider),
        ({"mail_provider": "SendGrid", "mail_api_key": "k"}, SendGridProvider),
        ({"mail_provider": "smtp"}, None),
        ({"mail_provider": "smtp", "smtp_host": "smtp.example.com"}, SmtpProvider),
        ({"mail_provider": "carrier-pigeon", "mail_api_key": "k"}, None),
    ],
)
def test_resolve_email_provider(overrides, expected):
    base = {"admin_api_key": "k", "mail_from_email": "noreply@kost.example.com"}
    provider = resolve_email_provider(Settings(**{**base, **overrides}))

    if expected is None:
        assert provider is None
    else:
        assert isinstance(provider, expected)


def test_resolve_without_sender_address():
    settings = Settings(admin_api_key="k", mail_provider="resend", mail_api_key="k", mail_from_email="")
    assert resolve_email_provider(settings) is None
