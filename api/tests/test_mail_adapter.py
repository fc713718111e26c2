from typing import Optional

from kostnotify.channels import MailMessage
from kostnotify.channels.mail import NOT_CONFIGURED, MailAdapter, build_email_html
from kostnotify.providers.base import EmailProvider

MESSAGE = MailMessage(
    subject="Pembayaran Diterima - Oktober 2026",
    greeting="Halo Budi,",
    lines=["Jumlah: Rp 1.500.000", "<script>"],
    action_text="Lihat Kwitansi",
    action_url="https://kost.example.com/payments/42",
    outro_lines=["Terima kasih!"],
)


class RecordingProvider(EmailProvider):
    def __init__(self, error: Optional[Exception] = None):
        self.sent = []
        self.error = error

    @property
    def provider_type(self) -> str:
        return "recording"

    async def send_email(self, to, subject, html_body, sender_name=None):
        if self.error:
            raise self.error
        self.sent.append((to, subject, html_body, sender_name))


async def test_mail_is_sent_through_provider():
    provider = RecordingProvider()
    adapter = MailAdapter(provider, sender_name="Kost Manager")

    result = await adapter.deliver(MESSAGE, "budi@example.com")

    assert result.success is True
    assert result.target == "budi@example.com"
    to, subject, html_body, sender = provider.sent[0]
    assert to == "budi@example.com"
    assert subject == MESSAGE.subject
    assert sender == "Kost Manager"
    assert "Rp 1.500.000" in html_body


async def test_missing_provider_is_a_failed_result():
    result = await MailAdapter(None).deliver(MESSAGE, "budi@example.com")

    assert result.success is False
    assert result.error == NOT_CONFIGURED


async def test_provider_error_is_a_failed_result():
    adapter = MailAdapter(RecordingProvider(error=RuntimeError("Resend error 422: invalid")))

    result = await adapter.deliver(MESSAGE, "budi@example.com")

    assert result.success is False
    assert "422" in result.error


def test_email_html_escapes_lines_and_links_action():
    body = build_email_html(MESSAGE, "Kost Manager")

    assert "&lt;script&gt;" in body
    assert "<script>" not in body
    assert 'href="https://kost.example.com/payments/42"' in body
    assert "Lihat Kwitansi" in body
    assert "Terima kasih!" in body
