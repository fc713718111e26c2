"""Mail channel adapter."""

import html as html_lib
import logging
from typing import Any, Optional

from kostnotify.channels import MAIL, ChannelAdapter, DeliveryResult, MailMessage
from kostnotify.providers.base import EmailProvider

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "mail provider not configured"


class MailAdapter(ChannelAdapter):
    """Renders a ``MailMessage`` to HTML and hands it to the email provider."""

    def __init__(self, provider: Optional[EmailProvider], sender_name: str = "Kost Manager"):
        self.provider = provider
        self.sender_name = sender_name

    @property
    def name(self) -> str:
        return MAIL

    async def deliver(self, payload: MailMessage, target: Any) -> DeliveryResult:
        to = str(target)
        if self.provider is None:
            logger.warning("Mail provider not configured; email to %s not sent", to)
            return DeliveryResult.failed(MAIL, NOT_CONFIGURED, target=to)

        try:
            html_body = build_email_html(payload, self.sender_name)
            await self.provider.send_email(to, payload.subject, html_body, self.sender_name)
        except Exception as exc:
            logger.error(
                "Email send failed to %s via %s: %s", to, self.provider.provider_type, exc,
                exc_info=True,
            )
            return DeliveryResult.failed(MAIL, str(exc) or exc.__class__.__name__, target=to)

        logger.info("Email sent to %s via %s", to, self.provider.provider_type)
        return DeliveryResult.ok(MAIL, target=to)


def build_email_html(message: MailMessage, sender_name: str) -> str:
    """Build the HTML email body: greeting, lines, action button, closing lines."""
    escape = html_lib.escape

    def paragraphs(lines: list[str]) -> str:
        return "".join(
            f'<p style="margin:0 0 10px;color:#333;font-size:14px;line-height:1.5;">{escape(line)}</p>'
            for line in lines
        )

    action_button = ""
    if message.action_url:
        action_button = (
            f'<tr><td style="padding:0 32px 24px;"><a href="{escape(message.action_url)}" '
            f'style="display:inline-block;padding:10px 20px;background:#1a1a2e;color:#fff;'
            f'text-decoration:none;border-radius:5px;font-size:14px;">'
            f"{escape(message.action_text or message.action_url)}</a></td></tr>"
        )

    outro = ""
    if message.outro_lines:
        outro = f'<tr><td style="padding:0 32px 24px;">{paragraphs(message.outro_lines)}</td></tr>'

    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="margin:0;padding:0;background:#f4f5f7;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial,sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background:#f4f5f7;padding:32px 0;">
    <tr><td align="center">
      <table width="600" cellpadding="0" cellspacing="0" style="background:#ffffff;border-radius:8px;overflow:hidden;box-shadow:0 2px 8px rgba(0,0,0,0.08);">
        <tr>
          <td style="background:#1a1a2e;padding:24px 32px;">
            <h1 style="margin:0;color:#ffffff;font-size:20px;font-weight:600;">{escape(message.subject)}</h1>
          </td>
        </tr>
        <tr>
          <td style="padding:24px 32px;">
            <p style="margin:0 0 16px;color:#222;font-size:15px;font-weight:600;">{escape(message.greeting)}</p>
            {paragraphs(message.lines)}
          </td>
        </tr>
        {action_button}
        {outro}
        <tr>
          <td style="padding:16px 32px;background:#fafafa;border-top:1px solid #eee;">
            <p style="margin:0;color:#999;font-size:12px;">{escape(sender_name)}</p>
          </td>
        </tr>
      </table>
    </td></tr>
  </table>
</body>
</html>"""
