"""payment_received: a tenant's rent payment was marked completed."""

import html
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field

from kostnotify.channels import ChatMessage, InAppMessage, MailMessage
from kostnotify.notifications.base import NotificationKind, RenderContext
from kostnotify.notifications.formatting import format_currency, format_month, format_timestamp
from kostnotify.notifications.messages import t


class PaymentReceived(BaseModel):
    payment_id: Union[int, str]
    amount: Decimal = Field(default=Decimal(0), ge=0)
    period_month: date
    paid_at: Optional[datetime] = None
    transaction_id: Optional[str] = None


def _figures(p: PaymentReceived, ctx: RenderContext) -> dict[str, str]:
    return {
        "month": format_month(p.period_month, ctx.locale),
        "amount": format_currency(p.amount, ctx.locale),
        "paid_at": (
            format_timestamp(p.paid_at, ctx.locale, ctx.timezone)
            if p.paid_at
            else t(ctx.locale, "not_available")
        ),
        "transaction": p.transaction_id or t(ctx.locale, "not_available"),
        "receipt_url": ctx.url(f"/payments/{p.payment_id}"),
    }


def to_mail(p: PaymentReceived, ctx: RenderContext) -> MailMessage:
    f = _figures(p, ctx)
    loc = ctx.locale
    return MailMessage(
        subject=t(loc, "pr_subject", month=f["month"]),
        greeting=t(loc, "greeting", name=ctx.recipient_name),
        lines=[
            t(loc, "pr_summary", month=f["month"]),
            t(loc, "details_payment"),
            f"- {t(loc, 'label_period')}: {f['month']}",
            f"- {t(loc, 'label_amount')}: {f['amount']}",
            f"- {t(loc, 'label_paid_at')}: {f['paid_at']}",
            f"- {t(loc, 'label_transaction')}: {f['transaction']}",
        ],
        action_text=t(loc, "pr_action"),
        action_url=f["receipt_url"],
        outro_lines=[t(loc, "pr_thanks")],
    )


def to_telegram(p: PaymentReceived, ctx: RenderContext) -> ChatMessage:
    f = {k: html.escape(v) for k, v in _figures(p, ctx).items()}
    loc = ctx.locale
    text = (
        f"🎉 <b>{t(loc, 'pr_title')}</b>\n\n"
        f"{t(loc, 'greeting', name=html.escape(ctx.recipient_name))}\n\n"
        f"{t(loc, 'pr_chat_intro', month=f['month'])}\n\n"
        f"📋 <b>{t(loc, 'details_payment')}</b>\n"
        f"• {t(loc, 'label_period')}: {f['month']}\n"
        f"• {t(loc, 'label_amount')}: {f['amount']}\n"
        f"• {t(loc, 'label_paid_at')}: {f['paid_at']}\n"
        f"• {t(loc, 'label_transaction')}: <code>{f['transaction']}</code>\n\n"
        f"✅ {t(loc, 'pr_thanks')}\n\n"
        f"💻 {t(loc, 'pr_chat_link')}: {f['receipt_url']}"
    )
    return ChatMessage(text=text)


def to_in_app(p: PaymentReceived, ctx: RenderContext) -> InAppMessage:
    f = _figures(p, ctx)
    return InAppMessage(
        type="payment_received",
        title=t(ctx.locale, "pr_title"),
        message=t(ctx.locale, "pr_summary", month=f["month"]),
        data={
            "payment_id": p.payment_id,
            "amount": float(p.amount),
            "period_month": f["month"],
            "transaction_id": p.transaction_id,
        },
        action_url=f["receipt_url"],
        priority="normal",
    )


payment_received = NotificationKind(
    event_type="payment_received",
    payload_model=PaymentReceived,
    to_mail=to_mail,
    to_in_app=to_in_app,
    to_telegram=to_telegram,
)
